"""构建编排器

- models.py: BuildPlan / BuildReport
- steps.py: 5 个步骤 + teardown
- orchestrator.py: 协调器
"""

from wfpack.services.orchestrator.models import BuildPlan, BuildReport
from wfpack.services.orchestrator.orchestrator import Orchestrator
from wfpack.services.orchestrator.steps import BuildSteps

__all__ = [
    "BuildPlan",
    "BuildReport",
    "BuildSteps",
    "Orchestrator",
]
