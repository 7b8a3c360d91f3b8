"""构建编排器 - 协调 5 步流水线

START → RESOLVE_VERSION → {DONE(no-op) | DETECT_ENV → FETCH → ASSEMBLE → INSTALL → DONE}
任一步骤抛出异常即终止，teardown 在 finally 中执行。
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from wfpack.core.models import BuildContext
from wfpack.services.container import ServiceContainer
from wfpack.services.orchestrator.models import BuildPlan, BuildReport
from wfpack.services.orchestrator.steps import BuildSteps

logger = logging.getLogger(__name__)


class Orchestrator:
    """5 步构建编排器"""

    def __init__(self, container: ServiceContainer | None = None) -> None:
        self.c = container or ServiceContainer()
        self.steps = BuildSteps(self.c)

    def run(self, plan: BuildPlan) -> BuildReport:
        ctx = BuildContext()
        report = BuildReport(plan=plan, context=ctx)

        ctx.work_dir = Path(tempfile.mkdtemp(prefix="wfpack-"))
        logger.debug("工作目录: %s", ctx.work_dir)
        try:
            if not self.steps.resolve_version(plan, ctx, report):
                return report
            self.steps.detect_env(ctx, report)
            self.steps.fetch(ctx, report)
            self.steps.assemble(ctx, report)
            self.steps.install(plan, ctx, report)
        finally:
            self.steps.teardown(ctx, report)

        return report
