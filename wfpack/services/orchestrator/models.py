"""编排器数据模型

数据类：
- BuildPlan: 本次运行的输入
- BuildReport: 各步骤记录与最终结果
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wfpack.core.models import BuildContext, Outcome


@dataclass
class BuildPlan:
    """构建计划"""

    version: str | None = None   # None 表示自动检测最新版本
    install: bool = True


@dataclass
class BuildReport:
    """构建执行报告"""

    plan: BuildPlan
    context: BuildContext
    outcome: Outcome = Outcome.PENDING
    steps: list[dict[str, Any]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.outcome in (Outcome.UP_TO_DATE, Outcome.BUILT, Outcome.INSTALLED)

    @property
    def artifact(self) -> str:
        path = self.context.artifact_path
        return str(path) if path else ""
