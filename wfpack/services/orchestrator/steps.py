"""编排器步骤实现 - 5 步流水线

步骤顺序：
1. resolve_version - 确定版本，已是最新则提前结束
2. detect_env - 探测 Debian 主版本并选择依赖清单
3. fetch - 获取上游归档（本地优先）
4. assemble - 组装目录树并构建 .deb
5. install - apt 安装
以及 teardown - 删除临时工作目录（任何退出路径都会执行）
"""

from __future__ import annotations

import logging
import shutil
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wfpack.core.models import BuildContext
    from wfpack.services.container import ServiceContainer
    from wfpack.services.orchestrator.models import BuildPlan, BuildReport

from wfpack.core.depends import select_depends
from wfpack.core.exceptions import WfpackError
from wfpack.core.models import Outcome

logger = logging.getLogger(__name__)


class BuildSteps:
    """编排步骤集合"""

    def __init__(self, container: ServiceContainer) -> None:
        self.c = container

    def resolve_version(
        self, plan: BuildPlan, ctx: BuildContext, report: BuildReport,
    ) -> bool:
        """步骤1: 返回 False 表示无需继续"""
        rv = self.c.resolver.resolve(plan.version)
        ctx.version = rv.version
        ctx.installed_version = rv.installed
        report.steps.append({
            "step": "resolve_version", "status": "done",
            "version": rv.version, "installed": rv.installed,
            "explicit": rv.explicit,
        })
        if not rv.needs_build:
            report.outcome = Outcome.UP_TO_DATE
            logger.info(
                "[Step 1] 已是最新: %s", rv.installed,
                extra={"step": "resolve_version"},
            )
            return False
        logger.info("[Step 1] 目标版本: %s", rv.version, extra={"step": "resolve_version"})
        return True

    def detect_env(self, ctx: BuildContext, report: BuildReport) -> None:
        """步骤2: 探测宿主环境，选择依赖清单"""
        major = self.c.environment.detect()
        ctx.debian_major = major
        ctx.depends = select_depends(major, self.c.config.t64_threshold)
        variant = "t64" if major >= self.c.config.t64_threshold else "classic"
        report.steps.append({
            "step": "detect_env", "status": "done",
            "debian_major": major, "depends_variant": variant,
        })
        logger.info(
            "[Step 2] Debian %d, 依赖清单: %s", major, variant,
            extra={"step": "detect_env"},
        )

    def fetch(self, ctx: BuildContext, report: BuildReport) -> None:
        """步骤3: 获取上游归档"""
        cached = self.c.fetcher.is_cached(ctx.version)
        ctx.archive_path = self.c.fetcher.fetch(ctx.version)
        ctx.archive_cached = cached
        report.steps.append({
            "step": "fetch", "status": "cached" if cached else "done",
            "archive": str(ctx.archive_path),
        })
        logger.info("[Step 3] 归档就绪: %s", ctx.archive_path, extra={"step": "fetch"})

    def assemble(self, ctx: BuildContext, report: BuildReport) -> None:
        """步骤4: 组装并构建 .deb"""
        if ctx.archive_path is None or ctx.work_dir is None:
            raise WfpackError("组装前必须先获取归档并创建工作目录")
        ctx.staging_root = self.c.assembler.staging_root(ctx.work_dir, ctx.version)
        artifact, descriptor = self.c.assembler.assemble(
            ctx.archive_path, ctx.version, ctx.depends, ctx.work_dir,
        )
        ctx.artifact_path = artifact
        ctx.descriptor = descriptor
        report.outcome = Outcome.BUILT
        report.steps.append({
            "step": "assemble", "status": "done",
            "artifact": str(artifact),
            "installed_size": descriptor.installed_size,
        })
        logger.info("[Step 4] 包已构建: %s", artifact, extra={"step": "assemble"})

    def install(
        self, plan: BuildPlan, ctx: BuildContext, report: BuildReport,
    ) -> None:
        """步骤5: 安装"""
        if not plan.install:
            report.steps.append({"step": "install", "status": "skipped"})
            logger.info("[Step 5] 已跳过安装", extra={"step": "install"})
            return
        if ctx.artifact_path is None:
            raise WfpackError("安装前必须先构建 .deb")
        self.c.installer.install(ctx.artifact_path)
        report.outcome = Outcome.INSTALLED
        report.steps.append({"step": "install", "status": "done"})
        logger.info(
            "[Step 5] 安装完成: %s %s", self.c.config.pkg_name, ctx.version,
            extra={"step": "install"},
        )

    def teardown(self, ctx: BuildContext, report: BuildReport) -> None:
        """清理临时工作目录"""
        if ctx.work_dir is not None and ctx.work_dir.exists():
            shutil.rmtree(ctx.work_dir, ignore_errors=True)
            logger.debug("已删除工作目录: %s", ctx.work_dir)
        report.steps.append({"step": "teardown", "status": "done"})
