"""安装器 — 通过 apt 安装刚构建的 .deb"""

from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path

from wfpack.core.config import Config
from wfpack.core.exceptions import InstallError
from wfpack.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class Installer:
    """apt 安装器（不重试，不回滚）"""

    def __init__(self, config: Config, executor: CommandExecutor) -> None:
        self.config = config
        self.executor = executor

    def command(self, artifact: Path) -> list[str]:
        # apt 需要 ./ 或绝对路径才会把参数当作本地文件
        target = str(artifact) if artifact.is_absolute() else f"./{artifact}"
        cmd = ["apt", "install", "-y", target]
        if self.config.use_sudo and os.geteuid() != 0:
            cmd.insert(0, "sudo")
        return cmd

    def install(self, artifact: Path) -> None:
        """安装 .deb，失败时携带包管理器退出码抛出

        Raises:
            InstallError: 包管理器拒绝安装（如依赖未满足）或命令不存在
        """
        cmd = self.command(artifact)
        logger.info("安装 %s …", artifact.name)
        logger.info("  %s", shlex.join(cmd))
        try:
            r = self.executor.execute(cmd, capture=False)
        except FileNotFoundError as e:
            raise InstallError(f"安装失败: 找不到命令 {cmd[0]}", returncode=127) from e
        if not r.success:
            raise InstallError(
                f"安装 {artifact.name} 失败 (rc={r.returncode})",
                returncode=r.returncode,
            )
        logger.info("安装完成: %s", artifact.name)
