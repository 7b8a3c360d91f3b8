"""Shell 命令执行工具 — 统一子进程调用

dpkg-query / dpkg-deb / apt 均通过 CommandExecutor 协议调用，
测试时注入记录型实现即可，无需 patch subprocess。
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol

from wfpack.core.exceptions import ExecutionError

logger = logging.getLogger(__name__)


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议

    capture=False 时子进程直接继承终端（apt 进度条、sudo 口令提示），
    返回结果中 stdout/stderr 为空串。
    命令不存在时抛 FileNotFoundError，由调用方决定如何处理。
    """

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
        capture: bool = True,
    ) -> CommandResult:
        ...


# =========================================================================
# 默认实现: 本地执行器
# =========================================================================

class LocalExecutor:
    """本地子进程执行器（默认实现）"""

    def execute(
        self,
        cmd: str | list[str],
        *,
        cwd: str = ".",
        env: dict[str, str] | None = None,
        timeout: int | None = None,
        capture: bool = True,
    ) -> CommandResult:
        args = shlex.split(cmd) if isinstance(cmd, str) else list(cmd)
        logger.debug("执行: %s (cwd=%s)", shlex.join(args), cwd)
        r = subprocess.run(
            args, capture_output=capture, text=True,
            cwd=cwd, env=env, check=False, timeout=timeout,
        )
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout or "",
            stderr=r.stderr or "",
        )


def run_checked(
    executor: CommandExecutor,
    cmd: list[str], *,
    cwd: str = ".",
    label: str = "cmd",
) -> CommandResult:
    """执行命令，失败抛 ExecutionError

    Args:
        executor: 命令执行器
        cmd: 参数列表
        cwd: 工作目录
        label: 日志与错误信息中的标签
    """
    logger.info("  %s: %s", label, shlex.join(cmd))
    try:
        r = executor.execute(cmd, cwd=cwd)
    except FileNotFoundError as e:
        raise ExecutionError(f"{label}失败: 找不到命令 {cmd[0]}") from e
    if not r.success:
        detail = (r.stderr or r.stdout).strip()[:500]
        raise ExecutionError(f"{label}失败 (rc={r.returncode}): {detail}")
    return r
