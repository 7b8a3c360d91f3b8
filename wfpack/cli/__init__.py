"""wfpack 命令行接口

用法:
    wfpack              # 自动检测最新版本，已是最新则直接退出
    wfpack 6.7.0        # 构建并安装指定版本
"""

from __future__ import annotations

import logging
import signal
import sys
from pathlib import Path

import click

from wfpack import __version__
from wfpack.core.config import DEFAULT_CONFIG_FILE, Config
from wfpack.core.exceptions import WfpackError
from wfpack.core.models import Outcome
from wfpack.services.container import ServiceContainer
from wfpack.services.orchestrator import BuildPlan, Orchestrator
from wfpack.utils.logger import setup_logging_from_env

logger = logging.getLogger(__name__)


def _handle_sigterm(signum: int, frame: object) -> None:
    # 转成正常退出，保证 finally 中的临时目录清理得以执行
    logger.warning("收到信号 %d，终止运行", signum)
    sys.exit(128 + signum)


def _load_config(path: str, output_dir: str | None, download_dir: str | None) -> Config:
    if path != DEFAULT_CONFIG_FILE and not Path(path).exists():
        raise click.BadParameter(f"配置文件不存在: {path}", param_hint="--config")
    cfg = Config.from_file(path)
    return cfg.with_overrides(output_dir=output_dir, download_dir=download_dir)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("target_version", metavar="[VERSION]", required=False)
@click.option("--config", "-c", "config_path", default=DEFAULT_CONFIG_FILE,
              show_default=True, help="配置文件路径")
@click.option("--no-install", is_flag=True, help="只构建 .deb，不调用 apt 安装")
@click.option("--output-dir", "-o", default=None, help=".deb 输出目录（默认当前目录）")
@click.option("--download-dir", default=None, help="归档下载/缓存目录（默认当前目录）")
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="日志级别（默认读取 WFPACK_LOG_LEVEL）")
@click.version_option(version=__version__, prog_name="wfpack")
def main(
    target_version: str | None, config_path: str, no_install: bool,
    output_dir: str | None, download_dir: str | None, log_level: str | None,
) -> None:
    """下载 Waterfox 上游二进制包，打包为 .deb 并安装"""
    setup_logging_from_env(log_level)
    signal.signal(signal.SIGTERM, _handle_sigterm)

    try:
        cfg = _load_config(config_path, output_dir, download_dir)
        orch = Orchestrator(ServiceContainer(config=cfg))
        report = orch.run(BuildPlan(version=target_version, install=not no_install))
    except WfpackError as e:
        logger.debug("运行失败", exc_info=True)
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(e.exit_code)

    ctx = report.context
    if report.outcome is Outcome.UP_TO_DATE:
        click.echo(f"已是最新 ({ctx.installed_version})，无需操作。")
    elif report.outcome is Outcome.BUILT:
        click.echo(f"✔ 包已构建: {report.artifact}")
    elif report.outcome is Outcome.INSTALLED:
        click.echo(f"✔ 包已构建: {report.artifact}")
        click.echo(f"✔ {cfg.display_name} {ctx.version} 安装成功。")
