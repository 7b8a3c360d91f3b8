"""wfpack 日志配置

人类可读格式用于终端交互，JSON 格式便于 CI 流水线采集构建日志。
日志统一输出到 stderr，stdout 只留给 click.echo 的最终结论。
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone

ENV_LOG_LEVEL = "WFPACK_LOG_LEVEL"
ENV_LOG_JSON = "WFPACK_LOG_JSON"

HANDLER_NAME = "wfpack"
_TEXT_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器

    输出格式:
        {
            "timestamp": "2026-02-18T12:00:00+00:00",
            "level": "INFO",
            "logger": "wfpack.core.fetcher",
            "message": "下载: https://...",
            "line": 42,
            "step": "fetch" (仅在通过 extra 传入时),
            "exception": "traceback..." (仅在有异常时)
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": record.lineno,
        }
        step = getattr(record, "step", None)
        if step:
            entry["step"] = step
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器

    参数:
        level: 日志级别字符串（DEBUG, INFO, WARNING, ERROR）
        json_output: 为 True 时使用 JSON 格式，否则使用人类可读格式

    重复调用是安全的：已有 handler 会先被移除，避免日志重复输出。
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    root.addHandler(handler)


def reset_logging() -> None:
    """移除 setup_logging 安装的 handler，其余 handler 保持不变"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)
            handler.close()


def setup_logging_from_env(level: str | None = None) -> None:
    """按环境变量配置日志，显式传入的 level 优先"""
    setup_logging(
        level=level or os.getenv(ENV_LOG_LEVEL, "INFO"),
        json_output=os.getenv(ENV_LOG_JSON, "") == "1",
    )
