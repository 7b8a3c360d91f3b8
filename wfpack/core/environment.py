"""宿主环境探测

读取 /etc/debian_version 的主版本号，用于选择依赖清单。
"""

from __future__ import annotations

import logging
from pathlib import Path

from wfpack.core.config import Config
from wfpack.core.exceptions import UnsupportedEnvironmentError

logger = logging.getLogger(__name__)


def parse_debian_major(text: str) -> int | None:
    """取第一个 '.' 之前的部分，非纯数字（如 trixie/sid）返回 None"""
    head = text.strip().split(".", 1)[0]
    if head.isdigit():
        return int(head)
    return None


class EnvironmentDetector:
    """Debian 主版本探测器"""

    def __init__(self, config: Config) -> None:
        self.config = config

    def detect(self) -> int:
        """返回 Debian 主版本

        无法识别时退化为最新支持的主版本并记录 WARNING。

        Raises:
            UnsupportedEnvironmentError: 低于最低支持版本
        """
        path = Path(self.config.debian_version_file)
        fallback = self.config.default_debian_major
        try:
            raw = path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            logger.warning("%s 不存在，按 Debian %d 处理", path, fallback)
            major = fallback
        except OSError as e:
            logger.warning("无法读取 %s (%s)，按 Debian %d 处理", path, e, fallback)
            major = fallback
        else:
            parsed = parse_debian_major(raw)
            if parsed is None:
                # testing/unstable 写的是代号而不是数字
                logger.warning(
                    "无法从 %s 解析主版本 (%r)，按 Debian %d 处理",
                    path, raw.strip(), fallback,
                )
                major = fallback
            else:
                major = parsed

        if major < self.config.min_debian_major:
            raise UnsupportedEnvironmentError(
                f"需要 Debian {self.config.min_debian_major} 或更新版本 "
                f"(检测到: {major})"
            )
        logger.info("    检测到 Debian:  %d", major)
        return major
