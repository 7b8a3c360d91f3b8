"""归档拉取器

策略: 本地优先
  1. 下载目录中已存在同名归档 → 直接复用（不做校验）
  2. 不存在则按 URL 模板远程下载
"""

from __future__ import annotations

import logging
import urllib.error
from pathlib import Path

from wfpack.core.config import Config
from wfpack.core.exceptions import DownloadError, ValidationError
from wfpack.utils import net

logger = logging.getLogger(__name__)


class ArtifactFetcher:
    """上游归档拉取器"""

    def __init__(self, config: Config) -> None:
        self.config = config

    def archive_path(self, version: str) -> Path:
        return Path(self.config.download_dir) / self.config.archive_name(version)

    def is_cached(self, version: str) -> bool:
        return self.archive_path(version).is_file()

    def fetch(self, version: str) -> Path:
        """返回归档本地路径，必要时下载

        Raises:
            DownloadError: 传输失败或 URL 非法
        """
        dest = self.archive_path(version)
        if dest.is_file():
            logger.info("归档已存在，跳过下载: %s", dest)
            return dest

        url = self.config.download_url(version)
        logger.info("下载 %s …", url)
        try:
            net.download_file(url, dest, timeout=self.config.http_timeout)
        except ValidationError as e:
            raise DownloadError(str(e)) from e
        except (urllib.error.URLError, OSError) as e:
            raise DownloadError(f"下载失败: {url} - {e}") from e
        logger.info("  已保存: %s", dest)
        return dest
