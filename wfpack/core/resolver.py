"""版本解析器

职责:
- 显式版本校验（跳过已安装检查）
- 从 GitHub releases API 获取最新版本
- 查询 dpkg 数据库中的已安装版本
- 判断是否需要构建
"""

from __future__ import annotations

import logging
import re
import urllib.error

from wfpack.core.config import Config
from wfpack.core.exceptions import RegistryError, ValidationError
from wfpack.core.models import ResolvedVersion
from wfpack.core.version import Version, version_gt
from wfpack.utils import net
from wfpack.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)

# tag 可能带 G 前缀，也可能不带
_TAG_RE = re.compile(r'"tag_name"\s*:\s*"G?([0-9][^"]*)"')


def parse_latest_tag(body: str) -> str:
    """从 releases API 响应文本中提取版本号

    Raises:
        RegistryError: 响应中没有可解析的 tag_name
    """
    m = _TAG_RE.search(body or "")
    if m is None:
        raise RegistryError("无法从 GitHub 响应中解析最新 Waterfox 版本")
    try:
        return str(Version.parse(m.group(1)))
    except ValidationError as e:
        raise RegistryError(
            f"无法从 GitHub 响应中解析最新 Waterfox 版本: {m.group(1)!r}"
        ) from e


class VersionResolver:
    """版本解析器 - 显式版本优先，否则查询注册表并与已安装版本比较"""

    def __init__(self, config: Config, executor: CommandExecutor) -> None:
        self.config = config
        self.executor = executor

    def latest_version(self) -> str:
        """查询上游最新发布版本，不重试"""
        url = self.config.registry_url
        logger.info("查询最新版本: %s", url)
        try:
            body = net.http_get_text(
                url,
                headers={"Accept": "application/vnd.github+json"},
                timeout=self.config.http_timeout,
            )
        except ValidationError as e:
            raise RegistryError(str(e)) from e
        except (urllib.error.URLError, OSError) as e:
            raise RegistryError(f"查询最新版本失败: {url} - {e}") from e
        return parse_latest_tag(body)

    def installed_version(self) -> str:
        """查询已安装版本，未安装返回空串

        dpkg-query 不存在、包未安装或仅残留配置 (config-files) 时均视为未安装。
        """
        cmd = [
            "dpkg-query", "-W", "-f=${db:Status-Status} ${Version}",
            self.config.pkg_name,
        ]
        try:
            r = self.executor.execute(cmd)
        except FileNotFoundError:
            logger.debug("dpkg-query 不可用，视为未安装")
            return ""
        if not r.success:
            return ""
        status, _, version = r.stdout.strip().partition(" ")
        if status != "installed":
            logger.debug("%s 状态为 %s，视为未安装", self.config.pkg_name, status or "-")
            return ""
        return version.strip()

    def resolve(self, explicit: str | None = None) -> ResolvedVersion:
        """确定本次要构建的版本"""
        if explicit:
            version = str(Version.parse(explicit))
            logger.info("使用指定版本: %s", version)
            return ResolvedVersion(version=version, explicit=True)

        logger.info("未指定版本，检测最新版本 …")
        latest = self.latest_version()
        logger.info("    最新上游版本: %s", latest)

        installed = self.installed_version()
        if not installed:
            logger.info("    %s 当前未安装", self.config.display_name)
            return ResolvedVersion(version=latest)

        logger.info("    已安装版本:   %s", installed)
        if version_gt(latest, installed):
            logger.info("发现新版本，升级 %s -> %s", installed, latest)
            return ResolvedVersion(version=latest, installed=installed)

        logger.info("已是最新 (%s)，无需操作", installed)
        return ResolvedVersion(
            version=latest, installed=installed, needs_build=False,
        )
