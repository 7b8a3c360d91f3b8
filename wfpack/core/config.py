"""集中配置管理

所有常量（包名、URL 模板、Debian 版本阈值、目录）集中在 Config，
由 CLI 构造一次后显式传递给每个阶段，不依赖全局状态。
支持从 YAML 文件加载 + 命令行覆盖。
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field

import yaml

from wfpack.core.exceptions import ConfigError
from wfpack.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "wfpack.yml"


@dataclass
class Config:
    """打包流程配置"""

    # 包元信息
    pkg_name: str = "waterfox"
    display_name: str = "Waterfox"
    arch: str = "amd64"
    maintainer: str = "Local Builder <nobody@localhost>"
    description: str = "Waterfox — privacy-focused web browser (upstream binary)"
    long_description: list[str] = field(default_factory=lambda: [
        "Waterfox is a free and open-source web browser based on Firefox,",
        "focused on privacy, customisation, and user choice.",
    ])
    homepage: str = "https://www.waterfox.com"
    section: str = "web"
    priority: str = "optional"

    # 上游来源
    registry_url: str = (
        "https://api.github.com/repos/BrowserWorks/Waterfox/releases/latest"
    )
    download_url_template: str = (
        "https://cdn.waterfox.com/waterfox/releases/{version}"
        "/Linux_x86_64/waterfox-{version}.tar.bz2"
    )
    archive_name_template: str = "waterfox-{version}.tar.bz2"
    http_timeout: float | None = None

    # 宿主环境
    debian_version_file: str = "/etc/debian_version"
    min_debian_major: int = 12
    default_debian_major: int = 13
    t64_threshold: int = 13

    # 目录与安装布局
    download_dir: str = "."
    output_dir: str = "."
    install_prefix: str = "/opt"
    bin_dir: str = "/usr/local/bin"
    icon_sizes: list[int] = field(default_factory=lambda: [16, 32, 48, 64, 128])

    # 安装
    use_sudo: bool = True

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, ValueError, OSError) as e:
            raise ConfigError(f"配置文件无效: {path}: {e}") from e
        if not data:
            return cls()
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(str(k) for k in data if k not in known)
        if unknown:
            raise ConfigError(f"未知配置项: {path}: {', '.join(unknown)}")
        cfg = cls(**data)
        logger.info("配置已加载: %s", path)
        return cfg

    def with_overrides(self, **overrides: object) -> Config:
        """返回应用了非空覆盖项的新配置（原对象不变）"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes) if changes else self

    @property
    def app_dir(self) -> str:
        """安装后的程序目录，如 /opt/waterfox"""
        return f"{self.install_prefix.rstrip('/')}/{self.pkg_name}"

    def download_url(self, version: str) -> str:
        return self.download_url_template.replace("{version}", version)

    def archive_name(self, version: str) -> str:
        return self.archive_name_template.replace("{version}", version)

    def artifact_name(self, version: str) -> str:
        """最终 .deb 文件名: <name>_<version>_<arch>.deb"""
        return f"{self.pkg_name}_{version}_{self.arch}.deb"
