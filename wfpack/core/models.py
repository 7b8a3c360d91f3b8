"""核心数据模型

每次运行重新构造，进程退出即丢弃；只有下载的归档与产出的 .deb 会留在磁盘上。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Outcome(str, Enum):
    """流水线结束状态"""

    PENDING = "pending"
    UP_TO_DATE = "up_to_date"
    BUILT = "built"
    INSTALLED = "installed"


@dataclass(frozen=True)
class PackageDescriptor:
    """DEBIAN/control 描述信息，构造后不再修改"""

    name: str
    version: str
    arch: str
    maintainer: str
    installed_size: int  # KiB
    depends: tuple[str, ...]
    section: str
    priority: str
    homepage: str
    description: str
    long_description: tuple[str, ...] = ()


@dataclass
class ResolvedVersion:
    """版本解析结果"""

    version: str
    installed: str = ""          # 空串表示未安装
    explicit: bool = False       # 命令行显式指定
    needs_build: bool = True


@dataclass
class BuildContext:
    """一次运行中各阶段的产出，逐步填充"""

    version: str = ""
    installed_version: str = ""
    debian_major: int = 0
    depends: tuple[str, ...] = ()
    archive_path: Path | None = None
    archive_cached: bool = False
    work_dir: Path | None = None
    staging_root: Path | None = None
    artifact_path: Path | None = None
    descriptor: PackageDescriptor | None = None
