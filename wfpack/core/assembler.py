"""打包组装器

在临时工作目录中生成与安装后布局一致的目录树:

  <name>_<version>_<arch>/
    opt/<name>/...                         归档内容
    usr/local/bin/<name> -> /opt/<name>/<name>
    usr/share/applications/<name>.desktop
    usr/share/icons/hicolor/<s>x<s>/apps/<name>.png   (归档中存在才复制)
    usr/share/metainfo/<name>.appdata.xml
    DEBIAN/control, postinst, postrm

然后调用 dpkg-deb 产出唯一的 .deb。
"""

from __future__ import annotations

import logging
import os
import shutil
import tarfile
from pathlib import Path

from wfpack.core.config import Config
from wfpack.core.control import installed_size_kib, render_control
from wfpack.core.desktop import (
    HOOK_NAMES,
    MAINTAINER_SCRIPT,
    render_appdata,
    render_desktop_entry,
)
from wfpack.core.exceptions import AssemblyError, ExecutionError
from wfpack.core.models import PackageDescriptor
from wfpack.utils.shell import CommandExecutor, run_checked

logger = logging.getLogger(__name__)


class PackageAssembler:
    """.deb 组装器"""

    def __init__(self, config: Config, executor: CommandExecutor) -> None:
        self.config = config
        self.executor = executor

    def staging_root(self, work_dir: Path, version: str) -> Path:
        c = self.config
        return work_dir / f"{c.pkg_name}_{version}_{c.arch}"

    def assemble(
        self, archive: Path, version: str,
        depends: tuple[str, ...], work_dir: Path,
    ) -> tuple[Path, PackageDescriptor]:
        """组装并构建，返回 (.deb 路径, control 描述)

        Raises:
            AssemblyError: 解压、文件写入或 dpkg-deb 失败
        """
        root = self.staging_root(work_dir, version)
        try:
            self._extract(archive, root)
            self._link_launcher(root)
            self._write_desktop_files(root)
            self._copy_icons(root)
            descriptor = self._write_debian_dir(root, version, depends)
        except (OSError, tarfile.TarError) as e:
            raise AssemblyError(f"组装目录树失败: {e}") from e

        output = self._build(root, version)
        return output, descriptor

    # ---- 目录树 ----

    def _extract(self, archive: Path, root: Path) -> None:
        opt = root / self.config.install_prefix.strip("/")
        opt.mkdir(parents=True, exist_ok=True)
        logger.info("解压归档 %s …", archive.name)
        with tarfile.open(archive) as tf:
            tf.extractall(path=str(opt), filter="data")  # noqa: S202
        if not (opt / self.config.pkg_name).is_dir():
            raise AssemblyError(
                f"归档中缺少顶层目录 '{self.config.pkg_name}/': {archive}"
            )

    def _link_launcher(self, root: Path) -> None:
        bin_dir = root / self.config.bin_dir.strip("/")
        bin_dir.mkdir(parents=True, exist_ok=True)
        link = bin_dir / self.config.pkg_name
        if link.is_symlink() or link.exists():
            link.unlink()
        os.symlink(f"{self.config.app_dir}/{self.config.pkg_name}", link)

    def _write_desktop_files(self, root: Path) -> None:
        name = self.config.pkg_name
        apps = root / "usr/share/applications"
        apps.mkdir(parents=True, exist_ok=True)
        (apps / f"{name}.desktop").write_text(
            render_desktop_entry(self.config), encoding="utf-8",
        )

        metainfo = root / "usr/share/metainfo"
        metainfo.mkdir(parents=True, exist_ok=True)
        (metainfo / f"{name}.appdata.xml").write_text(
            render_appdata(self.config), encoding="utf-8",
        )

    def _copy_icons(self, root: Path) -> list[int]:
        """复制归档自带的各尺寸图标，返回实际复制的尺寸"""
        name = self.config.pkg_name
        icon_src_dir = (
            root / self.config.app_dir.strip("/") / "browser/chrome/icons/default"
        )
        copied: list[int] = []
        for size in self.config.icon_sizes:
            src = icon_src_dir / f"default{size}.png"
            if not src.is_file():
                continue
            dest_dir = root / f"usr/share/icons/hicolor/{size}x{size}/apps"
            dest_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dest_dir / f"{name}.png")
            copied.append(size)
        logger.debug("图标尺寸: %s", copied or "无")
        return copied

    def _write_debian_dir(
        self, root: Path, version: str, depends: tuple[str, ...],
    ) -> PackageDescriptor:
        c = self.config
        debian = root / "DEBIAN"
        debian.mkdir(parents=True, exist_ok=True)

        # 在写入 control 与维护脚本之前统计
        size = installed_size_kib(root)

        descriptor = PackageDescriptor(
            name=c.pkg_name,
            version=version,
            arch=c.arch,
            maintainer=c.maintainer,
            installed_size=size,
            depends=tuple(depends),
            section=c.section,
            priority=c.priority,
            homepage=c.homepage,
            description=c.description,
            long_description=tuple(c.long_description),
        )
        (debian / "control").write_text(render_control(descriptor), encoding="utf-8")

        for hook in HOOK_NAMES:
            path = debian / hook
            path.write_text(MAINTAINER_SCRIPT, encoding="utf-8")
            path.chmod(0o755)
        return descriptor

    # ---- dpkg-deb ----

    def _build(self, root: Path, version: str) -> Path:
        out_dir = Path(self.config.output_dir)
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise AssemblyError(f"无法创建输出目录 {out_dir}: {e}") from e
        output = (out_dir / self.config.artifact_name(version)).resolve()
        logger.info("构建 %s …", output.name)
        try:
            run_checked(
                self.executor,
                ["dpkg-deb", "--build", "--root-owner-group", str(root), str(output)],
                label="dpkg-deb",
            )
        except ExecutionError as e:
            raise AssemblyError(str(e)) from e
        logger.info("包已生成: %s", output)
        return output
