"""DEBIAN/control 渲染与 Installed-Size 计算"""

from __future__ import annotations

import os
from pathlib import Path

from wfpack.core.depends import format_depends
from wfpack.core.models import PackageDescriptor

_BLOCK = 1024


def installed_size_kib(root: Path) -> int:
    """与 `du -sk root` 一致：统计实际占用块数（含目录本身），不跟随符号链接"""
    total = 0
    seen: set[tuple[int, int]] = set()
    for dirpath, dirnames, filenames in os.walk(root):
        entries = [dirpath] + [os.path.join(dirpath, n) for n in dirnames + filenames]
        for entry in entries:
            st = os.lstat(entry)
            key = (st.st_dev, st.st_ino)
            # 子目录会以 dirpath 身份再出现一次；硬链接也只计一次
            if key in seen:
                continue
            seen.add(key)
            total += st.st_blocks * 512
    return -(-total // _BLOCK)


def format_description(summary: str, lines: tuple[str, ...] | list[str]) -> str:
    """Description 字段：续行固定以一个空格开头，空行写作 ' .'"""
    out = [summary]
    for line in lines:
        text = line.strip()
        out.append(f" {text}" if text else " .")
    return "\n".join(out)


def render_control(desc: PackageDescriptor) -> str:
    fields = [
        ("Package", desc.name),
        ("Version", desc.version),
        ("Architecture", desc.arch),
        ("Maintainer", desc.maintainer),
        ("Installed-Size", str(desc.installed_size)),
        ("Depends", format_depends(desc.depends)),
        ("Section", desc.section),
        ("Priority", desc.priority),
        ("Homepage", desc.homepage),
        ("Description", format_description(desc.description, desc.long_description)),
    ]
    return "".join(f"{k}: {v}\n" for k, v in fields)
