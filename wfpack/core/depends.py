"""运行时依赖清单

Debian 13 (Trixie) 在 64 位 time_t 迁移中给部分库包加了 t64 后缀，
Debian 12 (Bookworm) 仍是经典包名。两套清单整体选择，不做混合。
若上游新增库依赖（见归档内 dependentlibs.list），两套清单需同时更新。
"""

from __future__ import annotations

CLASSIC_DEPENDS: tuple[str, ...] = (
    "libasound2",
    "libatk1.0-0",
    "libc6",
    "libcairo-gobject2",
    "libcairo2",
    "libdbus-1-3",
    "libfontconfig1",
    "libfreetype6",
    "libgcc-s1",
    "libgdk-pixbuf-2.0-0",
    "libglib2.0-0",
    "libgtk-3-0",
    "libpango-1.0-0",
    "libpangocairo-1.0-0",
    "libstdc++6",
    "libx11-6",
    "libx11-xcb1",
    "libxcb-shm0",
    "libxcb1",
    "libxcomposite1",
    "libxcursor1",
    "libxdamage1",
    "libxext6",
    "libxfixes3",
    "libxi6",
    "libxrandr2",
    "libxrender1",
    "libxtst6",
)

T64_RENAMES: dict[str, str] = {
    "libasound2": "libasound2t64",
    "libatk1.0-0": "libatk1.0-0t64",
    "libglib2.0-0": "libglib2.0-0t64",
    "libgtk-3-0": "libgtk-3-0t64",
}

T64_DEPENDS: tuple[str, ...] = tuple(T64_RENAMES.get(d, d) for d in CLASSIC_DEPENDS)


def select_depends(debian_major: int, t64_threshold: int = 13) -> tuple[str, ...]:
    """按 Debian 主版本选择依赖清单"""
    if debian_major >= t64_threshold:
        return T64_DEPENDS
    return CLASSIC_DEPENDS


def format_depends(depends: tuple[str, ...] | list[str]) -> str:
    """渲染为 control 文件的 Depends 字段值"""
    return ", ".join(depends)
