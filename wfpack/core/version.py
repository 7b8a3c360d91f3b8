"""版本号解析与比较

版本号为点分数字串，按分量做整数比较（6.10.0 > 6.9.0），
与 `sort -V` 一致：较短的前缀版本排在前面（6.7 < 6.7.0）。
数字部分之后的后缀（如 6.5.0b1）作为次级排序键，无后缀者在前；
后缀按字母段/数字段拆分比较，因此 6.5.0b9 < 6.5.0b10。
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from wfpack.core.exceptions import ValidationError

_VERSION_RE = re.compile(r"^[Gg]?(?P<num>\d+(?:\.\d+)*)(?P<suffix>[0-9A-Za-z.+~-]*)$")
_SUFFIX_RUN_RE = re.compile(r"\d+|\D+")


def _suffix_key(suffix: str) -> tuple[tuple[int, int | str], ...]:
    """'b10' → ((1, 'b'), (0, 10))，数字段按整数比较"""
    return tuple(
        (0, int(run)) if run.isdigit() else (1, run)
        for run in _SUFFIX_RUN_RE.findall(suffix)
    )


@dataclass(frozen=True, order=True)
class Version:
    """可比较的版本号"""

    parts: tuple[int, ...]
    suffix: str = field(default="", compare=False)
    raw: str = field(default="", compare=False)
    suffix_key: tuple = field(init=False, repr=False, default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "suffix_key", _suffix_key(self.suffix))

    @classmethod
    def parse(cls, text: str) -> Version:
        """解析版本串，允许 GitHub tag 的 G 前缀

        Raises:
            ValidationError: 不以点分数字开头
        """
        s = (text or "").strip()
        m = _VERSION_RE.match(s)
        if m is None:
            raise ValidationError(f"无效的版本号: {text!r}")
        parts = tuple(int(p) for p in m.group("num").split("."))
        return cls(parts=parts, suffix=m.group("suffix"), raw=s.lstrip("Gg"))

    def __str__(self) -> str:
        return self.raw or ".".join(str(p) for p in self.parts) + self.suffix


def version_gt(candidate: str, installed: str) -> bool:
    """candidate 严格大于 installed 时返回 True"""
    return Version.parse(candidate) > Version.parse(installed)
