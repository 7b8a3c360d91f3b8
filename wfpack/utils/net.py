"""网络工具 — URL 安全校验 + 阻塞式 HTTP GET"""

from __future__ import annotations

import logging
import shutil
import urllib.request
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from wfpack import __version__
from wfpack.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = frozenset(("http", "https"))
USER_AGENT = f"wfpack/{__version__}"
_CHUNK_SIZE = 1024 * 1024


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


def _open(url: str, headers: dict[str, str] | None, timeout: float | None) -> Any:
    req = urllib.request.Request(url)
    req.add_header("User-Agent", USER_AGENT)
    for k, v in (headers or {}).items():
        req.add_header(k, v)
    if timeout:
        return urllib.request.urlopen(req, timeout=timeout)  # nosec B310
    return urllib.request.urlopen(req)  # nosec B310


def http_get_text(
    url: str, *,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
) -> str:
    """GET 并以 UTF-8 解码响应体

    传输层异常（urllib.error.URLError / OSError）原样抛出，由调用方映射为业务异常。
    """
    validate_url_scheme(url, context="http get")
    with _open(url, headers, timeout) as resp:
        return resp.read().decode("utf-8", errors="replace")


def download_file(
    url: str, dest: Path, *,
    timeout: float | None = None,
) -> Path:
    """流式下载到 dest，失败时删除已写入的部分文件后重新抛出"""
    validate_url_scheme(url, context="download")
    dest.parent.mkdir(parents=True, exist_ok=True)
    try:
        with _open(url, None, timeout) as resp, open(dest, "wb") as f:
            shutil.copyfileobj(resp, f, _CHUNK_SIZE)
    except BaseException:
        # Ctrl-C 中断同样不能留下半个文件，否则下次会被当作缓存
        dest.unlink(missing_ok=True)
        raise
    return dest
