"""共享 fixture — 记录型命令执行器 + 本地伪造的上游归档

外部依赖全部替换:
  dpkg-query / dpkg-deb / apt  →  FakeExecutor（记录调用，按需返回结果）
  GitHub releases API          →  monkeypatch net.http_get_text
  CDN 下载                     →  monkeypatch net.download_file
"""

from __future__ import annotations

import io
import json
import logging
import signal
import tarfile
from pathlib import Path

import pytest

from wfpack.core.config import Config
from wfpack.utils import net
from wfpack.utils.logger import reset_logging
from wfpack.utils.shell import CommandResult


class FakeExecutor:
    """CommandExecutor 的测试实现

    - installed: dpkg-query 返回的已安装版本，空串表示未安装
    - status: dpkg 数据库中的包状态，如 "installed" / "config-files"
    - results: 以命令名为 key 的覆盖结果，如 {"apt": CommandResult(100)}
    - dpkg-deb 成功时写出产物文件，并保存构建时的 control 内容
    """

    def __init__(self, installed: str = "") -> None:
        self.installed = installed
        self.status = "installed"
        self.results: dict[str, CommandResult] = {}
        self.missing: set[str] = set()
        self.calls: list[list[str]] = []
        self.controls: list[str] = []
        self.staged_files: list[set[str]] = []

    def execute(self, cmd, *, cwd=".", env=None, timeout=None, capture=True):
        args = list(cmd)
        self.calls.append(args)
        prog = args[1] if args[0] == "sudo" else args[0]
        if prog in self.missing:
            raise FileNotFoundError(prog)
        if prog in self.results:
            return self.results[prog]
        if prog == "dpkg-query":
            if self.installed:
                return CommandResult(0, f"{self.status} {self.installed}", "")
            return CommandResult(1, "", "dpkg-query: no packages found matching waterfox")
        if prog == "dpkg-deb":
            root, output = Path(args[-2]), Path(args[-1])
            self.controls.append((root / "DEBIAN" / "control").read_text(encoding="utf-8"))
            self.staged_files.append({
                str(p.relative_to(root)) for p in root.rglob("*")
            })
            output.write_bytes(b"!<arch>\n")
            return CommandResult(0, "", "")
        return CommandResult(0, "", "")

    def called(self, prog: str) -> bool:
        return any(prog in c[:2] for c in self.calls)


def build_tarball(
    dest: Path, *, icons: tuple[int, ...] = (16, 32, 48, 64, 128),
    top: str = "waterfox",
) -> Path:
    """生成一个结构与上游相同的最小 tar.bz2"""
    dest.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(dest, "w:bz2") as tf:
        def add(name: str, data: bytes, mode: int = 0o644) -> None:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = mode
            tf.addfile(info, io.BytesIO(data))

        add(f"{top}/{top}", b"#!/bin/sh\necho waterfox\n", 0o755)
        add(f"{top}/application.ini", b"[App]\nName=Waterfox\n")
        for size in icons:
            add(f"{top}/browser/chrome/icons/default/default{size}.png", b"\x89PNG" + bytes(size))
    return dest


@pytest.fixture()
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture()
def config(tmp_path: Path) -> Config:
    version_file = tmp_path / "debian_version"
    version_file.write_text("13.1\n")
    return Config(
        download_dir=str(tmp_path / "downloads"),
        output_dir=str(tmp_path / "out"),
        debian_version_file=str(version_file),
    )


@pytest.fixture()
def registry(monkeypatch: pytest.MonkeyPatch):
    """伪造 releases API，返回值可通过 registry["tag"] 修改"""
    state = {"tag": "G6.7.0", "calls": 0}

    def fake_get(url, *, headers=None, timeout=None):
        state["calls"] += 1
        return json.dumps({"tag_name": state["tag"], "name": "Waterfox"})

    monkeypatch.setattr(net, "http_get_text", fake_get)
    return state


@pytest.fixture()
def cdn(monkeypatch: pytest.MonkeyPatch):
    """伪造 CDN 下载，记录请求的 URL 并生成归档"""
    urls: list[str] = []

    def fake_download(url, dest, *, timeout=None):
        urls.append(url)
        return build_tarball(dest)

    monkeypatch.setattr(net, "download_file", fake_download)
    return urls


@pytest.fixture()
def make_tarball():
    """归档工厂: make_tarball(path, icons=(16, 48))"""
    return build_tarball


@pytest.fixture(autouse=True)
def _restore_process_state():
    """CLI 会安装日志 handler 与 SIGTERM 处理器，每个用例结束后还原"""
    level = logging.getLogger().level
    sigterm = signal.getsignal(signal.SIGTERM)
    yield
    reset_logging()
    logging.getLogger().setLevel(level)
    signal.signal(signal.SIGTERM, sigterm)
