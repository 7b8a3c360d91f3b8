"""utils 测试：子进程执行、URL 校验、日志配置"""

from __future__ import annotations

import json
import logging

import pytest

from wfpack.core.exceptions import ExecutionError, ValidationError
from wfpack.utils.logger import (
    JSONFormatter,
    setup_logging,
    setup_logging_from_env,
)
from wfpack.utils.net import validate_url_scheme
from wfpack.utils.shell import CommandResult, LocalExecutor, run_checked


class TestLocalExecutor:
    def test_capture(self, tmp_path) -> None:
        r = LocalExecutor().execute(["echo", "hello"], cwd=str(tmp_path))
        assert r.success
        assert r.stdout.strip() == "hello"

    def test_string_command_split(self, tmp_path) -> None:
        r = LocalExecutor().execute("sh -c 'exit 3'", cwd=str(tmp_path))
        assert r.returncode == 3
        assert not r.success

    def test_missing_command(self) -> None:
        with pytest.raises(FileNotFoundError):
            LocalExecutor().execute(["wfpack-no-such-tool-xyz"])


class TestRunChecked:
    def test_failure_raises(self, executor) -> None:
        executor.results["dpkg-deb"] = CommandResult(1, "", "disk full")
        with pytest.raises(ExecutionError, match=r"dpkg-deb失败 \(rc=1\): disk full"):
            run_checked(executor, ["dpkg-deb", "--build", "a", "b"], label="dpkg-deb")

    def test_missing_raises(self, executor) -> None:
        executor.missing.add("dpkg-deb")
        with pytest.raises(ExecutionError, match="找不到命令 dpkg-deb"):
            run_checked(executor, ["dpkg-deb"], label="dpkg-deb")


class TestValidateUrlScheme:
    @pytest.mark.parametrize("url", ["http://example.com/a", "https://cdn.waterfox.com/x"])
    def test_ok(self, url: str) -> None:
        validate_url_scheme(url)

    @pytest.mark.parametrize("url", ["file:///etc/passwd", "ftp://evil.com/x", "/local/path"])
    def test_rejected(self, url: str) -> None:
        with pytest.raises(ValidationError, match="不允许的 URL 协议"):
            validate_url_scheme(url)

    def test_context_in_error(self) -> None:
        with pytest.raises(ValidationError, match="download"):
            validate_url_scheme("file:///x", context="download")


class TestLogging:
    def test_json_formatter_step(self) -> None:
        record = logging.LogRecord("wfpack.x", logging.INFO, __file__, 10, "下载 %s", ("a",), None)
        record.step = "fetch"
        entry = json.loads(JSONFormatter().format(record))
        assert entry["message"] == "下载 a"
        assert entry["level"] == "INFO"
        assert entry["step"] == "fetch"

    def test_setup_replaces_handlers(self) -> None:
        setup_logging("DEBUG")
        setup_logging("INFO", json_output=True)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert root.level == logging.INFO

    def test_env_level(self, monkeypatch) -> None:
        monkeypatch.setenv("WFPACK_LOG_LEVEL", "ERROR")
        monkeypatch.delenv("WFPACK_LOG_JSON", raising=False)
        setup_logging_from_env()
        assert logging.getLogger().level == logging.ERROR
        setup_logging_from_env("debug")
        assert logging.getLogger().level == logging.DEBUG
