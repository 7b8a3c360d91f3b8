"""端到端场景测试 — 通过 CLI 驱动完整流水线

外部命令由 FakeExecutor 代替，网络由 registry / cdn fixture 代替，
其余（解压、目录树、control、临时目录清理）均为真实执行。
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

import wfpack.cli as cli_mod
from wfpack import __version__
from wfpack.core.depends import CLASSIC_DEPENDS, T64_DEPENDS, format_depends
from wfpack.services.container import ServiceContainer
from wfpack.utils.shell import CommandResult


@pytest.fixture()
def run_cli(tmp_path: Path, executor, monkeypatch):
    """run_cli(*args, debian="13.1") → click Result"""
    monkeypatch.setattr(
        cli_mod, "ServiceContainer",
        lambda config: ServiceContainer(config=config, executor=executor),
    )
    monkeypatch.setattr("wfpack.core.installer.os.geteuid", lambda: 1000)

    def _run(*args: str, debian: str = "13.1"):
        (tmp_path / "debian_version").write_text(debian + "\n")
        cfg = tmp_path / "wfpack.yml"
        cfg.write_text(yaml.dump({
            "debian_version_file": str(tmp_path / "debian_version"),
            "download_dir": str(tmp_path / "downloads"),
            "output_dir": str(tmp_path / "out"),
        }))
        return CliRunner().invoke(cli_mod.main, ["--config", str(cfg), *args])

    return _run


def _artifacts(tmp_path: Path) -> list[str]:
    out = tmp_path / "out"
    return sorted(p.name for p in out.glob("*.deb")) if out.exists() else []


class TestScenarios:
    def test_a_latest_not_installed(self, run_cli, tmp_path, executor, registry, cdn) -> None:
        """无参数，注册表 6.7.0，未安装 → 五步全部执行"""
        result = run_cli()
        assert result.exit_code == 0, result.output
        assert _artifacts(tmp_path) == ["waterfox_6.7.0_amd64.deb"]
        assert cdn == [
            "https://cdn.waterfox.com/waterfox/releases/6.7.0/Linux_x86_64/waterfox-6.7.0.tar.bz2",
        ]
        assert executor.called("dpkg-query")
        assert executor.called("dpkg-deb")
        deb = tmp_path / "out" / "waterfox_6.7.0_amd64.deb"
        assert executor.calls[-1] == ["sudo", "apt", "install", "-y", str(deb.resolve())]
        assert "安装成功" in result.output
        assert f"Depends: {format_depends(T64_DEPENDS)}\n" in executor.controls[0]

    def test_b_already_up_to_date(self, run_cli, tmp_path, executor, registry, cdn) -> None:
        """已安装 6.7.0 → 无操作，退出码 0，不产出任何文件"""
        executor.installed = "6.7.0"
        result = run_cli()
        assert result.exit_code == 0, result.output
        assert "已是最新 (6.7.0)" in result.output
        assert cdn == []
        assert not executor.called("dpkg-deb")
        assert not executor.called("apt")
        assert _artifacts(tmp_path) == []

    def test_c_explicit_version_on_bookworm(self, run_cli, tmp_path, executor, registry, cdn) -> None:
        """显式 6.5.0 + Debian 12 → 经典依赖名，忽略已安装/最新版本"""
        executor.installed = "9.0.0"
        result = run_cli("6.5.0", debian="12.9")
        assert result.exit_code == 0, result.output
        assert registry["calls"] == 0
        assert not executor.called("dpkg-query")
        assert _artifacts(tmp_path) == ["waterfox_6.5.0_amd64.deb"]
        control = executor.controls[0]
        assert f"Depends: {format_depends(CLASSIC_DEPENDS)}\n" in control
        assert "t64" not in control

    def test_rebuild_when_only_config_files_left(
        self, run_cli, tmp_path, executor, registry, cdn,
    ) -> None:
        """apt remove 后 dpkg 中只剩 config-files 记录，重新构建并安装"""
        executor.installed = "6.7.0"
        executor.status = "config-files"
        result = run_cli()
        assert result.exit_code == 0, result.output
        assert _artifacts(tmp_path) == ["waterfox_6.7.0_amd64.deb"]
        assert executor.called("apt")

    def test_upgrade_when_newer(self, run_cli, tmp_path, executor, registry, cdn) -> None:
        executor.installed = "6.6.0"
        registry["tag"] = "6.10.0"
        result = run_cli()
        assert result.exit_code == 0, result.output
        assert _artifacts(tmp_path) == ["waterfox_6.10.0_amd64.deb"]


class TestStagingContents:
    def test_payload_tree(self, run_cli, executor, registry, cdn) -> None:
        assert run_cli().exit_code == 0
        files = executor.staged_files[0]
        for expected in (
            "opt/waterfox/waterfox",
            "usr/local/bin/waterfox",
            "usr/share/applications/waterfox.desktop",
            "usr/share/icons/hicolor/128x128/apps/waterfox.png",
            "usr/share/metainfo/waterfox.appdata.xml",
            "DEBIAN/control",
            "DEBIAN/postinst",
            "DEBIAN/postrm",
        ):
            assert expected in files

    def test_description_continuation(self, run_cli, executor, registry, cdn) -> None:
        assert run_cli().exit_code == 0
        control = executor.controls[0]
        desc = control.split("Description: ", 1)[1].splitlines()
        assert desc[0] == "Waterfox — privacy-focused web browser (upstream binary)"
        assert desc[1:] == [
            " Waterfox is a free and open-source web browser based on Firefox,",
            " focused on privacy, customisation, and user choice.",
        ]


class TestCacheAndOptions:
    def test_cached_archive_skips_download(
        self, run_cli, tmp_path, executor, registry, cdn, make_tarball,
    ) -> None:
        make_tarball(tmp_path / "downloads" / "waterfox-6.7.0.tar.bz2")
        result = run_cli()
        assert result.exit_code == 0, result.output
        assert cdn == []
        assert _artifacts(tmp_path) == ["waterfox_6.7.0_amd64.deb"]

    def test_archive_kept_after_run(self, run_cli, tmp_path, registry, cdn) -> None:
        assert run_cli().exit_code == 0
        assert (tmp_path / "downloads" / "waterfox-6.7.0.tar.bz2").is_file()

    def test_no_install(self, run_cli, tmp_path, executor, registry, cdn) -> None:
        result = run_cli("--no-install")
        assert result.exit_code == 0, result.output
        assert not executor.called("apt")
        assert "包已构建" in result.output
        assert _artifacts(tmp_path) == ["waterfox_6.7.0_amd64.deb"]

    def test_output_dir_override(self, run_cli, tmp_path, registry, cdn) -> None:
        other = tmp_path / "elsewhere"
        assert run_cli("--output-dir", str(other)).exit_code == 0
        assert (other / "waterfox_6.7.0_amd64.deb").is_file()

    def test_version_flag(self) -> None:
        result = CliRunner().invoke(cli_mod.main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestFailures:
    def test_old_debian(self, run_cli, tmp_path, executor, registry, cdn) -> None:
        result = run_cli("6.7.0", debian="11.11")
        assert result.exit_code == 1
        assert "ERROR: 需要 Debian 12 或更新版本" in result.output
        assert cdn == []
        assert _artifacts(tmp_path) == []

    def test_registry_unparseable(self, run_cli, executor, registry) -> None:
        registry["tag"] = "nightly"
        result = run_cli()
        assert result.exit_code == 1
        assert "ERROR: 无法从 GitHub 响应中解析" in result.output
        assert not executor.called("dpkg-query")

    def test_install_rejected_propagates_status(self, run_cli, executor, registry, cdn) -> None:
        executor.results["apt"] = CommandResult(100)
        result = run_cli()
        assert result.exit_code == 100
        assert "ERROR: 安装" in result.output

    def test_invalid_explicit_version(self, run_cli, executor) -> None:
        result = run_cli("latest")
        assert result.exit_code == 1
        assert "无效的版本号" in result.output
        assert executor.calls == []

    def test_unknown_config_key(self, tmp_path) -> None:
        cfg = tmp_path / "typo.yml"
        cfg.write_text("maintaner: Me <me@example.com>\n")
        result = CliRunner().invoke(cli_mod.main, ["--config", str(cfg)])
        assert result.exit_code == 1
        assert "ERROR: 未知配置项" in result.output
        assert "maintaner" in result.output

    def test_malformed_registry_tag(self, run_cli, tmp_path, executor, registry, cdn) -> None:
        registry["tag"] = "6.7.0 beta/../x"
        result = run_cli()
        assert result.exit_code == 1
        assert "ERROR: 无法从 GitHub 响应中解析" in result.output
        assert cdn == []
        assert _artifacts(tmp_path) == []

    def test_missing_config_file(self, tmp_path) -> None:
        result = CliRunner().invoke(cli_mod.main, ["--config", str(tmp_path / "nope.yml")])
        assert result.exit_code == 2
        assert "配置文件不存在" in result.output
