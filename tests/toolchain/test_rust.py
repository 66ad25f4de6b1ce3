"""
Tests for Rust target installation.
"""

import pytest

from maturinkit.core.exceptions import ProcessError, TargetInstallError
from maturinkit.core.process import ProcessResult
from maturinkit.toolchain.rust import RustTargetInstaller


class TestTargetLibdir:
    """Test target_libdir probing."""

    def test_reports_directory(self, runner, tmp_path):
        runner.on("rustc", stdout=f"{tmp_path}\n", exit_code=0)

        libdir = RustTargetInstaller(runner).target_libdir("aarch64-apple-darwin")

        assert libdir == tmp_path
        call = runner.calls_to("rustc")[0]
        assert call.args == [
            "--print",
            "target-libdir",
            "--target",
            "aarch64-apple-darwin",
        ]
        assert call.capture

    def test_toolchain_is_selected_with_plus(self, runner, tmp_path):
        runner.on("rustc", stdout=str(tmp_path))

        RustTargetInstaller(runner).target_libdir("x86_64-apple-darwin", "nightly")

        assert runner.calls_to("rustc")[0].args[0] == "+nightly"

    def test_failure_with_stderr_raises(self, runner):
        runner.on("rustc", exit_code=1, stderr="error: toolchain 'nope' not installed\n")

        with pytest.raises(TargetInstallError, match="not installed"):
            RustTargetInstaller(runner).target_libdir("aarch64-apple-darwin", "nope")

    def test_silent_failure_is_not_installed(self, runner):
        runner.on("rustc", exit_code=1)

        installer = RustTargetInstaller(runner)

        assert installer.target_libdir("aarch64-apple-darwin") is None
        assert not installer.is_installed("aarch64-apple-darwin")


class TestEnsureTarget:
    """Test ensure (idempotent target installation)."""

    def test_installed_target_is_skipped(self, runner, tmp_path):
        runner.on("rustc", stdout=str(tmp_path))

        RustTargetInstaller(runner).ensure("aarch64-unknown-linux-gnu")

        assert runner.calls_to("rustup") == []

    def test_repeated_ensure_adds_once(self, runner, tmp_path):
        libdir = tmp_path / "lib"

        def probe(args):
            return ProcessResult(0, stdout=str(libdir))

        def add(args):
            libdir.mkdir()
            return ProcessResult(0)

        runner.on("rustc", probe).on("rustup", add)
        installer = RustTargetInstaller(runner)

        installer.ensure("aarch64-unknown-linux-gnu")
        installer.ensure("aarch64-unknown-linux-gnu")

        assert len(runner.calls_to("rustup")) == 1

    def test_missing_target_is_added(self, runner, tmp_path):
        runner.on("rustc", stdout=str(tmp_path / "missing"))

        RustTargetInstaller(runner).ensure("aarch64-unknown-linux-gnu")

        (call,) = runner.calls_to("rustup")
        assert call.args == ["target", "add", "aarch64-unknown-linux-gnu"]
        assert call.check

    def test_toolchain_scoped_add(self, runner, tmp_path):
        runner.on("rustc", stdout=str(tmp_path / "missing"))

        RustTargetInstaller(runner).ensure("aarch64-apple-darwin", toolchain="nightly")

        (call,) = runner.calls_to("rustup")
        assert call.args == [
            "target",
            "add",
            "--toolchain",
            "nightly",
            "aarch64-apple-darwin",
        ]

    def test_empty_target_is_noop(self, runner):
        RustTargetInstaller(runner).ensure("")

        assert runner.calls == []

    def test_rustup_failure_propagates(self, runner, tmp_path):
        runner.on("rustc", stdout=str(tmp_path / "missing"))
        runner.on("rustup", exit_code=1)

        with pytest.raises(ProcessError):
            RustTargetInstaller(runner).ensure("aarch64-unknown-linux-gnu")


class TestSetOverride:
    def test_override_set(self, runner):
        RustTargetInstaller(runner).set_override("1.75.0")

        (call,) = runner.calls_to("rustup")
        assert call.args == ["override", "set", "1.75.0"]
        assert call.check
