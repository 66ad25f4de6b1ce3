"""
Tests for the maturin binary installer.
"""

import os
from unittest.mock import patch

import pytest

from maturinkit.core.download import DownloadError
from maturinkit.core.exceptions import ToolDownloadError
from maturinkit.core.filesystem import ArchiveExtractionError, make_executable
from maturinkit.core.platform import PlatformInfo
from maturinkit.toolchain.maturin import (
    MaturinInstaller,
    get_asset_name,
    get_download_url,
    get_system_maturin_path,
)


class TestAssetNames:
    """Test release asset naming."""

    @pytest.mark.parametrize(
        "platform,expected",
        [
            (PlatformInfo("linux", "x64"), "maturin-x86_64-unknown-linux-musl.tar.gz"),
            (
                PlatformInfo("linux", "arm64"),
                "maturin-aarch64-unknown-linux-musl.tar.gz",
            ),
            (PlatformInfo("macos", "x64"), "maturin-x86_64-apple-darwin.tar.gz"),
            (PlatformInfo("macos", "arm64"), "maturin-aarch64-apple-darwin.tar.gz"),
            (PlatformInfo("windows", "x64"), "maturin-x86_64-pc-windows-msvc.zip"),
        ],
    )
    def test_asset_name(self, platform, expected):
        assert get_asset_name(platform) == expected

    def test_download_url(self, linux_x64):
        assert get_download_url("v1.4.0", linux_x64) == (
            "https://github.com/PyO3/maturin/releases/download/v1.4.0/"
            "maturin-x86_64-unknown-linux-musl.tar.gz"
        )


def _fake_maturin(directory, name="maturin"):
    directory.mkdir(parents=True, exist_ok=True)
    exe = directory / name
    exe.write_text("#!/bin/sh\n")
    make_executable(exe)
    return exe


@pytest.mark.skipif(os.name == "nt", reason="relies on POSIX executable bits")
class TestSystemMaturin:
    """Test PATH lookup."""

    def test_found_on_path(self, tmp_path):
        exe = _fake_maturin(tmp_path / "bin")

        assert get_system_maturin_path({"PATH": str(exe.parent)}) == exe

    def test_not_found(self, tmp_path):
        assert get_system_maturin_path({"PATH": str(tmp_path)}) is None


class TestMaturinInstaller:
    """Test MaturinInstaller."""

    @pytest.fixture
    def environ(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        return {"PATH": str(empty)}

    def test_install_dir_is_per_tag(self, tmp_path, linux_x64, environ):
        installer = MaturinInstaller("v1.4.0", tmp_path / "tools", linux_x64, environ)

        assert installer.install_dir == tmp_path / "tools" / "maturin" / "v1.4.0"
        assert installer.exe_name == "maturin"

    def test_windows_exe_name(self, tmp_path, windows_x64, environ):
        installer = MaturinInstaller("v1.4.0", tmp_path, windows_x64, environ)

        assert installer.exe_name == "maturin.exe"

    def test_tools_dir_defaults_to_cache(self, tmp_path, linux_x64):
        environ = {"MATURINKIT_CACHE_DIR": str(tmp_path / "cache")}
        installer = MaturinInstaller("v1.4.0", platform=linux_x64, environ=environ)

        assert installer.tools_dir == tmp_path / "cache" / "tools"

    @pytest.mark.skipif(os.name == "nt", reason="relies on POSIX executable bits")
    def test_existing_maturin_is_reused(self, tmp_path, linux_x64):
        exe = _fake_maturin(tmp_path / "bin")
        environ = {"PATH": str(exe.parent)}
        installer = MaturinInstaller("v1.4.0", tmp_path / "tools", linux_x64, environ)

        with patch("maturinkit.toolchain.maturin.download_file") as mock_download:
            assert installer.ensure() == exe

        mock_download.assert_not_called()

    def test_download_and_register(self, tmp_path, linux_x64, environ):
        github_path = tmp_path / "github_path"
        environ["GITHUB_PATH"] = str(github_path)
        installer = MaturinInstaller("v1.4.0", tmp_path / "tools", linux_x64, environ)

        def fake_extract(archive, destination):
            _fake_maturin(destination)
            return destination

        with patch("maturinkit.toolchain.maturin.download_file") as mock_download, patch(
            "maturinkit.toolchain.maturin.extract_archive", side_effect=fake_extract
        ):
            exe = installer.ensure()

        assert exe == installer.install_dir / "maturin"
        url, archive = mock_download.call_args[0]
        assert url.endswith("/v1.4.0/maturin-x86_64-unknown-linux-musl.tar.gz")
        assert archive.name == "maturin-x86_64-unknown-linux-musl.tar.gz"
        assert environ["PATH"].split(os.pathsep)[0] == str(installer.install_dir)
        assert github_path.read_text() == f"{installer.install_dir}\n"

    def test_download_failure(self, tmp_path, linux_x64, environ):
        installer = MaturinInstaller("v1.4.0", tmp_path / "tools", linux_x64, environ)

        with patch(
            "maturinkit.toolchain.maturin.download_file",
            side_effect=DownloadError("404 Not Found"),
        ):
            with pytest.raises(ToolDownloadError, match="404 Not Found"):
                installer.ensure()

    def test_extraction_failure_removes_archive(self, tmp_path, linux_x64, environ):
        installer = MaturinInstaller("v1.4.0", tmp_path / "tools", linux_x64, environ)

        def fake_download(url, destination):
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(b"not a tarball")
            return destination

        with patch(
            "maturinkit.toolchain.maturin.download_file", side_effect=fake_download
        ), patch(
            "maturinkit.toolchain.maturin.extract_archive",
            side_effect=ArchiveExtractionError("bad archive"),
        ):
            with pytest.raises(ToolDownloadError):
                installer.download()

        assert list((tmp_path / "tools" / "downloads").iterdir()) == []

    def test_archive_without_executable(self, tmp_path, linux_x64, environ):
        installer = MaturinInstaller("v1.4.0", tmp_path / "tools", linux_x64, environ)

        with patch("maturinkit.toolchain.maturin.download_file"), patch(
            "maturinkit.toolchain.maturin.extract_archive"
        ):
            with pytest.raises(ToolDownloadError, match="not found in archive"):
                installer.download()
