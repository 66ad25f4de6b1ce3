"""
maturin binary installer.

Uses an existing maturin found on PATH, otherwise downloads the prebuilt
release binary for the host into the tools directory and puts it on PATH.
"""

import logging
import shutil
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from maturinkit.core.directory import get_tools_dir
from maturinkit.core.download import DownloadError, download_file
from maturinkit.core.environment import add_path
from maturinkit.core.exceptions import ToolDownloadError
from maturinkit.core.filesystem import (
    ArchiveExtractionError,
    extract_archive,
    make_executable,
)
from maturinkit.core.platform import PlatformInfo, detect_platform

logger = logging.getLogger(__name__)

RELEASE_URL = "https://github.com/PyO3/maturin/releases/download/{tag}/{asset}"


def get_asset_name(platform: PlatformInfo) -> str:
    """
    Release asset name for a host platform.

    Linux always gets the statically linked musl build.

    Example:
        >>> get_asset_name(PlatformInfo('macos', 'arm64'))
        'maturin-aarch64-apple-darwin.tar.gz'
    """
    arch = platform.release_arch()
    if platform.is_windows:
        return f"maturin-{arch}-pc-windows-msvc.zip"
    elif platform.is_macos:
        return f"maturin-{arch}-apple-darwin.tar.gz"
    return f"maturin-{arch}-unknown-linux-musl.tar.gz"


def get_download_url(tag: str, platform: PlatformInfo) -> str:
    return RELEASE_URL.format(tag=tag, asset=get_asset_name(platform))


def get_system_maturin_path(
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """
    Get path to a maturin already on PATH.

    Args:
        environ: Environment whose PATH is searched (defaults to os.environ)

    Returns:
        Path to maturin executable, or None if not found
    """
    search_path = environ.get("PATH") if environ is not None else None
    maturin_path = shutil.which("maturin", path=search_path)
    return Path(maturin_path) if maturin_path else None


class MaturinInstaller:
    """
    Make a maturin executable available.

    Example:
        >>> installer = MaturinInstaller("v1.4.0")
        >>> exe = installer.ensure()
    """

    def __init__(
        self,
        tag: str,
        tools_dir: Optional[Path] = None,
        platform: Optional[PlatformInfo] = None,
        environ: Optional[MutableMapping[str, str]] = None,
    ):
        """
        Args:
            tag: Release tag to download when maturin is not on PATH
            tools_dir: Directory to install tools into
            platform: Platform information (auto-detected if None)
            environ: Environment searched and extended (defaults to os.environ)
        """
        self.tag = tag
        self.environ = environ
        self.tools_dir = Path(tools_dir) if tools_dir else get_tools_dir(environ)
        self.platform = platform or detect_platform()
        self.install_dir = self.tools_dir / "maturin" / tag

    @property
    def exe_name(self) -> str:
        return "maturin.exe" if self.platform.is_windows else "maturin"

    def ensure(self) -> Path:
        """
        Return a maturin executable, downloading it if needed.

        Raises:
            ToolDownloadError: If the download or unpacking fails
        """
        existing = get_system_maturin_path(self.environ)
        if existing:
            logger.info(f"Found 'maturin' at {existing}")
            return existing

        exe = self.download()
        logger.info(f"Installed 'maturin' to {exe}")
        add_path(exe.parent, self.environ)
        return exe

    def download(self) -> Path:
        """
        Download and unpack the release archive for this platform.

        Returns:
            Path to the maturin executable

        Raises:
            ToolDownloadError: If download or installation fails
        """
        url = get_download_url(self.tag, self.platform)
        archive_path = self.tools_dir / "downloads" / url.rsplit("/", 1)[-1]
        logger.debug(f"maturin download URL: {url}")

        try:
            download_file(url, archive_path)
            extract_archive(archive_path, self.install_dir)
        except (DownloadError, ArchiveExtractionError) as e:
            raise ToolDownloadError(f"maturin download failed: {e}") from e
        finally:
            if archive_path.exists():
                archive_path.unlink()

        exe = self.install_dir / self.exe_name
        if not exe.is_file():
            raise ToolDownloadError(
                f"maturin executable not found in archive. "
                f"Expected to find '{self.exe_name}' in {self.install_dir}."
            )

        make_executable(exe)
        return exe
