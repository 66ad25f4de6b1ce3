"""
Toolchain installation: maturin release lookup and download, Rust targets.
"""

from .version import DEFAULT_MATURIN_VERSION, LATEST_RELEASE_URL, resolve_version
from .maturin import (
    MaturinInstaller,
    get_asset_name,
    get_download_url,
    get_system_maturin_path,
)
from .rust import RustTargetInstaller

__all__ = [
    "DEFAULT_MATURIN_VERSION",
    "LATEST_RELEASE_URL",
    "resolve_version",
    "MaturinInstaller",
    "get_asset_name",
    "get_download_url",
    "get_system_maturin_path",
    "RustTargetInstaller",
]
