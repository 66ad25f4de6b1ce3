"""
Directory locations used by MaturinKit.

Directory Structure:
    Global Cache (~/.maturinkit/ or %USERPROFILE%\\.maturinkit\\):
        - tools/maturin/<tag>/ : Unpacked maturin release binaries
        - downloads/           : Release archives

    Workspace (GITHUB_WORKSPACE or the current directory):
        - run-maturin-action.sh : Generated container build script
"""

import os
from pathlib import Path
from typing import Mapping, Optional


class DirectoryError(Exception):
    """Base exception for directory-related errors."""

    pass


def get_global_cache_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the global cache directory path.

    MATURINKIT_CACHE_DIR takes precedence over the platform default.

    Returns:
        Path: The global cache directory path.
            - Windows: %USERPROFILE%\\.maturinkit
            - Linux/macOS: ~/.maturinkit/
    """
    env = os.environ if environ is None else environ

    override = env.get("MATURINKIT_CACHE_DIR")
    if override:
        return Path(override)

    if os.name == "nt":
        user_profile = env.get("USERPROFILE")
        if not user_profile:
            raise DirectoryError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine global cache directory."
            )
        return Path(user_profile) / ".maturinkit"
    return Path.home() / ".maturinkit"


def get_tools_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    return get_global_cache_dir(environ) / "tools"


def get_workspace_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Directory shared with the build container (GITHUB_WORKSPACE or cwd)."""
    env = os.environ if environ is None else environ
    workspace = env.get("GITHUB_WORKSPACE")
    return Path(workspace) if workspace else Path.cwd()
