"""
Core functionality for MaturinKit.

This package contains the foundational modules that other components depend on.
"""

from .directory import (
    get_global_cache_dir,
    get_tools_dir,
    get_workspace_dir,
    DirectoryError,
)

from .platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
)

from .process import (
    ProcessResult,
    ProcessRunner,
)

from .environment import (
    ExecutionEnvironment,
    add_path,
)

from .exceptions import (
    MaturinKitError,
    ConfigError,
    ContainerSelectionError,
    ProcessError,
    BuildFailedError,
    InstallError,
    TargetInstallError,
    ToolDownloadError,
)

__all__ = [
    "get_global_cache_dir",
    "get_tools_dir",
    "get_workspace_dir",
    "DirectoryError",
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
    "ProcessResult",
    "ProcessRunner",
    "ExecutionEnvironment",
    "add_path",
    "MaturinKitError",
    "ConfigError",
    "ContainerSelectionError",
    "ProcessError",
    "BuildFailedError",
    "InstallError",
    "TargetInstallError",
    "ToolDownloadError",
]
