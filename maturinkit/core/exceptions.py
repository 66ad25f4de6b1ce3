"""
Centralized exception hierarchy for MaturinKit.

Every fatal condition raised while resolving or dispatching a build derives
from MaturinKitError so the CLI can report it through a single handler.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class MaturinKitError(Exception):
    """Base exception for all MaturinKit errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(MaturinKitError):
    """Configuration file or input could not be read."""

    pass


class ContainerSelectionError(ConfigError):
    """Raised when no container image matches the requested target and tier."""

    def __init__(self, target: str, tier: str):
        self.target = target
        self.tier = tier
        super().__init__(
            f"No default container for target '{target or '<host>'}' "
            f"and manylinux '{tier}'; set 'container' explicitly"
        )


# ============================================================================
# Process Exceptions
# ============================================================================


class ProcessError(MaturinKitError):
    """A subprocess could not be started or exited with a nonzero code."""

    def __init__(self, message: str, exit_code: int = -1):
        self.exit_code = exit_code
        super().__init__(message)


class BuildFailedError(ProcessError):
    """The assembled maturin command returned a nonzero exit code."""

    def __init__(self, exit_code: int):
        super().__init__(f"maturin: returned {exit_code}", exit_code)


# ============================================================================
# Installation Exceptions
# ============================================================================


class InstallError(MaturinKitError):
    """Base exception for installation errors."""

    pass


class TargetInstallError(InstallError):
    """Rust target could not be probed or installed."""

    pass


class ToolDownloadError(InstallError):
    """Error downloading or unpacking the maturin binary."""

    pass
