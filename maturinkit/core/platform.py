"""
Host platform detection for MaturinKit.

This module detects the operating system and CPU architecture of the machine
running the build. The normalized values key every lookup table in the
package (target aliases, default containers, maturin release assets).

Usage:
    from maturinkit.core.platform import detect_platform

    platform_info = detect_platform()
    print(f"OS: {platform_info.os}")
    print(f"Architecture: {platform_info.arch}")
    print(f"Platform string: {platform_info.platform_string()}")
"""

import functools
import platform
from dataclasses import dataclass


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos')
        arch: CPU architecture ('x64', 'arm64', 'x86', 'arm')
        os_version: OS version string (e.g., '10.0.19041', '5.15.0', '14.1')
    """

    os: str
    arch: str
    os_version: str = ""

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    @property
    def is_macos(self) -> bool:
        return self.os == "macos"

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'macos-arm64').

        Example:
            >>> PlatformInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    def release_arch(self) -> str:
        """
        Architecture name used by maturin release assets.

        Only aarch64 and x86_64 binaries are published, so every
        non-ARM64 host resolves to x86_64.

        Example:
            >>> PlatformInfo('macos', 'arm64').release_arch()
            'aarch64'
        """
        return "aarch64" if self.arch == "arm64" else "x86_64"

    def __str__(self) -> str:
        if self.os_version:
            return f"{self.platform_string()} v{self.os_version}"
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo instance with detected platform information
    """
    return PlatformInfo(
        os=_detect_os(), arch=_detect_architecture(), os_version=_detect_os_version()
    )


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name: 'windows', 'linux', 'macos'

    Raises:
        RuntimeError: If OS is not supported
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    else:
        raise RuntimeError(f"Unsupported operating system: {system}")


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        # Return original for unknown architectures
        return machine


def _detect_os_version() -> str:
    system = platform.system().lower()

    if system == "darwin":
        return platform.mac_ver()[0] or "unknown"
    elif system == "linux":
        return platform.release()
    else:
        return platform.version()


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
]
