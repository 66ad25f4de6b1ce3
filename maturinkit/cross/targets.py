"""
Rust target triple resolution.

Users may pass either a full target triple or a short architecture alias
(e.g. 'aarch64', 'x64'). Aliases are interpreted relative to the host
operating system, so 'x64' means 'x86_64-apple-darwin' on macOS and
'x86_64-pc-windows-msvc' on Windows.
"""

from types import MappingProxyType
from typing import Mapping, Optional

# Host architecture -> default Linux target used to pick a fallback container
DEFAULT_TARGETS: Mapping[str, str] = MappingProxyType(
    {
        "x64": "x86_64-unknown-linux-gnu",
        "arm64": "aarch64-unknown-linux-gnu",
    }
)

# Host OS -> alias -> full target triple
TARGET_ALIASES: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "macos": MappingProxyType(
            {
                "x64": "x86_64-apple-darwin",
                "x86_64": "x86_64-apple-darwin",
                "aarch64": "aarch64-apple-darwin",
            }
        ),
        "linux": MappingProxyType(
            {
                "x64": "x86_64-unknown-linux-gnu",
                "x86_64": "x86_64-unknown-linux-gnu",
                "i686": "i686-unknown-linux-gnu",
                "x86": "i686-unknown-linux-gnu",
                "aarch64": "aarch64-unknown-linux-gnu",
                "armv7": "armv7-unknown-linux-gnueabihf",
                "armv7l": "armv7-unknown-linux-gnueabihf",
                "ppc64le": "powerpc64le-unknown-linux-gnu",
                "ppc64": "powerpc64-unknown-linux-gnu",
                "s390x": "s390x-unknown-linux-gnu",
            }
        ),
        "windows": MappingProxyType(
            {
                "x64": "x86_64-pc-windows-msvc",
                "x86_64": "x86_64-pc-windows-msvc",
                "i686": "i686-pc-windows-msvc",
                "x86": "i686-pc-windows-msvc",
                "aarch64": "aarch64-pc-windows-msvc",
            }
        ),
    }
)


def resolve_target(explicit_target: str, platform_id: str) -> str:
    """
    Get the full Rust target triple for a user-supplied target.

    Args:
        explicit_target: Target input, either an alias or a full triple
        platform_id: Host OS ('linux', 'macos', 'windows')

    Returns:
        The aliased triple, explicit_target unchanged when it is not an
        alias, or '' when no target was given (build for the host)

    Example:
        >>> resolve_target('aarch64', 'macos')
        'aarch64-apple-darwin'
        >>> resolve_target('wasm32-unknown-unknown', 'linux')
        'wasm32-unknown-unknown'
    """
    if not explicit_target:
        return ""
    aliases = TARGET_ALIASES.get(platform_id, {})
    return aliases.get(explicit_target, explicit_target)


def default_target(arch: str) -> Optional[str]:
    """Default Linux target for a host architecture, if there is one."""
    return DEFAULT_TARGETS.get(arch)
