"""
Target and container resolution.

This package maps user-facing target aliases to Rust target triples and
picks the manylinux/musllinux container used for isolated builds.
"""

from .targets import DEFAULT_TARGETS, TARGET_ALIASES, default_target, resolve_target
from .containers import (
    AUTO_TIER,
    DEFAULT_CONTAINERS,
    DISABLED,
    ContainerImage,
    normalize_tier,
    resolve_image,
    select_container,
)

__all__ = [
    "DEFAULT_TARGETS",
    "TARGET_ALIASES",
    "default_target",
    "resolve_target",
    "AUTO_TIER",
    "DEFAULT_CONTAINERS",
    "DISABLED",
    "ContainerImage",
    "normalize_tier",
    "resolve_image",
    "select_container",
]
