"""
Build container selection.

Maps a Rust target triple and a manylinux/musllinux compatibility tier to
a pinned Docker image. Selection precedence:

1. An explicit 'container' input is used verbatim.
2. DEFAULT_CONTAINERS[target][tier]
3. DEFAULT_CONTAINERS[target]['auto']
4. When the target has no row (including "no target"), the row of the
   host's default target, applying steps 2 and 3 to it.
"""

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from maturinkit.core.exceptions import ContainerSelectionError
from maturinkit.cross.targets import default_target

logger = logging.getLogger(__name__)

AUTO_TIER = "auto"
DISABLED = "off"

# Images without a tag in this family get the maturin release tag appended
LEGACY_IMAGE_PREFIX = "konstin2/maturin"
LEGACY_ENTRYPOINT = "/bin/bash"

_TIER_PREFIX = re.compile(r"^manylinux_?")


def _row(images: dict) -> Mapping[str, str]:
    return MappingProxyType(images)


DEFAULT_CONTAINERS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "x86_64-unknown-linux-gnu": _row(
            {
                "auto": "quay.io/pypa/manylinux2010_x86_64:latest",
                "2010": "quay.io/pypa/manylinux2010_x86_64:latest",
                "2_12": "quay.io/pypa/manylinux2010_x86_64:latest",
                "2014": "quay.io/pypa/manylinux2014_x86_64:latest",
                "2_17": "quay.io/pypa/manylinux2014_x86_64:latest",
                "2_24": "quay.io/pypa/manylinux_2_24_x86_64:latest",
            }
        ),
        "x86_64-unknown-linux-musl": _row(
            {
                "auto": "messense/rust-musl-cross:x86_64-musl",
                "musllinux_1_2": "messense/rust-musl-cross:x86_64-musl",
            }
        ),
        "i686-unknown-linux-gnu": _row(
            {
                "auto": "quay.io/pypa/manylinux2010_i686:latest",
                "2010": "quay.io/pypa/manylinux2010_i686:latest",
                "2_12": "quay.io/pypa/manylinux2010_i686:latest",
                "2014": "quay.io/pypa/manylinux2014_i686:latest",
                "2_17": "quay.io/pypa/manylinux2014_i686:latest",
                "2_24": "quay.io/pypa/manylinux_2_24_i686:latest",
            }
        ),
        "i686-unknown-linux-musl": _row(
            {
                "auto": "messense/rust-musl-cross:i686-musl",
                "musllinux_1_2": "messense/rust-musl-cross:i686-musl",
            }
        ),
        "aarch64-unknown-linux-gnu": _row(
            {
                "auto": "messense/manylinux2014-cross:aarch64",
                "2014": "messense/manylinux2014-cross:aarch64",
                "2_17": "messense/manylinux2014-cross:aarch64",
                "2_24": "messense/manylinux_2_24-cross:aarch64",
            }
        ),
        "aarch64-unknown-linux-musl": _row(
            {
                "auto": "messense/rust-musl-cross:aarch64-musl",
                "musllinux_1_2": "messense/rust-musl-cross:aarch64-musl",
            }
        ),
        "armv7-unknown-linux-gnueabihf": _row(
            {
                "auto": "messense/manylinux2014-cross:armv7",
                "2014": "messense/manylinux2014-cross:armv7",
                "2_17": "messense/manylinux2014-cross:armv7",
                "2_24": "messense/manylinux_2_24-cross:armv7",
            }
        ),
        "armv7-unknown-linux-musleabihf": _row(
            {
                "auto": "messense/rust-musl-cross:armv7-musleabihf",
                "musllinux_1_2": "messense/rust-musl-cross:armv7-musleabihf",
            }
        ),
        "powerpc64-unknown-linux-gnu": _row(
            {
                "auto": "messense/manylinux2014-cross:ppc64",
                "2014": "messense/manylinux2014-cross:ppc64",
                "2_17": "messense/manylinux2014-cross:ppc64",
            }
        ),
        "powerpc64le-unknown-linux-gnu": _row(
            {
                "auto": "messense/manylinux2014-cross:ppc64le",
                "2014": "messense/manylinux2014-cross:ppc64le",
                "2_17": "messense/manylinux2014-cross:ppc64le",
                "2_24": "messense/manylinux_2_24-cross:ppc64le",
            }
        ),
        "powerpc64le-unknown-linux-musl": _row(
            {
                "auto": "messense/rust-musl-cross:powerpc64le-musl",
                "musllinux_1_2": "messense/rust-musl-cross:powerpc64le-musl",
            }
        ),
        "s390x-unknown-linux-gnu": _row(
            {
                "auto": "messense/manylinux2014-cross:s390x",
                "2014": "messense/manylinux2014-cross:s390x",
                "2_17": "messense/manylinux2014-cross:s390x",
                "2_24": "messense/manylinux_2_24-cross:s390x",
            }
        ),
    }
)


@dataclass(frozen=True)
class ContainerImage:
    """
    A Docker image ready to pull and run.

    Attributes:
        reference: Full image reference including tag
        entrypoint: Entrypoint override, or None to keep the image's own
    """

    reference: str
    entrypoint: Optional[str] = None


def normalize_tier(raw: str) -> str:
    """
    Strip the 'manylinux' / 'manylinux_' prefix from a tier input.

    Example:
        >>> normalize_tier('manylinux2014')
        '2014'
        >>> normalize_tier('manylinux_2_24')
        '2_24'
        >>> normalize_tier('musllinux_1_2')
        'musllinux_1_2'
    """
    return _TIER_PREFIX.sub("", raw.strip())


def select_container(
    target: str,
    tier_raw: str,
    override: str = "",
    host_arch: str = "x64",
    table: Mapping[str, Mapping[str, str]] = DEFAULT_CONTAINERS,
) -> str:
    """
    Choose the container image for a target and compatibility tier.

    Args:
        target: Resolved Rust target triple ('' for the host default)
        tier_raw: manylinux input, with or without its prefix
        override: User-supplied container, wins when non-empty
        host_arch: Host architecture used for the default-target fallback
        table: Selection table (target -> tier -> image)

    Returns:
        Container image name, possibly without a tag

    Raises:
        ContainerSelectionError: If nothing in the table applies
    """
    if override:
        return override

    tier = normalize_tier(tier_raw)
    row = table.get(target)
    if row is None:
        fallback = default_target(host_arch)
        row = table.get(fallback, {}) if fallback else {}
        logger.debug(
            f"No containers registered for '{target}', using defaults of '{fallback}'"
        )

    image = row.get(tier) or row.get(AUTO_TIER)
    if not image:
        raise ContainerSelectionError(target, tier)
    return image


def resolve_image(container: str, tag: str) -> ContainerImage:
    """
    Turn a selected container name into a pullable image reference.

    Untagged images of the legacy 'konstin2/maturin' family get the maturin
    release tag appended, and since they ship maturin as their entrypoint
    the entrypoint is replaced with bash.

    Example:
        >>> resolve_image('konstin2/maturin', 'v0.11.5')
        ContainerImage(reference='konstin2/maturin:v0.11.5', entrypoint='/bin/bash')
    """
    if ":" in container or not container.startswith(LEGACY_IMAGE_PREFIX):
        return ContainerImage(reference=container)
    return ContainerImage(reference=f"{container}:{tag}", entrypoint=LEGACY_ENTRYPOINT)
