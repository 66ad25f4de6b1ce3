"""
Container build script generation.

The script is assembled as an ordered list of steps and only rendered to
bash (through a Jinja2 template) when it is about to be written, so the
exact commands can be inspected without a container runtime.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from maturinkit.core.platform import PlatformInfo
from maturinkit.toolchain.maturin import RELEASE_URL

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "container_build.sh.j2"

DEFAULT_RUST_TOOLCHAIN = "stable"
RUSTUP_INIT = (
    "which rustup > /dev/null || curl --tlsv1.2 -sSf https://sh.rustup.rs | "
    "sh -s -- -y --profile minimal --default-toolchain {toolchain}"
)
# Interpreters shipped in the manylinux images
PYTHON_PATHS = (
    "/opt/python/cp36-cp36m/bin",
    "/opt/python/cp37-cp37m/bin",
    "/opt/python/cp38-cp38/bin",
    "/opt/python/cp39-cp39/bin",
)


@dataclass
class ScriptStep:
    """Commands run in order, optionally folded under a log group."""

    commands: List[str]
    title: Optional[str] = None


@dataclass
class ContainerScript:
    """An ordered bash script for the build container."""

    steps: List[ScriptStep] = field(default_factory=list)

    def add(self, *commands: str, title: Optional[str] = None) -> "ContainerScript":
        self.steps.append(ScriptStep(list(commands), title))
        return self

    def commands(self) -> List[str]:
        """All commands in execution order, without group markers."""
        return [command for step in self.steps for command in step.commands]

    def render(self) -> str:
        env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        return env.get_template(TEMPLATE_NAME).render(steps=self.steps)


def build_container_script(
    tag: str,
    build_args: Sequence[str],
    platform: PlatformInfo,
    target: str = "",
    rust_toolchain: str = "",
    extra_build_command: str = "",
) -> ContainerScript:
    """
    Assemble the script that installs Rust and maturin, then builds.

    Args:
        tag: maturin release tag to install
        build_args: Full maturin argument list (subcommand first)
        platform: Host platform; its architecture picks the maturin binary
        target: Rust target to install ('' for none)
        rust_toolchain: Toolchain channel (defaults to stable)
        extra_build_command: Shell line run verbatim before the build

    Returns:
        ContainerScript
    """
    toolchain = rust_toolchain or DEFAULT_RUST_TOOLCHAIN
    url = RELEASE_URL.format(
        tag=tag, asset=f"maturin-{platform.release_arch()}-unknown-linux-musl.tar.gz"
    )

    script = ContainerScript()
    script.add(
        RUSTUP_INIT.format(toolchain=toolchain),
        'export PATH="$HOME/.cargo/bin:$PATH"',
        f"rustup override set {toolchain}",
        title="Install Rust",
    )
    script.add(f'export PATH="$PATH:{":".join(PYTHON_PATHS)}"')
    script.add(
        f"curl -L {url} | tar -xz -C /usr/local/bin",
        "maturin --version",
        title="Install maturin",
    )
    if target:
        script.add(
            f"if [[ ! -d $(rustc --print target-libdir --target {target}) ]]; "
            f"then rustup target add {target}; fi",
            title="Install Rust target",
        )
    if extra_build_command:
        script.add(extra_build_command)
    # Left unquoted so the container shell expands variables and globs
    script.add(" ".join(["maturin", *build_args]))
    return script
