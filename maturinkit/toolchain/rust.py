"""
Rust toolchain management through rustup.

Target installation is idempotent: a target counts as installed when the
library directory reported by 'rustc --print target-libdir' exists.
"""

import logging
from pathlib import Path
from typing import Optional

from maturinkit.core.exceptions import TargetInstallError
from maturinkit.core.process import ProcessRunner

logger = logging.getLogger(__name__)


class RustTargetInstaller:
    """
    Install Rust targets with rustup, skipping ones already present.

    Example:
        >>> installer = RustTargetInstaller(ProcessRunner())
        >>> installer.ensure("aarch64-apple-darwin", toolchain="nightly")
    """

    def __init__(self, runner: Optional[ProcessRunner] = None):
        self.runner = runner or ProcessRunner()

    def set_override(self, toolchain: str) -> None:
        """Pin the toolchain for the current directory (rustup override set)."""
        self.runner.run("rustup", ["override", "set", toolchain], check=True)

    def target_libdir(self, target: str, toolchain: str = "") -> Optional[Path]:
        """
        Query rustc for a target's library directory.

        Returns:
            The reported directory, or None if rustc failed without
            writing anything to stderr

        Raises:
            TargetInstallError: If rustc failed and reported an error
        """
        args = ["--print", "target-libdir", "--target", target]
        if toolchain:
            args.insert(0, f"+{toolchain}")

        result = self.runner.run("rustc", args, capture=True)
        if result.stderr and not result.success:
            raise TargetInstallError(result.stderr.strip())

        libdir = result.stdout.strip()
        return Path(libdir) if libdir else None

    def is_installed(self, target: str, toolchain: str = "") -> bool:
        libdir = self.target_libdir(target, toolchain)
        return libdir is not None and libdir.exists()

    def ensure(self, target: str, toolchain: str = "") -> None:
        """
        Install a target unless it is already available.

        Args:
            target: Rust target triple ('' means the host, nothing to do)
            toolchain: Toolchain channel to install into ('' for the active one)
        """
        if not target:
            return

        if self.is_installed(target, toolchain):
            logger.debug(f"Rust target {target} already installed")
            return

        if toolchain:
            args = ["target", "add", "--toolchain", toolchain, target]
        else:
            args = ["target", "add", target]
        self.runner.run("rustup", args, check=True)
