"""
Subprocess execution for MaturinKit.

All external commands (rustc, rustup, docker, maturin) go through
ProcessRunner so callers can be tested with a mock runner and so every
invocation is logged the same way.
"""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from maturinkit.core.exceptions import ProcessError

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Outcome of a finished subprocess."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.exit_code == 0


class ProcessRunner:
    """
    Run external commands and report their exit status.

    Output is streamed to the parent's stdout/stderr unless capture=True.
    """

    def run(
        self,
        command: str,
        args: Optional[Sequence[str]] = None,
        env: Optional[Mapping[str, str]] = None,
        capture: bool = False,
        check: bool = False,
    ) -> ProcessResult:
        """
        Run command with args and wait for it to exit.

        Args:
            command: Executable name or path
            args: Argument list
            env: Full environment for the child (inherits ours if None)
            capture: Capture stdout/stderr instead of streaming them
            check: Raise ProcessError on a nonzero exit code

        Returns:
            ProcessResult with the exit code and captured output

        Raises:
            ProcessError: If the command cannot be started, or exits
                nonzero while check=True
        """
        argv = [command, *(args or [])]
        logger.info(f"[command]{shlex.join(argv)}")

        try:
            completed = subprocess.run(
                argv,
                env=dict(env) if env is not None else None,
                capture_output=capture,
                text=True,
            )
        except OSError as e:
            raise ProcessError(f"Unable to run '{command}': {e}") from e

        result = ProcessResult(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

        if check and not result.success:
            raise ProcessError(
                f"'{command}' failed with exit code {result.exit_code}",
                result.exit_code,
            )
        return result
