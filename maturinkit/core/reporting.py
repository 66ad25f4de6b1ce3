"""
Run reporting: collapsible log groups, warnings and failure status.

Inside GitHub Actions (GITHUB_ACTIONS=true) these helpers print workflow
commands so the runner folds groups and annotates warnings and errors.
Everywhere else they fall back to ordinary log records.
"""

import logging
import os
import sys
from contextlib import contextmanager
from typing import Iterator, Mapping, Optional

logger = logging.getLogger(__name__)


def in_github_actions(environ: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get("GITHUB_ACTIONS", "").lower() == "true"


def escape_data(message: str) -> str:
    """
    Encode a message so the runner reads it as a single command.

    Example:
        >>> escape_data("line one\\nline two")
        'line one%0Aline two'
    """
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _command(name: str, message: str = "") -> None:
    sys.stdout.write(f"::{name}::{escape_data(message)}\n")
    sys.stdout.flush()


@contextmanager
def group(title: str) -> Iterator[None]:
    """
    Wrap log output in a collapsible group.

    The group is only closed when the body completes; a failing step
    leaves it open so the error is visible in the unfolded output.

    Example:
        >>> with group("Install maturin"):
        ...     installer.ensure()
    """
    if in_github_actions():
        _command("group", title)
    else:
        logger.info(f"==> {title}")
    yield
    if in_github_actions():
        _command("endgroup")


def warning(message: str) -> None:
    """Report a non-fatal problem."""
    logger.warning(message)
    if in_github_actions():
        _command("warning", message)


def set_failed(message: str) -> int:
    """
    Record the run as failed.

    Returns:
        The process exit code to use (always 1)
    """
    logger.error(f"Error: {message}")
    if in_github_actions():
        _command("error", message)
    return 1
