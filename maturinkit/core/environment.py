"""
Environment handling for build commands.

ExecutionEnvironment is a copy-on-write view of the process environment:
overrides are layered on a snapshot and the ambient os.environ is never
touched. The one exception is search-path registration (add_path), which
installers use to make freshly unpacked tools visible to later lookups
and, through GITHUB_PATH, to later workflow steps.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, MutableMapping, Optional, Union

logger = logging.getLogger(__name__)

# Cross-compile SDK variables for macOS universal2 wheels
DEVELOPER_DIR = "/Applications/Xcode.app/Contents/Developer"
UNIVERSAL2_ENV = {
    "DEVELOPER_DIR": DEVELOPER_DIR,
    "SDKROOT": f"{DEVELOPER_DIR}/Platforms/MacOSX.platform/Developer/SDKs/MacOSX.sdk",
    "MACOSX_DEPLOYMENT_TARGET": "10.9",
}


class ExecutionEnvironment(Mapping[str, str]):
    """
    Immutable environment snapshot with layered overrides.

    Example:
        >>> env = ExecutionEnvironment.from_ambient()
        >>> env = env.with_overrides(MACOSX_DEPLOYMENT_TARGET="10.9")
        >>> runner.run("maturin", ["build"], env=env)
    """

    def __init__(
        self,
        base: Mapping[str, str],
        overrides: Optional[Mapping[str, str]] = None,
    ):
        self._base: Dict[str, str] = dict(base)
        self._overrides: Dict[str, str] = dict(overrides or {})

    @classmethod
    def from_ambient(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "ExecutionEnvironment":
        """Snapshot the current process environment."""
        return cls(os.environ if environ is None else environ)

    def with_overrides(
        self, overrides: Optional[Mapping[str, str]] = None, **kwargs: str
    ) -> "ExecutionEnvironment":
        """Return a new environment with extra variables layered on top."""
        merged = dict(self._overrides)
        merged.update(overrides or {})
        merged.update(kwargs)
        return ExecutionEnvironment(self._base, merged)

    @property
    def overrides(self) -> Dict[str, str]:
        return dict(self._overrides)

    def __getitem__(self, key: str) -> str:
        if key in self._overrides:
            return self._overrides[key]
        return self._base[key]

    def __iter__(self) -> Iterator[str]:
        yield from self._base
        for key in self._overrides:
            if key not in self._base:
                yield key

    def __len__(self) -> int:
        return len(set(self._base) | set(self._overrides))


def add_path(
    directory: Union[str, Path],
    environ: Optional[MutableMapping[str, str]] = None,
) -> None:
    """
    Prepend a directory to PATH.

    When GITHUB_PATH names a file, the directory is also appended to it so
    that subsequent workflow steps inherit the addition.

    Args:
        directory: Directory to register
        environ: Environment to modify (defaults to os.environ)
    """
    env = os.environ if environ is None else environ
    directory = str(directory)

    github_path = env.get("GITHUB_PATH")
    if github_path:
        with open(github_path, "a", encoding="utf-8") as f:
            f.write(f"{directory}\n")

    current = env.get("PATH", "")
    env["PATH"] = f"{directory}{os.pathsep}{current}" if current else directory
    logger.debug(f"Added {directory} to PATH")


def find_tool_cache_pythons(tool_cache: Path, arch: str) -> List[Path]:
    """
    List completed Python installations in a runner tool cache.

    The hosted-runner layout is <tool_cache>/Python/<version>/<arch>, with an
    '<arch>.complete' marker file written once the install finished.

    Args:
        tool_cache: Root of the tool cache (RUNNER_TOOL_CACHE)
        arch: Runner architecture name ('x64', 'arm64')

    Returns:
        Installation directories, ordered by version directory name
    """
    python_root = tool_cache / "Python"
    if not python_root.is_dir():
        return []

    found = []
    for version_dir in sorted(python_root.iterdir()):
        install_dir = version_dir / arch
        marker = version_dir / f"{arch}.complete"
        if install_dir.is_dir() and marker.exists():
            found.append(install_dir)
    return found


def add_tool_cache_pythons_to_path(
    arch: str, environ: Optional[MutableMapping[str, str]] = None
) -> List[Path]:
    """
    Register every cached Python interpreter on PATH.

    Returns:
        The installation directories that were added
    """
    env = os.environ if environ is None else environ
    tool_cache = env.get("RUNNER_TOOL_CACHE")
    if not tool_cache:
        logger.debug("RUNNER_TOOL_CACHE not set, skipping cached Python lookup")
        return []

    installs = find_tool_cache_pythons(Path(tool_cache), arch)
    for install_dir in installs:
        logger.info(
            f"Python version {install_dir.parent.name} was found in the local cache"
        )
        add_path(install_dir, env)
        add_path(install_dir / "bin", env)
    return installs
