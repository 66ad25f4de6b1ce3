"""
Pytest configuration and shared fixtures for MaturinKit tests.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from maturinkit.core.exceptions import ProcessError
from maturinkit.core.platform import PlatformInfo
from maturinkit.core.process import ProcessResult


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@dataclass
class RecordedCall:
    command: str
    args: List[str]
    env: Optional[Dict[str, str]] = None
    capture: bool = False
    check: bool = False


@dataclass
class RecordingRunner:
    """
    Stand-in for ProcessRunner that records calls instead of spawning.

    Results are looked up by command name; anything unregistered exits 0.
    A registered callable receives the argument list and returns a result.
    """

    results: Dict[str, object] = field(default_factory=dict)
    calls: List[RecordedCall] = field(default_factory=list)

    def on(self, command: str, result=None, **kwargs) -> "RecordingRunner":
        if result is None:
            kwargs.setdefault("exit_code", 0)
            result = ProcessResult(**kwargs)
        self.results[command] = result
        return self

    def run(self, command, args=None, env=None, capture=False, check=False):
        args = list(args or [])
        self.calls.append(
            RecordedCall(
                command,
                args,
                dict(env) if env is not None else None,
                capture,
                check,
            )
        )
        handler = self.results.get(Path(command).name, ProcessResult(0))
        result = handler(args) if callable(handler) else handler
        if check and not result.success:
            raise ProcessError(f"'{command}' failed", result.exit_code)
        return result

    def calls_to(self, command: str) -> List[RecordedCall]:
        return [call for call in self.calls if Path(call.command).name == command]


@pytest.fixture
def runner() -> RecordingRunner:
    """Process runner that records every command."""
    return RecordingRunner()


@pytest.fixture
def linux_x64() -> PlatformInfo:
    return PlatformInfo("linux", "x64")


@pytest.fixture
def macos_arm64() -> PlatformInfo:
    return PlatformInfo("macos", "arm64")


@pytest.fixture
def windows_x64() -> PlatformInfo:
    return PlatformInfo("windows", "x64")


@pytest.fixture(autouse=True)
def outside_github_actions(monkeypatch):
    """Run every test as if outside a workflow unless it opts in."""
    for name in ("GITHUB_ACTIONS", "GITHUB_PATH", "GITHUB_TOKEN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def github_actions(monkeypatch):
    """Pretend to run inside GitHub Actions."""
    monkeypatch.setenv("GITHUB_ACTIONS", "true")
