"""
Build dispatch: host or container execution of maturin.
"""

from .args import tokenize
from .dispatcher import (
    BUILD_COMMANDS,
    SCRIPT_NAME,
    BuildPlan,
    Dispatcher,
    use_container,
)
from .script import ContainerScript, ScriptStep, build_container_script

__all__ = [
    "tokenize",
    "BUILD_COMMANDS",
    "SCRIPT_NAME",
    "BuildPlan",
    "Dispatcher",
    "use_container",
    "ContainerScript",
    "ScriptStep",
    "build_container_script",
]
