"""
Configuration module for MaturinKit.

Provides layered input resolution (CLI flags, INPUT_* environment
variables, maturinkit.yaml, defaults).
"""

from .inputs import (
    DEFAULT_CONFIG_FILE,
    INPUT_NAMES,
    ActionInputs,
    InputProvider,
    env_var_name,
    load_config_file,
    load_inputs,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "INPUT_NAMES",
    "ActionInputs",
    "InputProvider",
    "env_var_name",
    "load_config_file",
    "load_inputs",
]
