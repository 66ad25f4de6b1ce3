"""Input resolution for MaturinKit.

Inputs are looked up by name through layered sources, highest precedence
first: command-line flags, GitHub Actions ``INPUT_<NAME>`` environment
variables, a ``maturinkit.yaml`` file, then built-in defaults.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from maturinkit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "maturinkit.yaml"

INPUT_NAMES = (
    "command",
    "args",
    "target",
    "manylinux",
    "container",
    "rust-toolchain",
    "maturin-version",
    "extra-build-command",
)

DEFAULTS = {
    "command": "build",
    "maturin-version": "latest",
}


@dataclass(frozen=True)
class ActionInputs:
    """Resolved string inputs for one run."""

    command: str = "build"
    args: str = ""
    target: str = ""
    manylinux: str = ""
    container: str = ""
    rust_toolchain: str = ""
    maturin_version: str = "latest"
    extra_build_command: str = ""


def env_var_name(name: str) -> str:
    """
    Environment variable carrying an input, as the Actions runner names it.

    Example:
        >>> env_var_name("maturin-version")
        'INPUT_MATURIN-VERSION'
    """
    return f"INPUT_{name.replace(' ', '_').upper()}"


def load_config_file(config_file: Path, required: bool = False) -> Dict[str, str]:
    """
    Load input values from a YAML file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Mapping of input name to string value

    Raises:
        ConfigError: If the file is missing (when required), unparsable,
            or not a mapping
    """
    if not config_file.exists():
        if required:
            raise ConfigError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file} must contain a mapping of input names")

    values = {}
    for key, value in data.items():
        if key not in INPUT_NAMES:
            logger.warning(f"Ignoring unknown input '{key}' in {config_file}")
            continue
        values[key] = "" if value is None else str(value)
    return values


class InputProvider:
    """
    Name -> string lookup over layered sources.

    Example:
        >>> provider = InputProvider([{"target": "aarch64"}], environ={})
        >>> provider.get_input("target")
        'aarch64'
    """

    def __init__(
        self,
        layers: Optional[List[Mapping[str, Any]]] = None,
        environ: Optional[Mapping[str, str]] = None,
        config: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            layers: Explicit values (e.g. CLI flags), first match wins;
                None values are skipped
            environ: Environment for INPUT_* lookups (defaults to os.environ)
            config: Values loaded from a configuration file
        """
        self.layers = list(layers or [])
        self.environ = os.environ if environ is None else environ
        self.config = dict(config or {})

    def get_input(self, name: str) -> str:
        for layer in self.layers:
            value = layer.get(name)
            if value is not None:
                return str(value).strip()

        env_value = self.environ.get(env_var_name(name), "").strip()
        if env_value:
            return env_value

        config_value = self.config.get(name, "").strip()
        if config_value:
            return config_value

        return DEFAULTS.get(name, "")

    def resolve(self) -> ActionInputs:
        """Read every known input."""
        values = {name.replace("-", "_"): self.get_input(name) for name in INPUT_NAMES}
        return ActionInputs(**values)


def load_inputs(
    overrides: Optional[Mapping[str, Any]] = None,
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    project_root: Optional[Path] = None,
) -> ActionInputs:
    """
    Resolve all inputs for a run.

    Args:
        overrides: Values that beat every other source (CLI flags)
        config_file: Explicit configuration file (must exist)
        environ: Environment for INPUT_* lookups
        project_root: Directory searched for maturinkit.yaml

    Returns:
        ActionInputs
    """
    if config_file is not None:
        config = load_config_file(Path(config_file), required=True)
    else:
        root = Path(project_root) if project_root else Path.cwd()
        config = load_config_file(root / DEFAULT_CONFIG_FILE)

    layers = [dict(overrides)] if overrides else []
    return InputProvider(layers, environ=environ, config=config).resolve()
