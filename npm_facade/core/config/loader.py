"""
Configuration loader — reads npm-facade.yml and environment overrides.

The file is optional. When present it is found by walking up from the
working directory (or given explicitly), parsed as YAML and validated
into a FacadeConfig. NPMF_* environment variables win over the file.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from npm_facade.core.errors import ConfigError

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "npm-facade.yml"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class FacadeConfig(BaseModel):
    """How bindings reach npm."""

    binary: str = "npm"
    timeout: float | None = None
    env: dict[str, str] = Field(default_factory=dict)
    strict_options: bool = True


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for npm-facade.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to npm-facade.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(
    path: Path | None = None,
    *,
    start_dir: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> FacadeConfig:
    """Load facade configuration.

    Args:
        path: Explicit config file. If None, searches upward from
            ``start_dir``; a missing file is not an error.
        start_dir: Where the upward search begins (default: cwd).
        environ: Environment to read overrides from (default: os.environ).

    Returns:
        Validated FacadeConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file or
            override is invalid.
    """
    data: dict = {}

    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        data = _read_yaml(path)
    else:
        found = find_config_file(start_dir)
        if found is not None:
            data = _read_yaml(found)

    data.update(_env_overrides(os.environ if environ is None else environ))

    try:
        config = FacadeConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid npm-facade configuration: {e}") from e

    logger.debug("Facade config: binary=%s timeout=%s", config.binary, config.timeout)
    return config


def _read_yaml(path: Path) -> dict:
    logger.debug("Loading facade config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The file may wrap everything under an "npm" key or be flat
    section = data.get("npm", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected a mapping under 'npm' in {path}")
    return dict(section)


def _env_overrides(environ: Mapping[str, str]) -> dict:
    overrides: dict = {}

    if binary := environ.get("NPMF_BINARY"):
        overrides["binary"] = binary

    if timeout := environ.get("NPMF_TIMEOUT"):
        try:
            overrides["timeout"] = float(timeout)
        except ValueError:
            raise ConfigError(f"NPMF_TIMEOUT must be a number, got {timeout!r}") from None

    if strict := environ.get("NPMF_STRICT_OPTIONS"):
        value = strict.strip().lower()
        if value in _TRUE:
            overrides["strict_options"] = True
        elif value in _FALSE:
            overrides["strict_options"] = False
        else:
            raise ConfigError(f"NPMF_STRICT_OPTIONS must be a boolean, got {strict!r}")

    return overrides
