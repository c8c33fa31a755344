"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
Every key is optional; an empty config reproduces the built-in defaults.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from loan_approval.config.settings import PipelineConfig
from loan_approval.errors import ConfigurationError


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        msg = f"Config file {path} must contain a mapping, got {type(data).__name__}"
        raise ConfigurationError(msg)
    return _process_config_values(data) if data else {}


def build_config(data: dict[str, Any]) -> PipelineConfig:
    """
    Validate a raw configuration mapping.

    Args:
        data: Nested mapping with optional sections data, cleaning,
            training and output.

    Returns:
        Validated PipelineConfig.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    try:
        return PipelineConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid configuration: {e}"
        raise ConfigurationError(msg) from e


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> PipelineConfig:
    """
    Load pipeline configuration from YAML file(s).

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.
            Defaults to a base.yaml next to config_path, if present.

    Returns:
        Fully validated PipelineConfig instance.

    Raises:
        ConfigurationError: If the file content is invalid.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        if potential_base.exists() and potential_base.resolve() != config_path.resolve():
            base_data = load_yaml(potential_base)
        else:
            base_data = {}

    main_data = load_yaml(config_path)

    return build_config(_deep_merge(base_data, main_data))


def apply_overrides(
    config: PipelineConfig,
    overrides: dict[str, dict[str, Any]],
) -> PipelineConfig:
    """
    Return a copy of config with section values replaced.

    None values are ignored so CLI options can be passed through unchanged.

    Args:
        config: Base configuration.
        overrides: Section name -> {field: value}.

    Returns:
        Re-validated PipelineConfig.
    """
    cleaned = {
        section: {k: v for k, v in values.items() if v is not None}
        for section, values in overrides.items()
    }
    merged = _deep_merge(config.model_dump(), cleaned)
    return build_config(merged)
