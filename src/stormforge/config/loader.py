# SPDX-License-Identifier: Apache-2.0
"""Generator configuration loader with version validation."""

from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from .generator import CURRENT_CONFIG_VERSION, MIN_SUPPORTED_VERSION, GeneratorConfig

PathLike = Union[str, Path]


class ConfigVersionError(RuntimeError):
    """Error when configuration version is incompatible."""


def load_config(path: PathLike) -> GeneratorConfig:
    """Load and validate generator configuration from a YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        GeneratorConfig instance

    Raises:
        ConfigVersionError: If config version is missing or too old
        FileNotFoundError: If the YAML file doesn't exist
        ValueError: If the YAML is invalid or contains invalid configuration
    """
    yaml_path = Path(path)
    if not yaml_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        yaml_content = yaml_path.read_text(encoding="utf-8")

        # Expand environment variables
        cfg_dict = yaml.safe_load(os.path.expandvars(yaml_content))
        if not isinstance(cfg_dict, dict):
            raise ValueError("YAML file must contain a dictionary at the root level")

        normalized_data = _normalize_yaml_keys(cfg_dict)

        ver = str(normalized_data.get("config_version", ""))
        if not ver:
            raise ConfigVersionError(
                'config_version missing. Add `config_version: "1"` to your YAML.'
            )

        if ver < MIN_SUPPORTED_VERSION:
            raise ConfigVersionError(
                f"Config version {ver} is too old. "
                f"Minimum supported is {MIN_SUPPORTED_VERSION}."
            )

        if ver > CURRENT_CONFIG_VERSION:
            warnings.warn(
                f"This generator understands config_version {CURRENT_CONFIG_VERSION}, "
                f"but file is {ver}. Attempting best-effort parse.",
                UserWarning,
                stacklevel=2,
            )

        normalized_data["config_version"] = ver
        return GeneratorConfig(**normalized_data)

    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in configuration file: {e}") from e
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Failed to read configuration from {path}: {e}") from e


def _normalize_yaml_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize YAML keys from kebab-case to snake_case."""
    return {str(key).replace("-", "_"): value for key, value in data.items()}
