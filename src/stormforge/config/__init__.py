# SPDX-License-Identifier: Apache-2.0
"""Configuration management for StormForge."""

from .generator import CURRENT_CONFIG_VERSION, MIN_SUPPORTED_VERSION, GeneratorConfig
from .loader import ConfigVersionError, load_config

__all__ = [
    "GeneratorConfig",
    "CURRENT_CONFIG_VERSION",
    "MIN_SUPPORTED_VERSION",
    "load_config",
    "ConfigVersionError",
]
