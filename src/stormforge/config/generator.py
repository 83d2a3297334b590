# SPDX-License-Identifier: Apache-2.0
"""Pydantic configuration model for generator runs."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

PathLike = Union[str, Path]

# Configuration versioning constants
CURRENT_CONFIG_VERSION = "1"
MIN_SUPPORTED_VERSION = "1"


class GeneratorConfig(BaseModel):
    """Settings that shape the generated project but not its domain content.

    Loaded from an optional YAML file (snake_case or kebab-case keys) and
    overridden field by field from the command line.
    """

    config_version: str = Field(
        default=CURRENT_CONFIG_VERSION, description="Configuration schema version"
    )
    package_name: Optional[str] = Field(
        default=None,
        description="Import package of the generated service (default: snake-cased context name)",
    )
    service_port: int = Field(
        default=3000, description="Port the generated service listens on", ge=1, le=65535
    )
    api_prefix: str = Field(default="/api", description="Path prefix of all generated routes")
    python_requires: str = Field(
        default=">=3.9", description="Python version specifier of the generated project"
    )

    model_config = ConfigDict(extra="forbid")  # Reject unknown keys

    @field_validator("package_name")
    @classmethod
    def validate_package_name(cls, v: Optional[str]) -> Optional[str]:
        """Package name must be importable."""
        if v is None:
            return v
        v = v.strip()
        if not v.isidentifier():
            raise ValueError(f"Invalid package name: {v!r}")
        return v

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalize the prefix to a leading slash and no trailing slash."""
        if not v.startswith("/"):
            raise ValueError(f"api_prefix must start with '/': {v!r}")
        return v.rstrip("/")

    @classmethod
    def from_yaml(cls, path: PathLike) -> GeneratorConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            GeneratorConfig instance
        """
        from .loader import load_config

        return load_config(path)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    def merge_overrides(self, **overrides: Any) -> GeneratorConfig:
        """Create a new config with field overrides.

        Args:
            **overrides: Field values to override; ``None`` values are ignored

        Returns:
            New GeneratorConfig instance with overrides applied
        """
        current_data = self.to_dict()
        for key, value in overrides.items():
            if value is not None:
                current_data[key] = value
        return self.__class__(**current_data)
