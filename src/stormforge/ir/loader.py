# SPDX-License-Identifier: Apache-2.0
"""Domain-model document loading.

Reads the YAML document from disk or from a string and returns the raw
mapping the parser turns into the IR.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from stormforge.errors import GeneratorIOError, ParseError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_TOP_LEVEL_KEYS = {
    "bounded-context": "bounded_context",
    "value-objects": "value_objects",
    "external-events": "external_events",
    "type-aliases": "type_aliases",
}


def read_document(path: PathLike) -> str:
    """Read a domain-model document from disk.

    Args:
        path: Path to the YAML document

    Returns:
        Document text

    Raises:
        GeneratorIOError: If the file is missing or cannot be read
    """
    doc_path = Path(path)
    if not doc_path.is_file():
        raise GeneratorIOError(doc_path, "IR document not found")

    try:
        text = doc_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise GeneratorIOError(doc_path, f"Failed to read IR document ({e})") from e

    logger.debug(f"Read {len(text)} characters from {doc_path}")
    return text


def load_yaml(text: str, source: Optional[str] = None) -> Dict[str, Any]:
    """Deserialize document text into a mapping with normalized top-level keys.

    Args:
        text: YAML document text
        source: Name of the document, used in error messages

    Returns:
        Dictionary with snake_case top-level keys

    Raises:
        ParseError: If the YAML is invalid or its root is not a mapping
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"invalid YAML ({e})", source=source) from e

    if not isinstance(data, dict):
        raise ParseError(
            "document must contain a mapping at the root level", source=source
        )

    if "version" in data and not isinstance(data["version"], str):
        # An unquoted 1.10 loads as the float 1.1
        data["version"] = _scalar_text(text, "version", data["version"])

    return _normalize_top_level_keys(data)


def _scalar_text(text: str, key: str, fallback: Any) -> Any:
    """Source text of the top-level scalar under ``key``, as written."""
    root = yaml.compose(text, Loader=yaml.SafeLoader)
    if isinstance(root, yaml.MappingNode):
        for key_node, value_node in root.value:
            if key_node.value == key and isinstance(value_node, yaml.ScalarNode):
                return value_node.value
    return fallback


def _normalize_top_level_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize top-level keys from kebab-case to snake_case.

    Nested keys are left alone: below the top level, map keys are construct
    names chosen by the model author.
    """
    normalized = {}
    for key, value in data.items():
        normalized[_TOP_LEVEL_KEYS.get(key, key)] = value
    return normalized
