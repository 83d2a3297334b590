# SPDX-License-Identifier: Apache-2.0
"""IR parser: domain-model document text to a validated IRModel."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from stormforge.errors import ParseError

from .loader import load_yaml, read_document
from .types import IRModel
from .validator import validate_model

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def parse_document(text: str, source: Optional[str] = None) -> IRModel:
    """Parse and validate a domain-model document.

    Args:
        text: YAML document text
        source: Name of the document, used in error messages

    Returns:
        Validated, immutable IRModel

    Raises:
        ParseError: If the document cannot be deserialized into the IR
        IRValidationError: If the IR violates a structural invariant
    """
    data = load_yaml(text, source=source)

    try:
        model = IRModel.model_validate(data)
    except PydanticValidationError as e:
        raise ParseError(_describe(e), source=source) from e

    validate_model(model)

    logger.info(
        f"Parsed bounded context '{model.bounded_context.name}' "
        f"({len(model.aggregates)} aggregates, {len(model.commands)} commands, "
        f"{len(model.events)} events, {len(model.queries)} queries)"
    )
    return model


def parse_file(path: PathLike) -> IRModel:
    """Read, parse and validate a domain-model document from disk."""
    text = read_document(path)
    return parse_document(text, source=str(path))


def _describe(error: PydanticValidationError) -> str:
    """Flatten a pydantic error into ``location: message`` lines."""
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        lines.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(lines)
