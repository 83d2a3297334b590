# SPDX-License-Identifier: Apache-2.0
"""Intermediate Representation: data model, loading, parsing and validation."""

from .loader import load_yaml, read_document
from .parser import parse_document, parse_file
from .types import (
    Aggregate,
    BoundedContext,
    Command,
    Condition,
    Entity,
    EnumShape,
    EnumValue,
    Event,
    ExternalEventSubscription,
    IdentifierShape,
    Invariant,
    IRModel,
    Property,
    Query,
    RecordShape,
    ReturnType,
    Validation,
    ValueObject,
)
from .validator import RESERVED_HANDLER_NAMES, RESERVED_TYPE_NAMES, validate_model

__all__ = [
    "Aggregate",
    "BoundedContext",
    "Command",
    "Condition",
    "Entity",
    "EnumShape",
    "EnumValue",
    "Event",
    "ExternalEventSubscription",
    "IdentifierShape",
    "Invariant",
    "IRModel",
    "Property",
    "Query",
    "RecordShape",
    "ReturnType",
    "Validation",
    "ValueObject",
    "RESERVED_HANDLER_NAMES",
    "RESERVED_TYPE_NAMES",
    "load_yaml",
    "parse_document",
    "parse_file",
    "read_document",
    "validate_model",
]
