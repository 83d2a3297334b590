# SPDX-License-Identifier: Apache-2.0
"""Structural validation of the IR.

Rules run as a fixed checklist and the first violation is raised; there is no
partial recovery. Diagnostics that cannot break generation are logged as
warnings instead.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Tuple

from stormforge.errors import IRValidationError
from stormforge.naming import to_field_name, to_pascal_case

from .types import IRModel

logger = logging.getLogger(__name__)

# Type names emitted by the generator itself, and names imported into the
# generated modules
RESERVED_TYPE_NAMES = frozenset(
    {
        "DomainModel",
        "PagedResult",
        "DomainEvent",
        "EventMetadata",
        "ExternalEventSubscription",
        "CommandError",
        "CommandErrorKind",
        "CommandHandler",
        "ApiError",
        "ApiResponse",
        "Any",
        "BaseModel",
        "ClassVar",
        "ConfigDict",
        "Decimal",
        "Dict",
        "Enum",
        "Field",
        "Generic",
        "List",
        "Literal",
        "NamedTuple",
        "Optional",
        "Query",
        "T",
        "Tuple",
        "Type",
        "TypeVar",
        "Union",
    }
)

# Module-level names of the generated routes module that a route handler
# function must not rebind
RESERVED_HANDLER_NAMES = frozenset(
    {"create_router", "router", "status", "date", "datetime", "time"}
)


def _check_version(model: IRModel) -> None:
    if "." not in model.version:
        raise IRValidationError(
            "version_format", f"Invalid version format: {model.version!r} (expected e.g. '1.0')"
        )


def _check_context_name(model: IRModel) -> None:
    if not model.bounded_context.name.strip():
        raise IRValidationError("context_name", "Bounded context name cannot be empty")


def _check_context_namespace(model: IRModel) -> None:
    if not model.bounded_context.namespace.strip():
        raise IRValidationError(
            "context_namespace", "Bounded context namespace cannot be empty"
        )


def _check_type_name_collisions(model: IRModel) -> None:
    seen: Dict[str, str] = {}
    sections = (
        ("value_objects", model.sorted_value_objects()),
        ("aggregates", model.sorted_aggregates()),
        ("events", model.sorted_events()),
        ("commands", model.sorted_commands()),
    )
    for section, items in sections:
        for name, _ in items:
            type_name = to_pascal_case(name)
            where = f"{section}.{name}"
            if type_name in RESERVED_TYPE_NAMES:
                raise IRValidationError(
                    "type_name_collision",
                    f"{where} emits type '{type_name}', which is reserved by the generator",
                )
            if type_name in seen:
                raise IRValidationError(
                    "type_name_collision",
                    f"{where} and {seen[type_name]} both emit type '{type_name}'",
                )
            seen[type_name] = where


def _check_route_handler_collisions(model: IRModel) -> None:
    seen: Dict[str, str] = {}
    sections = (
        ("commands", model.sorted_commands()),
        ("queries", model.sorted_queries()),
    )
    for section, items in sections:
        for name, _ in items:
            handler = to_field_name(name)
            where = f"{section}.{name}"
            if handler in RESERVED_HANDLER_NAMES:
                raise IRValidationError(
                    "route_handler_collision",
                    f"{where} emits route handler '{handler}', which is reserved by the generator",
                )
            if handler in seen:
                raise IRValidationError(
                    "route_handler_collision",
                    f"{where} and {seen[handler]} both emit route handler '{handler}'",
                )
            seen[handler] = where


CHECKLIST: List[Tuple[str, Callable[[IRModel], None]]] = [
    ("version_format", _check_version),
    ("context_name", _check_context_name),
    ("context_namespace", _check_context_namespace),
    ("type_name_collision", _check_type_name_collisions),
    ("route_handler_collision", _check_route_handler_collisions),
]


def validate_model(model: IRModel) -> None:
    """Run the validation checklist against ``model``.

    Raises:
        IRValidationError: For the first violated rule
    """
    for rule, check in CHECKLIST:
        logger.debug(f"Checking rule {rule}")
        check(model)

    _warn_dangling_references(model)


def _warn_dangling_references(model: IRModel) -> None:
    for name, command in model.sorted_commands():
        for event_name in command.produces:
            if event_name not in model.events:
                logger.warning(f"Command {name} produces undeclared event {event_name}")
        if command.aggregate and command.aggregate not in model.aggregates:
            logger.warning(f"Command {name} targets undeclared aggregate {command.aggregate}")

    for name, event in model.sorted_events():
        if event.aggregate and event.aggregate not in model.aggregates:
            logger.warning(f"Event {name} belongs to undeclared aggregate {event.aggregate}")
