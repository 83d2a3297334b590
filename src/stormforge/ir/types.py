# SPDX-License-Identifier: Apache-2.0
"""Pydantic models for the StormForge Intermediate Representation (IR).

The IR is built once per generator run from the domain-model document and is
immutable afterwards. Mappings are keyed by construct name; emission order
never depends on mapping order, generators iterate the ``sorted_*`` helpers.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, TypeVar, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Keys that belong to exactly one value-object shape
_SHAPE_KEYS: Dict[str, Tuple[str, ...]] = {
    "record": ("properties",),
    "enum": ("values",),
    "identifier": ("underlying_type", "format", "prefix"),
}

_MAP_FIELDS = ("aggregates", "value_objects", "events", "commands", "queries")


class IRBase(BaseModel):
    """Base for all IR nodes: immutable, unknown keys ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Validation(IRBase):
    """Declarative constraints attached to a property."""

    min: Optional[float] = None
    max: Optional[float] = None
    min_length: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("minLength", "min_length")
    )
    max_length: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("maxLength", "max_length")
    )
    pattern: Optional[str] = None
    precision: Optional[int] = None


class Property(IRBase):
    """A named, typed field of an entity, event, command or query."""

    name: str
    type_expr: str = Field(alias="type")
    identifier: bool = False
    required: bool = True
    default: Optional[Any] = None
    description: Optional[str] = None
    validation: Optional[Validation] = None
    computed: Optional[str] = None


class Invariant(IRBase):
    """Business rule of an aggregate. Carried as documentation only."""

    name: str
    description: Optional[str] = None
    expression: str


class Entity(IRBase):
    name: str = ""
    properties: List[Property] = Field(default_factory=list)


class Aggregate(IRBase):
    name: str
    description: Optional[str] = None
    root_entity: Entity
    invariants: List[Invariant] = Field(default_factory=list)


class EnumValue(IRBase):
    name: str
    description: Optional[str] = None


class RecordShape(IRBase):
    """Plain record value object."""

    kind: Literal["record"] = "record"
    properties: List[Property] = Field(default_factory=list)


class EnumShape(IRBase):
    """Enumeration value object."""

    kind: Literal["enum"] = "enum"
    values: List[EnumValue] = Field(default_factory=list)


class IdentifierShape(IRBase):
    """Single-field identifier wrapper around a primitive."""

    kind: Literal["identifier"] = "identifier"
    underlying_type: str = "String"
    format: Optional[str] = None
    prefix: Optional[str] = None


ValueObjectShape = Annotated[
    Union[RecordShape, EnumShape, IdentifierShape], Field(discriminator="kind")
]


class ValueObject(IRBase):
    """Immutable domain type: a record, an enumeration or an identifier.

    The document describes the shape with a flat ``type`` discriminator plus
    shape-specific keys. Parsing folds those into exactly one ``shape`` and
    rejects keys that belong to a different shape.
    """

    name: str
    description: Optional[str] = None
    shape: ValueObjectShape

    @model_validator(mode="before")
    @classmethod
    def fold_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "shape" in data:
            return data

        kind = data.get("type") or "record"
        if kind not in _SHAPE_KEYS:
            raise ValueError(
                f"Unknown value object type '{kind}'. "
                f"Expected one of: {', '.join(sorted(_SHAPE_KEYS))}"
            )

        for other_kind, keys in _SHAPE_KEYS.items():
            if other_kind == kind:
                continue
            stray = [key for key in keys if data.get(key) not in (None, [], {})]
            if stray:
                raise ValueError(
                    f"Value object of type '{kind}' must not declare {', '.join(stray)}"
                )

        shape = {"kind": kind}
        for key in _SHAPE_KEYS[kind]:
            if data.get(key) is not None:
                shape[key] = data[key]

        return {
            "name": data.get("name"),
            "description": data.get("description"),
            "shape": shape,
        }


class Event(IRBase):
    name: str
    description: Optional[str] = None
    aggregate: Optional[str] = None
    payload: List[Property] = Field(default_factory=list)


class Condition(IRBase):
    """Expression plus failure message. Never evaluated by the generator."""

    expression: str
    message: str


class Command(IRBase):
    name: str
    description: Optional[str] = None
    aggregate: Optional[str] = None
    payload: List[Property] = Field(default_factory=list)
    produces: List[str] = Field(default_factory=list)
    preconditions: List[Condition] = Field(default_factory=list)
    validation: List[Condition] = Field(default_factory=list)


class ReturnType(IRBase):
    type_expr: str = Field(alias="type")
    nullable: bool = False


class Query(IRBase):
    name: str
    description: Optional[str] = None
    parameters: List[Property] = Field(default_factory=list)
    returns: Optional[ReturnType] = None


class ExternalEventSubscription(IRBase):
    """Subscription to an event of another bounded context (not resolved)."""

    context: str
    event: str
    handler: str
    description: Optional[str] = None


class BoundedContext(IRBase):
    name: str
    namespace: str
    description: Optional[str] = None


def _sorted_items(mapping: Dict[str, T]) -> List[Tuple[str, T]]:
    return sorted(mapping.items(), key=lambda item: item[0])


class IRModel(IRBase):
    """Root of the IR."""

    version: str
    bounded_context: BoundedContext
    aggregates: Dict[str, Aggregate] = Field(default_factory=dict)
    value_objects: Dict[str, ValueObject] = Field(default_factory=dict)
    events: Dict[str, Event] = Field(default_factory=dict)
    commands: Dict[str, Command] = Field(default_factory=dict)
    queries: Dict[str, Query] = Field(default_factory=dict)
    external_events: List[ExternalEventSubscription] = Field(default_factory=list)
    type_aliases: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def fill_names_from_keys(cls, data: Any) -> Any:
        """Default every definition's ``name`` to its map key."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        if "version" in data and not isinstance(data["version"], str):
            # YAML reads an unquoted 1.0 as a float
            data["version"] = str(data["version"])

        for field_name in _MAP_FIELDS:
            entries = data.get(field_name)
            if entries is None:
                data.pop(field_name, None)
                continue
            if not isinstance(entries, dict):
                continue

            filled = {}
            for key, definition in entries.items():
                key = str(key)
                if isinstance(definition, dict):
                    definition = dict(definition)
                    declared = definition.get("name")
                    if declared is None:
                        definition["name"] = key
                    elif declared != key:
                        logger.warning(
                            f"{field_name}.{key} declares name '{declared}'; "
                            f"the map key '{key}' is used for code generation"
                        )
                filled[key] = definition
            data[field_name] = filled

        for field_name in ("external_events", "type_aliases"):
            if field_name in data and data[field_name] is None:
                data.pop(field_name)

        return data

    def sorted_aggregates(self) -> List[Tuple[str, Aggregate]]:
        return _sorted_items(self.aggregates)

    def sorted_value_objects(self) -> List[Tuple[str, ValueObject]]:
        return _sorted_items(self.value_objects)

    def sorted_events(self) -> List[Tuple[str, Event]]:
        return _sorted_items(self.events)

    def sorted_commands(self) -> List[Tuple[str, Command]]:
        return _sorted_items(self.commands)

    def sorted_queries(self) -> List[Tuple[str, Query]]:
        return _sorted_items(self.queries)

    def summary(self) -> Dict[str, Any]:
        """Construct counts and identity, as printed by the CLI."""
        return {
            "bounded_context": self.bounded_context.name,
            "namespace": self.bounded_context.namespace,
            "version": self.version,
            "aggregates": len(self.aggregates),
            "value_objects": len(self.value_objects),
            "commands": len(self.commands),
            "events": len(self.events),
            "queries": len(self.queries),
            "external_events": len(self.external_events),
        }
