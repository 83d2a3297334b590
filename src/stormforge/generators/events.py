# SPDX-License-Identifier: Apache-2.0
"""Domain event generation (``domain/events.py``).

Every event becomes a record carrying an id, a UTC timestamp, the owning
aggregate's id (when the event names an aggregate) and its payload. The
``DomainEvent`` envelope tags each record with its type name so a stream of
mixed events can be serialized and decoded again.
"""

from __future__ import annotations

import logging
from typing import List

from stormforge.ir.types import Event, Property
from stormforge.naming import to_member_name, to_pascal_case

from .base import SourceGenerator
from .fields import (
    doc_text,
    indent,
    py_str,
    render_docstring,
    render_field,
    render_param,
)

logger = logging.getLogger(__name__)

_STANDARD_FIELDS = ("event_id", "occurred_at", "aggregate_id")

_IMPORTS = """\
from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Dict, List, Literal, NamedTuple, Optional, Tuple, Type, Union
from uuid import UUID, uuid4

from pydantic import Field, model_validator

from .entities import *  # noqa: F401,F403
from .entities import DomainModel"""

_UTC_NOW = '''\
def _utc_now() -> datetime:
    return datetime.now(timezone.utc)'''

_EMPTY_ENVELOPE = '''\
EVENT_TYPES: Dict[str, Type[DomainModel]] = {}


class DomainEvent(DomainModel):
    """Envelope over the events of this bounded context (none are declared)."""

    type: str
    data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def event_id(self) -> UUID:
        return UUID(str(self.data["event_id"]))

    @property
    def occurred_at(self) -> datetime:
        return datetime.fromisoformat(str(self.data["occurred_at"]))'''

_ENVELOPE_METHODS = '''\
@model_validator(mode="before")
@classmethod
def decode_data(cls, values: Any) -> Any:
    """Decode ``data`` with the record class named by ``type``."""
    if isinstance(values, dict):
        event_class = EVENT_TYPES.get(values.get("type"))
        data = values.get("data")
        if event_class is not None and isinstance(data, dict):
            values = {**values, "data": event_class.model_validate(data)}
    return values

@classmethod
def wrap(cls, event: DomainModel) -> DomainEvent:
    """Put an event record into the envelope."""
    return cls(type=type(event).__name__, data=event)

@property
def event_id(self) -> UUID:
    return self.data.event_id

@property
def occurred_at(self) -> datetime:
    return self.data.occurred_at'''

_EVENT_METADATA = '''\
class EventMetadata(DomainModel):
    """Storage metadata recorded alongside every persisted event."""

    event_id: UUID
    event_type: str
    aggregate_id: str
    aggregate_type: str
    sequence_number: int
    occurred_at: datetime
    stored_at: datetime
    correlation_id: Optional[UUID] = None
    causation_id: Optional[UUID] = None'''

_SUBSCRIPTION_TYPE = '''\
class ExternalEventSubscription(NamedTuple):
    """Event published by another bounded context that this context handles."""

    context: str
    event: str
    handler: str
    description: Optional[str] = None'''


class EventGenerator(SourceGenerator):
    """Emits event records, the type registry, the envelope and event metadata."""

    title = "Domain events for the {context} bounded context."

    def imports(self) -> str:
        return _IMPORTS

    def blocks(self) -> List[str]:
        blocks = [_UTC_NOW]
        for name, event in self.model.sorted_events():
            blocks.append(self.event(name, event))
        blocks.extend(self.envelope())
        blocks.append(_EVENT_METADATA)
        blocks.extend(self.subscriptions())
        logger.debug(f"Generated {len(self.model.events)} events")
        return blocks

    def event(self, name: str, event: Event) -> str:
        type_name = to_pascal_case(name)

        details: List[str] = []
        if event.aggregate:
            details.append(f"Aggregate: {to_pascal_case(event.aggregate)}")
        summary = doc_text(event.description) or f"{type_name} event."
        body = render_docstring(summary, details)
        body += [
            "",
            "event_id: UUID = Field(default_factory=uuid4)",
            "occurred_at: datetime = Field(default_factory=_utc_now)",
        ]
        if event.aggregate:
            body.append("aggregate_id: str")
        payload = self._payload(event)
        for prop in payload:
            body.extend(render_field(prop, self.ctx))

        body += ["", *self._constructor(type_name, event, payload)]
        return "\n".join([f"class {type_name}(DomainModel):", *indent(body)])

    def _payload(self, event: Event) -> List[Property]:
        """Payload properties, minus any that clash with the standard fields."""
        reserved = set(_STANDARD_FIELDS)
        if not event.aggregate:
            reserved.discard("aggregate_id")

        payload = []
        for prop in event.payload:
            if to_member_name(prop.name) in reserved:
                logger.warning(
                    f"Event {event.name}: payload property '{prop.name}' clashes with "
                    f"a standard event field and is skipped"
                )
                continue
            payload.append(prop)
        return payload

    def _constructor(self, type_name: str, event: Event, payload: List[Property]) -> List[str]:
        params = ["cls"]
        arguments: List[str] = []
        if event.aggregate:
            params.append("aggregate_id: str")
            arguments.append("aggregate_id=aggregate_id")
        for prop in payload:
            field_name = to_member_name(prop.name)
            params.append(render_param(prop, self.ctx))
            arguments.append(f"{field_name}={field_name}")

        return [
            "@classmethod",
            f"def new({', '.join(params)}) -> {type_name}:",
            '    """Create the event with a fresh id and the current time."""',
            f"    return cls({', '.join(arguments)})",
        ]

    def envelope(self) -> List[str]:
        """``EVENT_TYPES`` registry and the ``DomainEvent`` envelope."""
        names = [to_pascal_case(name) for name, _ in self.model.sorted_events()]
        if not names:
            return [_EMPTY_ENVELOPE]

        registry = ["EVENT_TYPES: Dict[str, Type[DomainModel]] = {"]
        registry += [f"    {py_str(name)}: {name}," for name in names]
        registry.append("}")

        literal = ", ".join(py_str(name) for name in names)
        body = render_docstring("Envelope over every event of this bounded context, tagged by type.")
        body += [
            "",
            f"type: Literal[{literal}]",
            f"data: Union[{', '.join(names)}]",
            "",
            *_ENVELOPE_METHODS.splitlines(),
        ]
        envelope = "\n".join(["class DomainEvent(DomainModel):", *indent(body)])
        return ["\n".join(registry), envelope]

    def subscriptions(self) -> List[str]:
        """External event subscriptions in declared order."""
        subscriptions = self.model.external_events
        if not subscriptions:
            constant = "EXTERNAL_EVENT_SUBSCRIPTIONS: Tuple[ExternalEventSubscription, ...] = ()"
            return [_SUBSCRIPTION_TYPE, constant]

        lines = ["EXTERNAL_EVENT_SUBSCRIPTIONS: Tuple[ExternalEventSubscription, ...] = ("]
        for sub in subscriptions:
            args = [
                f"context={py_str(sub.context)}",
                f"event={py_str(sub.event)}",
                f"handler={py_str(sub.handler)}",
            ]
            if sub.description:
                args.append(f"description={py_str(sub.description)}")
            lines += [
                "    ExternalEventSubscription(",
                *[f"        {arg}," for arg in args],
                "    ),",
            ]
        lines.append(")")
        return [_SUBSCRIPTION_TYPE, "\n".join(lines)]
