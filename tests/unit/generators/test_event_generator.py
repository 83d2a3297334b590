# SPDX-License-Identifier: Apache-2.0
"""Tests for domain event generation."""

from __future__ import annotations

import ast
import logging

from stormforge.generators import EventGenerator
from stormforge.ir import IRModel, parse_document


def _new_params(source: str, class_name: str) -> list[str]:
    tree = ast.parse(source)
    cls = next(n for n in tree.body if isinstance(n, ast.ClassDef) and n.name == class_name)
    new = next(n for n in cls.body if isinstance(n, ast.FunctionDef) and n.name == "new")
    return [arg.arg for arg in new.args.args]


class TestEventGenerator:
    def test_output_is_valid_python(self, order_model: IRModel):
        ast.parse(EventGenerator(order_model).generate())

    def test_standard_fields(self, order_model: IRModel):
        source = EventGenerator(order_model).generate()
        placed = source.split("class OrderPlaced(DomainModel):")[1].split("\n\n\nclass ")[0]
        assert "event_id: UUID = Field(default_factory=uuid4)" in placed
        assert "occurred_at: datetime = Field(default_factory=_utc_now)" in placed
        assert "aggregate_id: str" in placed

    def test_new_takes_aggregate_id_then_payload(self, order_model: IRModel):
        source = EventGenerator(order_model).generate()
        assert _new_params(source, "OrderPlaced") == ["cls", "aggregate_id", "customer_id", "total"]

    def test_envelope_has_one_variant_per_event(self, order_model: IRModel):
        source = EventGenerator(order_model).generate()
        assert 'type: Literal["OrderPlaced", "OrderShipped"]' in source
        assert "data: Union[OrderPlaced, OrderShipped]" in source
        assert '"OrderPlaced": OrderPlaced,' in source
        assert "def wrap(cls, event: DomainModel) -> DomainEvent:" in source

    def test_event_metadata(self, order_model: IRModel):
        source = EventGenerator(order_model).generate()
        metadata = source.split("class EventMetadata(DomainModel):")[1].split("\n\n\n")[0]
        for field in (
            "event_id: UUID",
            "event_type: str",
            "aggregate_id: str",
            "aggregate_type: str",
            "sequence_number: int",
            "occurred_at: datetime",
            "stored_at: datetime",
            "correlation_id: Optional[UUID] = None",
            "causation_id: Optional[UUID] = None",
        ):
            assert field in metadata

    def test_external_subscriptions(self, order_model: IRModel):
        source = EventGenerator(order_model).generate()
        assert "class ExternalEventSubscription(NamedTuple):" in source
        assert 'context="Payments",' in source
        assert 'handler="on_payment_received",' in source

    def test_minimal_event_without_aggregate(self, minimal_model: IRModel):
        source = EventGenerator(minimal_model).generate()
        sent = source.split("class GreetingSent(DomainModel):")[1].split("\n\n\nclass ")[0]
        assert "aggregate_id" not in sent
        assert _new_params(source, "GreetingSent") == ["cls", "recipient"]
        assert 'type: Literal["GreetingSent"]' in source
        assert "EXTERNAL_EVENT_SUBSCRIPTIONS: Tuple[ExternalEventSubscription, ...] = ()" in source

    def test_no_events_degrades_envelope(self):
        model = parse_document("version: '1.0'\nbounded_context: {name: Empty, namespace: e.x}\n")
        source = EventGenerator(model).generate()
        ast.parse(source)
        assert "type: str" in source
        assert "data: Dict[str, Any] = Field(default_factory=dict)" in source
        assert "Literal[" not in source

    def test_payload_clashing_with_standard_field_is_skipped(self, caplog):
        model = parse_document(
            "version: '1.0'\n"
            "bounded_context: {name: Audit, namespace: a.x}\n"
            "events:\n"
            "  Recorded:\n"
            "    payload:\n"
            "      - {name: eventId, type: Uuid}\n"
            "      - {name: note, type: String}\n"
        )
        with caplog.at_level(logging.WARNING, logger="stormforge.generators.events"):
            source = EventGenerator(model).generate()

        assert _new_params(source, "Recorded") == ["cls", "note"]
        assert "clashes with a standard event field" in caplog.text

    def test_payload_named_like_constructor_argument_is_renamed(self):
        model = parse_document(
            "version: '1.0'\n"
            "bounded_context: {name: Schooling, namespace: s.x}\n"
            "events:\n"
            "  ClassAssigned:\n"
            "    payload:\n"
            "      - {name: cls, type: String}\n"
            "      - {name: new, type: Boolean}\n"
        )
        source = EventGenerator(model).generate()

        ast.parse(source)
        assert _new_params(source, "ClassAssigned") == ["cls", "cls_", "new_"]
        assert 'cls_: str = Field(alias="cls")' in source
        assert "return cls(cls_=cls_, new_=new_)" in source
