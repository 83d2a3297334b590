# SPDX-License-Identifier: Apache-2.0
"""Tests for command and handler-contract generation."""

from __future__ import annotations

import ast

from stormforge.generators import CommandGenerator
from stormforge.generators.commands import handler_method_name
from stormforge.ir import IRModel, parse_document


def _handler_methods(source: str) -> list[ast.AsyncFunctionDef]:
    tree = ast.parse(source)
    handler = next(
        node for node in tree.body if isinstance(node, ast.ClassDef) and node.name == "CommandHandler"
    )
    return [node for node in handler.body if isinstance(node, ast.AsyncFunctionDef)]


class TestCommandGenerator:
    def test_output_is_valid_python(self, order_model: IRModel):
        ast.parse(CommandGenerator(order_model).generate())

    def test_command_error_kinds(self, order_model: IRModel):
        source = CommandGenerator(order_model).generate()
        assert "class CommandErrorKind(str, Enum):" in source
        for kind in ("validation", "precondition_failed", "aggregate_not_found", "internal"):
            assert f'"{kind}"' in source
            assert f"def {kind}(cls, message: str) -> CommandError:" in source

    def test_one_record_per_command(self, order_model: IRModel):
        source = CommandGenerator(order_model).generate()
        assert "class PlaceOrder(DomainModel):" in source
        assert "class ShipOrder(DomainModel):" in source

    def test_payload_types_strip_create_prefix(self, order_model: IRModel):
        source = CommandGenerator(order_model).generate()
        assert "items: list[OrderItem]" in source
        assert 'customer_id: str = Field(alias="customerId")' in source

    def test_validate_stub_lists_conditions(self, order_model: IRModel):
        source = CommandGenerator(order_model).generate()
        place_order = source.split("class PlaceOrder(DomainModel):")[1].split("\n\n\nclass ")[0]
        assert "def validate(self) -> None:" in place_order
        assert "# Validation: Order must contain at least one item [items.len() > 0]" in place_order
        assert place_order.rstrip().endswith("return None")

    def test_one_handler_method_per_command(self, order_model: IRModel):
        methods = _handler_methods(CommandGenerator(order_model).generate())
        assert [m.name for m in methods] == ["handle_place_order", "handle_ship_order"]
        for method in methods:
            decorators = [d.id for d in method.decorator_list if isinstance(d, ast.Name)]
            assert decorators == ["abstractmethod"]

    def test_handler_docstring_lists_produces_and_preconditions(self, order_model: IRModel):
        methods = _handler_methods(CommandGenerator(order_model).generate())
        docstring = ast.get_docstring(methods[0])
        assert "Produces: OrderPlaced" in docstring
        assert "Customer must exist (customer.exists)" in docstring

    def test_handler_returns_event_list(self, order_model: IRModel):
        source = CommandGenerator(order_model).generate()
        assert (
            "async def handle_place_order(self, command: PlaceOrder) -> List[DomainEvent]:"
            in source
        )

    def test_handler_method_name(self):
        assert handler_method_name("PlaceOrder") == "handle_place_order"
        assert handler_method_name("ship-order") == "handle_ship_order"

    def test_minimal_command_has_two_required_strings(self, minimal_model: IRModel):
        source = CommandGenerator(minimal_model).generate()
        record = source.split("class SendGreeting(DomainModel):")[1].split("\n\n\nclass ")[0]
        assert "    recipient: str\n" in record
        assert "    message: str\n" in record
        assert "Optional" not in record

    def test_field_named_validate_does_not_replace_the_method(self):
        model = parse_document(
            "version: '1.0'\n"
            "bounded_context: {name: Forms, namespace: f.x}\n"
            "commands:\n"
            "  SubmitForm:\n"
            "    payload:\n"
            "      - {name: validate, type: Boolean}\n"
        )
        source = CommandGenerator(model).generate()
        tree = ast.parse(source)
        record = next(
            n for n in tree.body if isinstance(n, ast.ClassDef) and n.name == "SubmitForm"
        )

        fields = [n.target.id for n in record.body if isinstance(n, ast.AnnAssign)]
        methods = [n.name for n in record.body if isinstance(n, ast.FunctionDef)]
        assert fields == ["validate_"]
        assert methods == ["validate"]
        assert 'validate_: bool = Field(alias="validate")' in source
