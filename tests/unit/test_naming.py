# SPDX-License-Identifier: Apache-2.0
"""Tests for casing conversions and IR type mapping."""

from __future__ import annotations

import pytest

from stormforge.naming import (
    is_primitive,
    map_type,
    optional,
    to_constant_name,
    to_field_name,
    to_kebab_case,
    to_member_name,
    to_pascal_case,
    to_snake_case,
)


class TestCasing:
    @pytest.mark.parametrize(
        "name, snake",
        [
            ("OrderId", "order_id"),
            ("orderId", "order_id"),
            ("order-id", "order_id"),
            ("HTTPServer", "http_server"),
            ("getHTTPResponse", "get_http_response"),
            ("Order2Item", "order2_item"),
            ("already_snake", "already_snake"),
        ],
    )
    def test_snake_case(self, name: str, snake: str):
        assert to_snake_case(name) == snake

    def test_round_trips(self):
        assert to_snake_case("OrderId") == "order_id"
        assert to_kebab_case("OrderId") == "order-id"
        assert to_pascal_case("order_id") == "OrderId"
        assert to_pascal_case("order-id") == "OrderId"

    @pytest.mark.parametrize("name", ["PlaceOrder", "place_order", "place-order", "HTTPServer"])
    def test_idempotent(self, name: str):
        assert to_snake_case(to_snake_case(name)) == to_snake_case(name)
        assert to_kebab_case(to_kebab_case(name)) == to_kebab_case(name)
        assert to_pascal_case(to_pascal_case(name)) == to_pascal_case(name)

    def test_constant_names(self):
        assert to_constant_name("pendingPayment") == "PENDING_PAYMENT"
        assert to_constant_name("Shipped") == "SHIPPED"
        assert to_constant_name("2xl") == "VALUE_2XL"

    def test_field_names_are_identifiers(self):
        assert to_field_name("customerId") == "customer_id"
        assert to_field_name("from") == "from_"
        assert to_field_name("class") == "class_"
        assert to_field_name("3dModel") == "field_3d_model"

    def test_member_names_avoid_generated_members(self):
        assert to_member_name("cls") == "cls_"
        assert to_member_name("validate") == "validate_"
        assert to_member_name("new") == "new_"
        assert to_member_name("class") == "class_"
        assert to_member_name("newOrder") == "new_order"


class TestMapType:
    @pytest.mark.parametrize(
        "expr, annotation",
        [
            ("String", "str"),
            ("Integer", "int"),
            ("Decimal", "Decimal"),
            ("Boolean", "bool"),
            ("DateTime", "datetime"),
            ("Date", "date"),
            ("Time", "time"),
            ("Uuid", "UUID"),
            ("List<Integer>", "list[int]"),
            ("Vec<String>", "list[str]"),
            ("Option<Decimal>", "Optional[Decimal]"),
            ("Option<List<OrderItem>>", "Optional[list[OrderItem]]"),
            ("PagedResult<Order>", "PagedResult[Order]"),
            ("OrderItem", "OrderItem"),
            ("CreateOrderItem", "OrderItem"),
            ("UpdateOrder", "Order"),
        ],
    )
    def test_mapping(self, expr: str, annotation: str):
        assert map_type(expr) == annotation

    def test_prefix_alone_is_not_stripped(self):
        assert map_type("Create") == "Create"
        assert map_type("Update") == "Update"

    def test_only_one_prefix_is_stripped(self):
        assert map_type("CreateUpdateOrder") == "UpdateOrder"

    def test_alias_table_takes_precedence(self):
        aliases = {"CreateOrderRequest": "String", "Money": "Decimal"}
        assert map_type("CreateOrderRequest", aliases) == "str"
        assert map_type("List<Money>", aliases) == "list[Decimal]"

    def test_user_types_are_pascal_cased(self):
        assert map_type("order_item") == "OrderItem"

    def test_optional_is_not_doubled(self):
        assert optional("str") == "Optional[str]"
        assert optional("Optional[str]") == "Optional[str]"

    def test_is_primitive(self):
        assert is_primitive("String")
        assert is_primitive("Option<Integer>")
        assert is_primitive("List<Uuid>")
        assert not is_primitive("OrderItem")
        assert not is_primitive("List<OrderItem>")
