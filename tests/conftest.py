# SPDX-License-Identifier: Apache-2.0
"""Shared test fixtures for the StormForge test suite.

FIXTURES PROVIDED:
- order_document: Full domain model exercising every construct
- minimal_document: One command and one event, no aggregate
- order_model / minimal_model: The same documents parsed into the IR
- write_document: Writes document text into tmp_path and returns the path
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from stormforge.ir import IRModel, parse_document

ORDER_DOCUMENT = """\
version: "1.0"
bounded_context:
  name: OrderManagement
  namespace: com.example.orders
  description: Order lifecycle management
type_aliases:
  Money: Decimal
aggregates:
  Order:
    description: A customer order
    root_entity:
      name: Order
      properties:
        - name: orderId
          type: String
          identifier: true
        - name: customerId
          type: CustomerId
        - name: status
          type: OrderStatus
          default: Pending
        - name: items
          type: List<OrderItem>
          default: []
        - name: total
          type: Money
          validation:
            min: 0
            precision: 2
        - name: notes
          type: String
          required: false
    invariants:
      - name: hasItems
        expression: items.len() > 0
        description: An order needs at least one item
value_objects:
  OrderItem:
    description: One line of an order
    properties:
      - name: productId
        type: String
      - name: quantity
        type: Integer
        validation:
          min: 1
      - name: unitPrice
        type: Decimal
  OrderStatus:
    type: enum
    values:
      - name: Pending
      - name: Shipped
        description: Handed to the carrier
  CustomerId:
    type: identifier
    underlying_type: Uuid
    prefix: cust_
events:
  OrderPlaced:
    description: An order was placed
    aggregate: Order
    payload:
      - name: customerId
        type: String
      - name: total
        type: Decimal
  OrderShipped:
    aggregate: Order
    payload:
      - name: trackingNumber
        type: String
commands:
  PlaceOrder:
    description: Place a new order
    aggregate: Order
    payload:
      - name: customerId
        type: String
      - name: items
        type: List<CreateOrderItem>
    produces: [OrderPlaced]
    preconditions:
      - expression: customer.exists
        message: Customer must exist
    validation:
      - expression: items.len() > 0
        message: Order must contain at least one item
  ShipOrder:
    aggregate: Order
    payload:
      - name: orderId
        type: String
    produces: [OrderShipped]
queries:
  GetOrder:
    description: Fetch one order
    parameters:
      - name: orderId
        type: String
    returns:
      type: Order
      nullable: true
  ListOrders:
    parameters:
      - name: page
        type: Integer
        required: false
      - name: filter
        type: OrderFilter
    returns:
      type: PagedResult<Order>
external_events:
  - context: Payments
    event: PaymentReceived
    handler: on_payment_received
    description: Mark the order as paid
"""

MINIMAL_DOCUMENT = """\
version: "1.0"
bounded_context:
  name: Greeting
  namespace: com.example.greeting
commands:
  SendGreeting:
    payload:
      - name: recipient
        type: String
      - name: message
        type: String
    produces: [GreetingSent]
events:
  GreetingSent:
    payload:
      - name: recipient
        type: String
"""


@pytest.fixture
def order_document() -> str:
    """Domain model exercising aggregates, all value-object shapes, events, commands and queries."""
    return ORDER_DOCUMENT


@pytest.fixture
def minimal_document() -> str:
    """Smallest useful domain model: one command producing one event."""
    return MINIMAL_DOCUMENT


@pytest.fixture
def order_model(order_document: str) -> IRModel:
    return parse_document(order_document, source="order.yaml")


@pytest.fixture
def minimal_model(minimal_document: str) -> IRModel:
    return parse_document(minimal_document, source="minimal.yaml")


@pytest.fixture
def write_document(tmp_path: Path) -> Callable[..., Path]:
    """Write document text into tmp_path and return the file path."""

    def _write(text: str, name: str = "domain.yaml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
