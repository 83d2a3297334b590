# SPDX-License-Identifier: Apache-2.0
"""Helpers shared by the CLI commands."""

from __future__ import annotations

import logging

from stormforge.ir.types import IRModel

_LABELS = (
    ("aggregates", "Aggregates"),
    ("value_objects", "Value objects"),
    ("commands", "Commands"),
    ("events", "Events"),
    ("queries", "Queries"),
    ("external_events", "External subscriptions"),
)


def configure_logging(verbose: bool = False) -> None:
    """Route library logging to stderr; DEBUG with --verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)-5s [%(name)s] %(message)s",
        force=True,
    )


def print_summary(model: IRModel, show_version: bool = False) -> None:
    """Print the bounded context identity and construct counts."""
    summary = model.summary()
    print(f"📦 Bounded context: {summary['bounded_context']}")
    print(f"   Namespace: {summary['namespace']}")
    if show_version:
        print(f"   IR version: {summary['version']}")
    for key, label in _LABELS:
        print(f"   {label}: {summary[key]}")
