# SPDX-License-Identifier: Apache-2.0
"""Domain model validation command."""

from __future__ import annotations

from pathlib import Path

import typer

from stormforge.errors import StormForgeError
from stormforge.ir import parse_file

from .common import configure_logging, print_summary


def _validate_impl(input_path: Path, verbose: bool = False) -> None:
    """Parse and validate without writing anything."""
    configure_logging(verbose)

    print(f"🔍 Validating domain model: {input_path}")
    try:
        model = parse_file(input_path)
    except StormForgeError as e:
        print(f"❌ {e}")
        raise typer.Exit(1) from e

    print("✅ Domain model is valid")
    print_summary(model, show_version=True)


def validate(
    input_path: Path = typer.Option(
        ..., "--input", "-i", help="Domain model document (YAML or JSON)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Validate a domain model document without generating code.

    Examples:
      stormforge validate -i order.yaml
      stormforge validate -i order.yaml --verbose
    """
    _validate_impl(input_path=input_path, verbose=verbose)
