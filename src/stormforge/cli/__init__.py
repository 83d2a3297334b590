# SPDX-License-Identifier: Apache-2.0
"""StormForge CLI package."""

from __future__ import annotations

import typer

from .generate import generate
from .validate import validate

app = typer.Typer(
    add_completion=False,
    help="StormForge: generate event-sourced service skeletons from domain models",
)

app.command(name="generate")(generate)
app.command(name="validate")(validate)


if __name__ == "__main__":
    app()
