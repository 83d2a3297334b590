# SPDX-License-Identifier: Apache-2.0
"""Command record and handler-contract generation (``domain/commands.py``)."""

from __future__ import annotations

import logging
from typing import List

from stormforge.ir.types import Command
from stormforge.naming import to_pascal_case, to_snake_case

from .base import SourceGenerator
from .fields import comment_text, doc_text, indent, render_docstring, render_field

logger = logging.getLogger(__name__)

_IMPORTS = """\
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from .entities import *  # noqa: F401,F403
from .entities import DomainModel
from .events import DomainEvent"""

_COMMAND_ERROR = '''\
class CommandErrorKind(str, Enum):
    """Reason a command was rejected."""

    VALIDATION = "validation"
    PRECONDITION_FAILED = "precondition_failed"
    AGGREGATE_NOT_FOUND = "aggregate_not_found"
    INTERNAL = "internal"


class CommandError(Exception):
    """Structured failure raised by command validation and command handlers."""

    def __init__(self, kind: CommandErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)

    @classmethod
    def validation(cls, message: str) -> CommandError:
        return cls(CommandErrorKind.VALIDATION, message)

    @classmethod
    def precondition_failed(cls, message: str) -> CommandError:
        return cls(CommandErrorKind.PRECONDITION_FAILED, message)

    @classmethod
    def aggregate_not_found(cls, message: str) -> CommandError:
        return cls(CommandErrorKind.AGGREGATE_NOT_FOUND, message)

    @classmethod
    def internal(cls, message: str) -> CommandError:
        return cls(CommandErrorKind.INTERNAL, message)'''


def handler_method_name(command_name: str) -> str:
    """Name of the handler-contract method for ``command_name``."""
    return f"handle_{to_snake_case(command_name)}"


class CommandGenerator(SourceGenerator):
    """Emits the command error type, one record per command and the handler contract."""

    title = "CQRS commands for the {context} bounded context."

    def imports(self) -> str:
        return _IMPORTS

    def blocks(self) -> List[str]:
        blocks = [_COMMAND_ERROR]
        for name, command in self.model.sorted_commands():
            blocks.append(self.command(name, command))
        blocks.append(self.handler_contract())
        logger.debug(f"Generated {len(self.model.commands)} commands")
        return blocks

    def command(self, name: str, command: Command) -> str:
        type_name = to_pascal_case(name)

        details: List[str] = []
        if command.aggregate:
            details.append(f"Aggregate: {to_pascal_case(command.aggregate)}")
        summary = doc_text(command.description) or f"{type_name} command."
        body = render_docstring(summary, details)

        if command.payload:
            body.append("")
        for prop in command.payload:
            body.extend(render_field(prop, self.ctx))

        body += [
            "",
            "def validate(self) -> None:",
            '    """Validate the command.',
            "",
            "    Raises:",
            "        CommandError: If a validation rule is violated",
            '    """',
        ]
        for rule in command.validation:
            body.append(
                f"    # Validation: {comment_text(rule.message)} "
                f"[{comment_text(rule.expression)}]"
            )
        body.append("    return None")

        return "\n".join([f"class {type_name}(DomainModel):", *indent(body)])

    def handler_contract(self) -> str:
        """One abstract method per command, over the whole command map."""
        context = doc_text(self.model.bounded_context.name)
        body = render_docstring(f"Handles every command of the {context} bounded context.")

        for name, command in self.model.sorted_commands():
            type_name = to_pascal_case(name)
            summary = doc_text(command.description) or f"Handle {type_name}."

            details: List[str] = []
            if command.produces:
                produced = ", ".join(to_pascal_case(event) for event in command.produces)
                details += [f"Produces: {produced}", ""]
            if command.preconditions:
                details.append("Preconditions:")
                for rule in command.preconditions:
                    details.append(
                        f"    - {doc_text(rule.message)} ({doc_text(rule.expression)})"
                    )
                details.append("")
            details += [
                "Raises:",
                "    CommandError: Validation, precondition, missing aggregate or internal failure",
            ]

            body += [
                "",
                "@abstractmethod",
                f"async def {handler_method_name(name)}(self, command: {type_name}) -> List[DomainEvent]:",
                *indent(render_docstring(summary, details)),
                "    ...",
            ]

        return "\n".join(["class CommandHandler(ABC):", *indent(body)])
