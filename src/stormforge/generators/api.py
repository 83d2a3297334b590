# SPDX-License-Identifier: Apache-2.0
"""HTTP route generation (``api/routes.py``)."""

from __future__ import annotations

import logging
from typing import List

from stormforge.ir.types import Command, Property, Query
from stormforge.naming import (
    is_primitive,
    map_type,
    optional,
    to_field_name,
    to_kebab_case,
    to_pascal_case,
)

from .base import SourceGenerator
from .fields import comment_text, doc_text, indent, py_str, render_docstring

logger = logging.getLogger(__name__)

_IMPORTS = """\
from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..domain.commands import *  # noqa: F401,F403
from ..domain.commands import CommandError"""

_ENVELOPES = '''\
class ApiError(BaseModel):
    """Error body returned by every failing route."""

    code: str
    message: str


class ApiResponse(BaseModel):
    """Success envelope returned by every route."""

    data: Any = None'''

_COMMAND_STEPS = (
    "# Load the aggregate from the repository",
    "# Execute the command through the CommandHandler",
    "# Append the produced events to the event store",
    "# Publish the produced events",
)


def route_path(name: str) -> str:
    return f"/{to_kebab_case(name)}"


def route_handler_name(name: str) -> str:
    return to_field_name(name)


class ApiGenerator(SourceGenerator):
    """Emits one POST route per command and one GET route per query."""

    title = "HTTP routes for the {context} bounded context."

    def imports(self) -> str:
        return _IMPORTS

    def blocks(self) -> List[str]:
        blocks = [_ENVELOPES]
        for name, command in self.model.sorted_commands():
            blocks.append(self.command_route(name, command))
        for name, query in self.model.sorted_queries():
            blocks.append(self.query_route(name, query))
        blocks.append(self.router())
        logger.debug(
            f"Generated {len(self.model.commands)} command routes and "
            f"{len(self.model.queries)} query routes"
        )
        return blocks

    def command_route(self, name: str, command: Command) -> str:
        type_name = to_pascal_case(name)
        details: List[str] = []
        if command.produces:
            produced = ", ".join(to_pascal_case(event) for event in command.produces)
            details.append(f"Produces: {produced}")
        summary = doc_text(command.description) or f"Execute {type_name}."

        body = render_docstring(summary, details)
        body += [
            "try:",
            "    payload.validate()",
            "except CommandError as exc:",
            "    return JSONResponse(",
            "        status_code=status.HTTP_400_BAD_REQUEST,",
            '        content=ApiError(code="VALIDATION_ERROR", message=exc.message).model_dump(),',
            "    )",
            "",
            *_COMMAND_STEPS,
            'return ApiResponse(data={"message": "Command executed successfully"})',
        ]
        signature = f"async def {route_handler_name(name)}(payload: {type_name}):"
        return "\n".join([signature, *indent(body)])

    def query_route(self, name: str, query: Query) -> str:
        details: List[str] = []
        if query.returns is not None:
            returns = map_type(query.returns.type_expr, self.ctx.aliases)
            if query.returns.nullable:
                returns = optional(returns)
            details.append(f"Returns: {returns}")

        params: List[str] = []
        skipped: List[str] = []
        for prop in query.parameters:
            if is_primitive(prop.type_expr):
                params.append(self._query_param(prop))
            else:
                skipped.append(prop.name)
                logger.debug(
                    f"Query {name}: parameter {prop.name} ({prop.type_expr}) "
                    f"is not exposed as a query parameter"
                )

        summary = doc_text(query.description) or f"Run {to_pascal_case(name)}."
        body = render_docstring(summary, details)
        for prop_name in skipped:
            body.append(f"# Parameter {comment_text(prop_name)} is not bound from the query string")
        body.append('return ApiResponse(data={"message": "Query result"})')

        if params:
            signature = [
                f"async def {route_handler_name(name)}(",
                *[f"    {param}," for param in params],
                "):",
            ]
        else:
            signature = [f"async def {route_handler_name(name)}():"]
        return "\n".join([*signature, *indent(body)])

    def _query_param(self, prop: Property) -> str:
        field_name = to_field_name(prop.name)
        args = ["..." if prop.required else "None"]
        if field_name != prop.name:
            args.append(f"alias={py_str(prop.name)}")
        if prop.description:
            args.append(f"description={py_str(comment_text(prop.description))}")
        return f"{field_name}: {self.ctx.annotation(prop)} = Query({', '.join(args)})"

    def router(self) -> str:
        body = render_docstring("Router with one POST route per command and one GET route per query.")
        body.append("router = APIRouter()")
        for name, _ in self.model.sorted_commands():
            body += [
                "router.add_api_route(",
                f"    {py_str(route_path(name))},",
                f"    {route_handler_name(name)},",
                '    methods=["POST"],',
                "    response_model=ApiResponse,",
                '    responses={400: {"model": ApiError}},',
                ")",
            ]
        for name, _ in self.model.sorted_queries():
            body += [
                "router.add_api_route(",
                f"    {py_str(route_path(name))},",
                f"    {route_handler_name(name)},",
                '    methods=["GET"],',
                "    response_model=ApiResponse,",
                ")",
            ]
        body.append("return router")
        return "\n".join(["def create_router() -> APIRouter:", *indent(body)])
