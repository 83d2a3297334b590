# SPDX-License-Identifier: Apache-2.0
"""Value-object and aggregate-root record generation (``domain/entities.py``)."""

from __future__ import annotations

import logging
from typing import List

from stormforge.ir.types import (
    Aggregate,
    EnumShape,
    IdentifierShape,
    RecordShape,
    ValueObject,
)
from stormforge.naming import map_type, to_constant_name, to_member_name, to_pascal_case

from .base import SourceGenerator
from .fields import comment_text, doc_text, indent, py_str, render_docstring, render_field

logger = logging.getLogger(__name__)

_IMPORTS = """\
from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field"""

_SHARED = '''\
T = TypeVar("T")


class DomainModel(BaseModel):
    """Base for every generated record."""

    model_config = ConfigDict(populate_by_name=True)


class PagedResult(DomainModel, Generic[T]):
    """One page of query results."""

    items: List[T] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20'''

_SHAPE_ORDER = {EnumShape: 0, IdentifierShape: 1, RecordShape: 2}


class EntityGenerator(SourceGenerator):
    """Emits value objects first, then aggregate roots, each in name order."""

    title = "Domain entities and value objects for the {context} bounded context."

    def imports(self) -> str:
        return _IMPORTS

    def blocks(self) -> List[str]:
        blocks = [_SHARED]
        # Enums first: field defaults refer to their members at class creation
        value_objects = sorted(
            self.model.sorted_value_objects(),
            key=lambda item: _SHAPE_ORDER[type(item[1].shape)],
        )
        for name, vo in value_objects:
            blocks.append(self.value_object(name, vo))
        for name, aggregate in self.model.sorted_aggregates():
            blocks.append(self.aggregate(name, aggregate))
        logger.debug(
            f"Generated {len(self.model.value_objects)} value objects and "
            f"{len(self.model.aggregates)} aggregates"
        )
        return blocks

    def value_object(self, name: str, vo: ValueObject) -> str:
        """Dispatch on the value object's shape."""
        shape = vo.shape
        if isinstance(shape, EnumShape):
            return self._enum(name, vo, shape)
        if isinstance(shape, IdentifierShape):
            return self._identifier(name, vo, shape)
        if isinstance(shape, RecordShape):
            return self._record(name, vo, shape)
        raise TypeError(f"Unsupported value object shape: {type(shape).__name__}")

    def _record(self, name: str, vo: ValueObject, shape: RecordShape) -> str:
        type_name = to_pascal_case(name)
        body = render_docstring(doc_text(vo.description) or f"{type_name} value object.")
        body += ["", "model_config = ConfigDict(frozen=True)"]
        if shape.properties:
            body.append("")
        for prop in shape.properties:
            body.extend(render_field(prop, self.ctx))
        return "\n".join([f"class {type_name}(DomainModel):", *indent(body)])

    def _enum(self, name: str, vo: ValueObject, shape: EnumShape) -> str:
        type_name = to_pascal_case(name)
        body = render_docstring(doc_text(vo.description) or f"{type_name} enumeration.")
        if shape.values:
            body.append("")
        for value in shape.values:
            if value.description:
                body.append(f"# {comment_text(value.description)}")
            body.append(f"{to_constant_name(value.name)} = {py_str(value.name)}")
        return "\n".join([f"class {type_name}(str, Enum):", *indent(body)])

    def _identifier(self, name: str, vo: ValueObject, shape: IdentifierShape) -> str:
        type_name = to_pascal_case(name)
        underlying = map_type(shape.underlying_type, self.ctx.aliases)

        body = render_docstring(doc_text(vo.description) or f"{type_name} identifier.")
        body += ["", "model_config = ConfigDict(frozen=True)", ""]
        if shape.format is not None:
            body.append(f"FORMAT: ClassVar[str] = {py_str(shape.format)}")
        if shape.prefix is not None:
            body.append(f"PREFIX: ClassVar[str] = {py_str(shape.prefix)}")
        if shape.format is not None or shape.prefix is not None:
            body.append("")
        body += [
            f"value: {underlying}",
            "",
            "@classmethod",
            f"def from_value(cls, value: {underlying}) -> {type_name}:",
            '    """Wrap a raw value."""',
            "    return cls(value=value)",
            "",
            f"def into_value(self) -> {underlying}:",
            '    """Unwrap the raw value."""',
            "    return self.value",
            "",
            "def __str__(self) -> str:",
            "    return str(self.value)",
        ]
        return "\n".join([f"class {type_name}(DomainModel):", *indent(body)])

    def aggregate(self, name: str, aggregate: Aggregate) -> str:
        type_name = to_pascal_case(name)
        properties = aggregate.root_entity.properties

        details: List[str] = []
        identity = [to_member_name(p.name) for p in properties if p.identifier]
        if identity:
            details.append(f"Identity: {', '.join(identity)}")
        if aggregate.invariants:
            if details:
                details.append("")
            details.append("Invariants:")
            for invariant in aggregate.invariants:
                line = f"    - {doc_text(invariant.name)}: {doc_text(invariant.expression)}"
                if invariant.description:
                    line += f" ({doc_text(invariant.description)})"
                details.append(line)

        summary = doc_text(aggregate.description) or f"{type_name} aggregate root."
        body = render_docstring(summary, details)
        body += ["", "model_config = ConfigDict(from_attributes=True)"]
        if properties:
            body.append("")
        for prop in properties:
            body.extend(render_field(prop, self.ctx))
        return "\n".join([f"class {type_name}(DomainModel):", *indent(body)])
