# SPDX-License-Identifier: Apache-2.0
"""Shared rendering of IR properties as pydantic field declarations."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Mapping, Optional

from stormforge.ir.types import EnumShape, IRModel, Property
from stormforge.naming import (
    base_type,
    is_list_type,
    map_type,
    optional,
    to_constant_name,
    to_member_name,
    to_pascal_case,
)

logger = logging.getLogger(__name__)

_NUMERIC = ("int", "Decimal")


@dataclass(frozen=True)
class RenderContext:
    """Model-wide facts the field renderer needs."""

    aliases: Mapping[str, str] = field(default_factory=dict)
    enum_members: Mapping[str, FrozenSet[str]] = field(default_factory=dict)

    @classmethod
    def from_model(cls, model: IRModel) -> RenderContext:
        enums = {
            to_pascal_case(name): frozenset(to_constant_name(v.name) for v in vo.shape.values)
            for name, vo in model.sorted_value_objects()
            if isinstance(vo.shape, EnumShape)
        }
        return cls(aliases=dict(model.type_aliases), enum_members=enums)

    def annotation(self, prop: Property) -> str:
        """Mapped annotation, optionalized when the property is not required."""
        annotation = map_type(prop.type_expr, self.aliases)
        if not prop.required:
            annotation = optional(annotation)
        return annotation


def py_str(text: str) -> str:
    """Double-quoted Python string literal for ``text``."""
    return json.dumps(text, ensure_ascii=False)


def doc_text(text: Optional[str]) -> str:
    """Single-line text safe to place inside a triple-quoted docstring."""
    if not text:
        return ""
    flat = " ".join(text.split())
    return flat.replace("\\", "\\\\").replace('"', '\\"')


def comment_text(text: Optional[str]) -> str:
    """Single-line text safe to place after ``#``."""
    return " ".join((text or "").split())


def _number(value: float, integral: bool) -> str:
    if integral and float(value).is_integer():
        return str(int(value))
    return repr(value)


def _constraints(prop: Property, ctx: RenderContext) -> List[str]:
    rules = prop.validation
    if rules is None:
        return []

    base = map_type(base_type(prop.type_expr), ctx.aliases)
    is_list = is_list_type(prop.type_expr)
    kwargs: List[str] = []
    skipped: List[str] = []

    if rules.min is not None:
        if base in _NUMERIC:
            kwargs.append(f"ge={_number(rules.min, True)}")
        else:
            skipped.append("min")
    if rules.max is not None:
        if base in _NUMERIC:
            kwargs.append(f"le={_number(rules.max, True)}")
        else:
            skipped.append("max")
    if rules.min_length is not None:
        if base == "str" or is_list:
            kwargs.append(f"min_length={rules.min_length}")
        else:
            skipped.append("minLength")
    if rules.max_length is not None:
        if base == "str" or is_list:
            kwargs.append(f"max_length={rules.max_length}")
        else:
            skipped.append("maxLength")
    if rules.pattern is not None:
        if base == "str":
            kwargs.append(f"pattern={py_str(rules.pattern)}")
        else:
            skipped.append("pattern")
    if rules.precision is not None:
        if base == "Decimal":
            kwargs.append(f"decimal_places={rules.precision}")
        else:
            skipped.append("precision")

    if skipped:
        logger.debug(
            f"Property {prop.name} ({prop.type_expr}): ignoring constraints "
            f"{', '.join(skipped)} that do not apply to {base}"
        )
    return kwargs


def _default_literal(prop: Property, ctx: RenderContext) -> Optional[str]:
    value: Any = prop.default
    if value is None:
        return None

    base = map_type(base_type(prop.type_expr), ctx.aliases)

    if isinstance(value, bool):
        return repr(value) if base == "bool" else None
    if base == "Decimal" and isinstance(value, (int, float, str)):
        return f"Decimal({py_str(str(value))})"
    if base == "int" and isinstance(value, int):
        return repr(value)
    if base == "str" and isinstance(value, str):
        return py_str(value)
    if base in ctx.enum_members and isinstance(value, str):
        member = to_constant_name(value)
        if member in ctx.enum_members[base]:
            return f"{base}.{member}"
        logger.warning(
            f"Property {prop.name}: default {value!r} is not a member of {base} and is dropped"
        )
        return None

    logger.debug(f"Property {prop.name}: default {value!r} not representable as {base}")
    return None


def render_field(prop: Property, ctx: RenderContext) -> List[str]:
    """Render ``prop`` as the source lines of one pydantic field.

    Lines carry no indentation; the caller indents them into a class body.
    """
    lines: List[str] = []
    if prop.computed:
        lines.append(f"# computed: {comment_text(prop.computed)}")

    name = to_member_name(prop.name)
    annotation = ctx.annotation(prop)

    default = _default_literal(prop, ctx)
    default_factory = None
    if default is None and prop.default == [] and is_list_type(prop.type_expr):
        default_factory = "list"
    if default is None and default_factory is None and not prop.required:
        default = "None"

    kwargs: List[str] = []
    if name != prop.name:
        kwargs.append(f"alias={py_str(prop.name)}")
    if prop.description:
        kwargs.append(f"description={py_str(comment_text(prop.description))}")
    kwargs.extend(_constraints(prop, ctx))

    if not kwargs and default_factory is None:
        if default is None:
            lines.append(f"{name}: {annotation}")
        else:
            lines.append(f"{name}: {annotation} = {default}")
        return lines

    args: List[str] = []
    if default_factory is not None:
        args.append(f"default_factory={default_factory}")
    elif default is not None:
        args.append(default)
    args.extend(kwargs)
    lines.append(f"{name}: {annotation} = Field({', '.join(args)})")
    return lines


def render_param(prop: Property, ctx: RenderContext) -> str:
    """Render ``prop`` as a function parameter ``name: annotation``."""
    return f"{to_member_name(prop.name)}: {ctx.annotation(prop)}"


def indent(lines: List[str], level: int = 1) -> List[str]:
    pad = "    " * level
    return [f"{pad}{line}" if line else "" for line in lines]


def render_docstring(summary: str, body: Optional[List[str]] = None) -> List[str]:
    """Render a docstring as unindented source lines."""
    summary = summary or ""
    if not body:
        return [f'"""{summary}"""']
    return [f'"""{summary}', ""] + body + ['"""']
