# SPDX-License-Identifier: Apache-2.0
"""Naming conventions and IR type mapping.

Every identifier taken from the IR reaches generated code through one of the
casing functions here:

* type names (records, enums, events, commands): ``to_pascal_case``
* fields, parameters, functions: ``to_snake_case`` / ``to_field_name`` /
  ``to_member_name``
* route path segments and distribution names: ``to_kebab_case``

All functions are pure.
"""

from __future__ import annotations

import keyword
import re
from typing import Dict, List, Mapping, Optional

# Acronym followed by a capitalized word, capitalized or lowercase words,
# trailing acronyms, bare digit runs
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z0-9]+|[A-Z]+[0-9]*|[0-9]+")
_SEPARATOR_RE = re.compile(r"[^A-Za-z0-9]+")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

PRIMITIVE_TYPES: Dict[str, str] = {
    "String": "str",
    "Integer": "int",
    "Decimal": "Decimal",
    "Boolean": "bool",
    "DateTime": "datetime",
    "Date": "date",
    "Time": "time",
    "Uuid": "UUID",
}

# IR generic wrapper prefix -> annotation template
GENERIC_WRAPPERS = (
    ("List<", "list[{}]"),
    ("Vec<", "list[{}]"),
    ("Option<", "Optional[{}]"),
    ("PagedResult<", "PagedResult[{}]"),
)

DTO_PREFIXES = ("Create", "Update")

# Names bound inside generated record classes besides their fields
RESERVED_MEMBER_NAMES = frozenset(
    {"cls", "self", "new", "validate", "copy", "dict", "json", "schema", "construct", "model_config"}
)


def split_words(name: str) -> List[str]:
    """Split an identifier into words at separators and case boundaries."""
    words: List[str] = []
    for chunk in _SEPARATOR_RE.split(name):
        words.extend(_WORD_RE.findall(chunk))
    return words


def to_snake_case(name: str) -> str:
    """``OrderId`` -> ``order_id``."""
    return "_".join(word.lower() for word in split_words(name))


def to_kebab_case(name: str) -> str:
    """``OrderId`` -> ``order-id``."""
    return "-".join(word.lower() for word in split_words(name))


def to_pascal_case(name: str) -> str:
    """``order_id`` -> ``OrderId``."""
    return "".join(word[:1].upper() + word[1:].lower() for word in split_words(name))


def to_constant_name(name: str) -> str:
    """``pendingPayment`` -> ``PENDING_PAYMENT``, used for enum members."""
    constant = to_snake_case(name).upper()
    if not constant:
        return "VALUE"
    if constant[0].isdigit():
        return f"VALUE_{constant}"
    return constant


def to_field_name(name: str) -> str:
    """Snake-case ``name`` and make it a legal Python identifier.

    Keywords get a trailing underscore (``from`` -> ``from_``); names starting
    with a digit get a ``field_`` prefix. Callers keep the original name as the
    serialization alias whenever the result differs from it.
    """
    field = to_snake_case(name)
    if not field:
        return "field"
    if field[0].isdigit():
        field = f"field_{field}"
    if keyword.iskeyword(field):
        field = f"{field}_"
    return field


def to_member_name(name: str) -> str:
    """``to_field_name`` that also avoids members of the generated record classes.

    ``cls`` -> ``cls_``, ``validate`` -> ``validate_``. Used for record fields and
    the parameters of generated constructors.
    """
    field = to_field_name(name)
    if field in RESERVED_MEMBER_NAMES:
        field = f"{field}_"
    return field


def _unwrap_generic(expr: str) -> Optional[tuple]:
    for prefix, template in GENERIC_WRAPPERS:
        if expr.startswith(prefix) and expr.endswith(">"):
            return template, expr[len(prefix) : -1].strip()
    return None


def map_type(expr: str, aliases: Optional[Mapping[str, str]] = None) -> str:
    """Map an IR type expression to a Python annotation.

    Resolution order: generic wrappers (recursively), primitive table,
    explicit alias table, ``Create``/``Update`` prefix heuristic, pass-through.

    >>> map_type("List<Integer>")
    'list[int]'
    >>> map_type("CreateOrderItem")
    'OrderItem'
    """
    expr = expr.strip()

    generic = _unwrap_generic(expr)
    if generic is not None:
        template, inner = generic
        return template.format(map_type(inner, aliases))

    if expr in PRIMITIVE_TYPES:
        return PRIMITIVE_TYPES[expr]

    if aliases and expr in aliases:
        # Alias targets are mapped without consulting the alias table again
        return map_type(aliases[expr])

    for prefix in DTO_PREFIXES:
        if expr.startswith(prefix) and len(expr) > len(prefix):
            return _type_name(expr[len(prefix) :])

    return _type_name(expr)


def _type_name(name: str) -> str:
    """PascalCase a user-defined type reference so it matches its definition."""
    if _IDENTIFIER_RE.match(name):
        return to_pascal_case(name)
    return name


def optional(annotation: str) -> str:
    """Wrap ``annotation`` in ``Optional[...]`` unless it already is."""
    if annotation.startswith("Optional["):
        return annotation
    return f"Optional[{annotation}]"


def base_type(expr: str) -> str:
    """Strip ``Option<...>`` wrappers from an IR type expression."""
    expr = expr.strip()
    while expr.startswith("Option<") and expr.endswith(">"):
        expr = expr[len("Option<") : -1].strip()
    return expr


def is_list_type(expr: str) -> bool:
    expr = base_type(expr)
    return (expr.startswith("List<") or expr.startswith("Vec<")) and expr.endswith(">")


def is_primitive(expr: str) -> bool:
    """True when ``expr`` is a primitive, optionally inside Option/List wrappers."""
    expr = base_type(expr)
    if is_list_type(expr):
        generic = _unwrap_generic(expr)
        return generic is not None and is_primitive(generic[1])
    return expr in PRIMITIVE_TYPES
