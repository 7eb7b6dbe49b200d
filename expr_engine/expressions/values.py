"""Closed value model for the globals graph.

Globals arrive as decoded JSON-like data. Traversal and labelling code matches
on `ValueKind` instead of probing arbitrary objects.
"""

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from expr_engine.expressions.types import NODE_NAME_KEY, NODE_NAMES_KEY, RESERVED_KEYS


class ValueKind(StrEnum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    UNKNOWN = "unknown"


_TYPE_LABELS = {
    ValueKind.NULL: "null",
    ValueKind.BOOL: "bool",
    ValueKind.NUMBER: "int",
    ValueKind.STRING: "string",
    ValueKind.ARRAY: "array",
    ValueKind.OBJECT: "object",
    ValueKind.UNKNOWN: "unknown",
}


def value_kind(value: Any) -> ValueKind:
    match value:
        case None:
            return ValueKind.NULL
        case bool():
            return ValueKind.BOOL
        case int() | float():
            return ValueKind.NUMBER
        case str():
            return ValueKind.STRING
        case list() | tuple():
            return ValueKind.ARRAY
        case Mapping():
            return ValueKind.OBJECT
        case _:
            return ValueKind.UNKNOWN


def type_label(value: Any) -> str:
    return _TYPE_LABELS[value_kind(value)]


def visible_keys(value: Any) -> list[str]:
    """Own keys of an object, without the display-name metadata keys."""
    if value_kind(value) != ValueKind.OBJECT:
        return []
    return [key for key in value.keys() if isinstance(key, str) and key not in RESERVED_KEYS]


def is_expandable(value: Any) -> bool:
    """True for non-empty objects and arrays, the values worth chaining into."""
    match value_kind(value):
        case ValueKind.OBJECT:
            return bool(visible_keys(value))
        case ValueKind.ARRAY:
            return len(value) > 0
        case _:
            return False


def display_name(globals_: Any, key: str) -> str | None:
    """Display name of a top-level key, from the per-key map or the value itself."""
    if value_kind(globals_) != ValueKind.OBJECT:
        return None
    names = globals_.get(NODE_NAMES_KEY)
    if value_kind(names) == ValueKind.OBJECT:
        name = names.get(key)
        if isinstance(name, str) and name:
            return name
    value = globals_.get(key)
    if value_kind(value) == ValueKind.OBJECT:
        name = value.get(NODE_NAME_KEY)
        if isinstance(name, str) and name:
            return name
    return None


def format_preview(value: Any) -> str:
    match value_kind(value):
        case ValueKind.NULL:
            return "null"
        case ValueKind.BOOL:
            return "true" if value else "false"
        case ValueKind.NUMBER | ValueKind.STRING:
            return str(value)
        case ValueKind.ARRAY:
            if len(value) <= 3:
                return "[" + ", ".join(format_preview(item) for item in value) + "]"
            return f"[{len(value)} items]"
        case ValueKind.OBJECT:
            keys = visible_keys(value)
            if len(keys) <= 3:
                return "{" + ", ".join(keys) + "}"
            return f"{{{len(keys)} keys}}"
        case _:
            return str(value)
