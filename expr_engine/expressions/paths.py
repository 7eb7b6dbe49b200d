"""Flattened path completion for plain path inputs.

Plain path inputs (no root symbol, no functions) complete against a lookup table
built once from the data object:

    {"root": ["company"],
     "company": ["departments"],
     "company.departments": ["company.departments[0]"],
     "company.departments[0]": ["name", "employees"], ...}

Object paths map to their bare keys, array paths map to full index paths.
"""

import re
from dataclasses import dataclass
from typing import Any

from expr_engine.expressions.context import is_valid_identifier
from expr_engine.expressions.insertion import quote_key
from expr_engine.expressions.tail import QUOTES, is_escaped
from expr_engine.expressions.types import ARRAY_INDEX_CAP, ROOT_SYMBOL
from expr_engine.expressions.values import ValueKind, type_label, value_kind, visible_keys

ROOT_PATH = "root"

_INDEX_SUFFIX = re.compile(r"\[\d+\]$")

PathSegment = str | int


@dataclass(frozen=True)
class PathSuggestion:
    suggestion: str
    type: str

    @property
    def label(self) -> str:
        if "[" in self.suggestion or is_valid_identifier(self.suggestion):
            return self.suggestion
        return "[" + quote_key(self.suggestion, "'") + "]"


def is_index_path(path: str) -> bool:
    return _INDEX_SUFFIX.search(path) is not None


def parse_path_segments(text: str) -> list[PathSegment]:
    """Split `$.a["b c"][0].d` (root optional) into `["a", "b c", 0, "d"]`.

    Lenient: unterminated brackets keep what was typed so far.
    """
    segments: list[PathSegment] = []
    text = text.strip()
    i = len(ROOT_SYMBOL) if text.startswith(ROOT_SYMBOL) else 0
    while i < len(text):
        ch = text[i]
        if ch == ".":
            i += 1
            continue
        if ch == "[":
            i += 1
            while i < len(text) and text[i].isspace():
                i += 1
            if i < len(text) and text[i] in QUOTES:
                quote = text[i]
                i += 1
                chars: list[str] = []
                while i < len(text) and (text[i] != quote or is_escaped(text, i)):
                    if text[i] == "\\" and i + 1 < len(text):
                        chars.append(text[i + 1])
                        i += 2
                        continue
                    chars.append(text[i])
                    i += 1
                segments.append("".join(chars))
            else:
                start = i
                while i < len(text) and text[i] != "]":
                    i += 1
                token = text[start:i].strip()
                segments.append(int(token) if token.isdigit() else token)
            closing = text.find("]", i)
            i = len(text) if closing == -1 else closing + 1
            continue
        start = i
        while i < len(text) and text[i] not in ".[":
            i += 1
        segments.append(text[start:i])
    return segments


def build_lookup_path(segments: list[PathSegment]) -> str:
    path = ""
    for segment in segments:
        if isinstance(segment, int):
            path += f"[{segment}]"
        else:
            path = f"{path}.{segment}" if path else segment
    return path


def format_display_path(segments: list[PathSegment], include_root: bool = True) -> str:
    path = ROOT_SYMBOL if include_root else ""
    for segment in segments:
        if isinstance(segment, int):
            path += f"[{segment}]"
        elif is_valid_identifier(segment):
            path += f".{segment}" if path else segment
        else:
            path += "[" + quote_key(segment, "'") + "]"
    return path


def flatten_for_autocomplete(data: Any, max_array_items: int = ARRAY_INDEX_CAP) -> dict[str, list[str]]:
    flattened: dict[str, list[str]] = {}

    def walk(value: Any, path: str) -> None:
        match value_kind(value):
            case ValueKind.OBJECT:
                keys = visible_keys(value)
                flattened[path or ROOT_PATH] = keys
                for key in keys:
                    walk(value[key], f"{path}.{key}" if path else key)
            case ValueKind.ARRAY:
                children = [f"{path}[{i}]" for i in range(min(len(value), max_array_items))]
                flattened[path or ROOT_PATH] = children
                for i, child in enumerate(children):
                    walk(value[i], child)

    walk(data, "")
    return flattened


def get_path_suggestions(flattened: dict[str, list[str]], path: str) -> list[str]:
    return list(flattened.get(path, []))


def _value_at(data: Any, segments: list[PathSegment]) -> tuple[bool, Any]:
    current = data
    for segment in segments:
        match value_kind(current):
            case ValueKind.OBJECT if isinstance(segment, str) and segment in current:
                current = current[segment]
            case ValueKind.ARRAY if isinstance(segment, int) and segment < len(current):
                current = current[segment]
            case _:
                return False, None
    return True, current


def _typed_suggestion(suggestion: str, base_path: str, data: Any) -> PathSuggestion:
    full_path = suggestion if is_index_path(suggestion) or not base_path else f"{base_path}.{suggestion}"
    found, value = _value_at(data, parse_path_segments(full_path))
    return PathSuggestion(suggestion=suggestion, type=type_label(value) if found else "unknown")


def get_path_suggestions_with_types(
    flattened: dict[str, list[str]],
    path: str,
    base_path: str,
    data: Any,
) -> list[PathSuggestion]:
    return [_typed_suggestion(suggestion, base_path, data) for suggestion in get_path_suggestions(flattened, path)]


def suggest_paths(flattened: dict[str, list[str]], input_value: str) -> list[str]:
    """Suggestions for a plain path input, e.g. `company.dep`."""
    parent, _, last_key = input_value.rpartition(".")
    siblings = get_path_suggestions(flattened, parent or ROOT_PATH)
    full_path = f"{parent}.{last_key}" if parent else last_key
    array_suggestions = [s for s in get_path_suggestions(flattened, full_path) if is_index_path(s)]
    similar = [s for s in siblings if s.startswith(last_key) and s != last_key]
    return list(dict.fromkeys(array_suggestions + similar))


def complete_path(flattened: dict[str, list[str]], input_value: str, suggestion: str) -> str:
    """New input value after accepting `suggestion`.

    A trailing `.` is added when the accepted path has object keys below it.
    """
    parent = input_value.rpartition(".")[0]
    if not parent or is_index_path(suggestion):
        new_value = suggestion
    else:
        new_value = f"{parent}.{suggestion}"
    children = get_path_suggestions(flattened, new_value)
    if children and not any(is_index_path(child) for child in children):
        new_value += "."
    return new_value


def suggest_paths_with_types(flattened: dict[str, list[str]], input_value: str, data: Any) -> list[PathSuggestion]:
    parent = input_value.rpartition(".")[0]
    return [_typed_suggestion(suggestion, parent, data) for suggestion in suggest_paths(flattened, input_value)]
