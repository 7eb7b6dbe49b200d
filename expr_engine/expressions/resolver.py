"""Side-effect-free resolution of member/index chains against the globals graph.

Only the deterministic subset of the expression language is handled: a root or
named global followed by `.member`, `?.member`, `["key"]` and `[0]` accessors.
Calls, operators and anything else make resolution fail.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from expr_engine.expressions.context import is_identifier_char
from expr_engine.expressions.errors import ExpressionResolveError
from expr_engine.expressions.tail import QUOTES, is_escaped
from expr_engine.expressions.types import ROOT_SYMBOL
from expr_engine.expressions.values import ValueKind, value_kind


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


# Returned when a path cannot be walked. Distinct from None, which is JSON null.
MISSING = _Missing()


@dataclass(frozen=True)
class DotToken:
    pass


@dataclass(frozen=True)
class IdentToken:
    name: str


@dataclass(frozen=True)
class KeyToken:
    key: str


PathToken = Union[DotToken, IdentToken, KeyToken]


def _skip_space(expression: str, i: int) -> int:
    while i < len(expression) and expression[i].isspace():
        i += 1
    return i


def _read_key(expression: str, i: int) -> tuple[str, int]:
    """Read a `[...]` accessor starting after the `[`; return the key and the index after `]`."""
    i = _skip_space(expression, i)
    if i >= len(expression):
        raise ExpressionResolveError(expression, "unterminated bracket")

    quote = expression[i]
    if quote in QUOTES:
        i += 1
        chars: list[str] = []
        while i < len(expression) and (expression[i] != quote or is_escaped(expression, i)):
            if expression[i] == "\\" and i + 1 < len(expression) and expression[i + 1] in ("'", '"', "\\"):
                chars.append(expression[i + 1])
                i += 2
                continue
            chars.append(expression[i])
            i += 1
        if i >= len(expression):
            raise ExpressionResolveError(expression, "unterminated string key")
        key = "".join(chars)
        i += 1
    else:
        start = i
        while i < len(expression) and expression[i].isdigit():
            i += 1
        if i == start:
            raise ExpressionResolveError(expression, f"unsupported key at offset {start}")
        key = expression[start:i]

    i = _skip_space(expression, i)
    if i >= len(expression) or expression[i] != "]":
        raise ExpressionResolveError(expression, "expected ']'")
    return key, i + 1


def tokenize_path(expression: str) -> list[PathToken]:
    tokens: list[PathToken] = []
    i = 0
    while i < len(expression):
        ch = expression[i]
        if ch == ".":
            tokens.append(DotToken())
            i += 1
        elif ch == "?" and expression[i + 1 : i + 2] == ".":
            tokens.append(DotToken())
            i += 2
        elif ch == "[":
            key, i = _read_key(expression, i + 1)
            tokens.append(KeyToken(key=key))
        elif is_identifier_char(ch):
            start = i
            while i < len(expression) and is_identifier_char(expression[i]):
                i += 1
            tokens.append(IdentToken(name=expression[start:i]))
        else:
            raise ExpressionResolveError(expression, f"unexpected character {ch!r} at offset {i}")
    return tokens


def _index(value: Any, key: str, expression: str) -> Any:
    match value_kind(value):
        case ValueKind.OBJECT:
            if key not in value:
                raise ExpressionResolveError(expression, f"no key '{key}'")
            return value[key]
        case ValueKind.ARRAY:
            if not key.isdigit() or int(key) >= len(value):
                raise ExpressionResolveError(expression, f"no index '{key}'")
            return value[int(key)]
        case _:
            raise ExpressionResolveError(expression, f"cannot index {value_kind(value).value} with '{key}'")


def resolve_path(expression: str, globals_: Mapping[str, Any] | None) -> Any:
    """Walk `expression` through `globals_`; raise ExpressionResolveError on any failure."""
    tokens = tokenize_path(expression.strip())
    if not tokens or not isinstance(tokens[0], IdentToken):
        raise ExpressionResolveError(expression, "must start with an identifier")

    root = globals_ if globals_ is not None else {}
    head = tokens[0].name
    current = root if head == ROOT_SYMBOL else _index(root, head, expression)

    position = 1
    while position < len(tokens):
        token = tokens[position]
        match token:
            case DotToken():
                following = tokens[position + 1] if position + 1 < len(tokens) else None
                if isinstance(following, IdentToken):
                    current = _index(current, following.name, expression)
                    position += 2
                elif isinstance(following, KeyToken):
                    # `?.[key]` optional index access
                    position += 1
                else:
                    raise ExpressionResolveError(expression, "expected a member name after '.'")
            case KeyToken(key=key):
                current = _index(current, key, expression)
                position += 1
            case _:
                raise ExpressionResolveError(expression, "unexpected identifier")
    return current


def resolve(expression: str, globals_: Mapping[str, Any] | None) -> Any:
    """Resolve `expression`, returning MISSING instead of raising."""
    try:
        return resolve_path(expression, globals_)
    except ExpressionResolveError:
        return MISSING
    except (TypeError, ValueError, LookupError):
        return MISSING
