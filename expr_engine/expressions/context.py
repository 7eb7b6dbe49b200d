"""Cursor context classification for expression autocomplete.

Each completion mode has its own small backward scanner. `classify` tries them
in a fixed precedence: root trigger, bracket key, dot member, then the default
identifier prefix.
"""

from dataclasses import dataclass
from typing import Optional, Union

from expr_engine.expressions.tail import QUOTES, extract_tail, is_escaped
from expr_engine.expressions.types import (
    ROOT_SYMBOL,
    CompletionMode,
    ExpressionContext,
    ExpressionMode,
    WrappingConfig,
)


@dataclass(frozen=True)
class RootTrigger:
    """`$` or `$[` at the caret. `start` is the offset of the root symbol."""

    start: int
    bracket: bool = False


@dataclass(frozen=True)
class BracketKey:
    """Unterminated key literal after `$[` or `][`.

    `key_start` is the offset of the opening quote, or of the partial when no
    quote was typed.
    """

    base: str
    quote: Optional[str]
    partial: str
    key_start: int


@dataclass(frozen=True)
class DotMember:
    base: str
    operator: str
    partial: str
    operator_start: int
    partial_start: int


@dataclass(frozen=True)
class DefaultPrefix:
    prefix: str
    start: int


CursorContext = Union[RootTrigger, BracketKey, DotMember, DefaultPrefix]


def is_identifier_char(ch: str) -> bool:
    return ch in ("$", "_") or (ch.isascii() and ch.isalnum())


def is_valid_identifier(name: str) -> bool:
    """Bare identifier usable after a dot: `[$A-Za-z_][$A-Za-z0-9_]*`."""
    if not name or name[0].isdigit():
        return False
    return all(is_identifier_char(ch) for ch in name)


def _scan_identifier_back(text: str, end: int) -> int:
    start = end
    while start > 0 and is_identifier_char(text[start - 1]):
        start -= 1
    return start


def _skip_space_back(text: str, end: int) -> int:
    while end > 0 and text[end - 1].isspace():
        end -= 1
    return end


def _is_numeric_literal(text: str) -> bool:
    return text.replace(".", "", 1).isdigit()


def _unescape(literal: str) -> str:
    chars: list[str] = []
    i = 0
    while i < len(literal):
        ch = literal[i]
        if ch == "\\" and i + 1 < len(literal) and literal[i + 1] in ("'", '"', "\\"):
            chars.append(literal[i + 1])
            i += 2
            continue
        chars.append(ch)
        i += 1
    return "".join(chars)


def _last_unescaped(text: str, quote: str) -> int:
    index = text.rfind(quote)
    while index != -1 and is_escaped(text, index):
        index = text.rfind(quote, 0, index)
    return index


def _symbol_before(text: str, end: int, symbol: str) -> bool:
    """True if `text[:end]` ends with `symbol` as a standalone token."""
    start = end - len(symbol)
    if start < 0 or text[start:end] != symbol:
        return False
    return start == 0 or not is_identifier_char(text[start - 1])


def _bracket_base(text: str, bracket_index: int, aliases: tuple[str, ...]) -> Optional[str]:
    end = _skip_space_back(text, bracket_index)
    if end == 0:
        return None
    if text[end - 1] == "]":
        return "]"
    for alias in aliases:
        if _symbol_before(text, end, alias):
            return alias
    return None


def detect_root_trigger(text: str) -> Optional[RootTrigger]:
    if text.endswith(ROOT_SYMBOL):
        end = len(text)
        bracket = False
    else:
        end = _skip_space_back(text, len(text))
        if end == 0 or text[end - 1] != "[":
            return None
        end = _skip_space_back(text, end - 1)
        bracket = True
    if not _symbol_before(text, end, ROOT_SYMBOL):
        return None
    return RootTrigger(start=end - len(ROOT_SYMBOL), bracket=bracket)


def detect_bracket_key(text: str, env_alias: Optional[str] = None) -> Optional[BracketKey]:
    aliases = (ROOT_SYMBOL, env_alias) if env_alias else (ROOT_SYMBOL,)

    best: Optional[BracketKey] = None
    for quote in QUOTES:
        quote_index = _last_unescaped(text, quote)
        if quote_index == -1:
            continue
        bracket_end = _skip_space_back(text, quote_index)
        if bracket_end == 0 or text[bracket_end - 1] != "[":
            continue
        base = _bracket_base(text, bracket_end - 1, aliases)
        if base is None:
            continue
        if best is None or quote_index > best.key_start:
            best = BracketKey(
                base=base,
                quote=quote,
                partial=_unescape(text[quote_index + 1 :]),
                key_start=quote_index,
            )
    if best is not None:
        return best

    partial_start = _scan_identifier_back(text, len(text))
    bracket_end = _skip_space_back(text, partial_start)
    if bracket_end == 0 or text[bracket_end - 1] != "[":
        return None
    base = _bracket_base(text, bracket_end - 1, aliases)
    if base is None:
        return None
    return BracketKey(base=base, quote=None, partial=text[partial_start:], key_start=partial_start)


def detect_dot_member(text: str) -> Optional[DotMember]:
    partial_start = _scan_identifier_back(text, len(text))
    if partial_start == 0 or text[partial_start - 1] != ".":
        return None
    operator_start = partial_start - 1
    operator = "."
    if operator_start > 0 and text[operator_start - 1] == "?":
        operator_start -= 1
        operator = "?."

    base = extract_tail(text[:operator_start])
    # Only paths rooted at the globals object are completable.
    if not base or ROOT_SYMBOL not in base or _is_numeric_literal(base):
        return None
    return DotMember(
        base=base,
        operator=operator,
        partial=text[partial_start:],
        operator_start=operator_start,
        partial_start=partial_start,
    )


def trailing_identifier(text: str) -> DefaultPrefix:
    start = _scan_identifier_back(text, len(text))
    while start < len(text) and text[start].isdigit():
        start += 1
    return DefaultPrefix(prefix=text[start:], start=start)


def classify(text_before_cursor: str, env_alias: Optional[str] = None) -> CursorContext:
    return (
        detect_root_trigger(text_before_cursor)
        or detect_bracket_key(text_before_cursor, env_alias)
        or detect_dot_member(text_before_cursor)
        or trailing_identifier(text_before_cursor)
    )


def completion_mode(cursor_context: CursorContext) -> CompletionMode:
    match cursor_context:
        case RootTrigger():
            return CompletionMode.ROOT_TRIGGER
        case BracketKey():
            return CompletionMode.BRACKET_KEY
        case DotMember():
            return CompletionMode.DOT_MEMBER
        case _:
            return CompletionMode.DEFAULT


def get_expression_context(
    text: str,
    cursor_offset: int,
    wrapping: Optional[WrappingConfig] = None,
) -> Optional[ExpressionContext]:
    """Return the expression slice around the cursor, or None if the cursor is outside one."""
    if text is None or cursor_offset < 0 or cursor_offset > len(text):
        return None
    wrapping = wrapping or WrappingConfig()

    if wrapping.mode == ExpressionMode.RAW:
        return ExpressionContext(
            expression_text=text,
            expression_cursor=cursor_offset,
            start_offset=0,
            end_offset=len(text),
        )

    open_index = text.rfind(wrapping.start_word, 0, cursor_offset)
    if open_index == -1:
        return None
    start = open_index + len(wrapping.start_word)
    close_index = text.find(wrapping.suffix, start)
    if close_index != -1 and cursor_offset > close_index:
        return None
    end = close_index if close_index != -1 else len(text)
    return ExpressionContext(
        expression_text=text[start:end],
        expression_cursor=cursor_offset - start,
        start_offset=start,
        end_offset=end,
    )
