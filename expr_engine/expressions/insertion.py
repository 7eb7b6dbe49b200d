"""Insertion text and replacement range computation for accepted suggestions."""

from typing import Optional

from expr_engine.expressions.context import (
    detect_bracket_key,
    detect_dot_member,
    detect_root_trigger,
    is_valid_identifier,
    trailing_identifier,
)
from expr_engine.expressions.errors import SuggestionApplyError
from expr_engine.expressions.types import ROOT_SYMBOL, ExpressionContext, ReplacementRange


def quote_key(key: str, quote: str = '"') -> str:
    escaped = key.replace("\\", "\\\\").replace(quote, "\\" + quote)
    return f"{quote}{escaped}{quote}"


def member_insert_text(key: str, operator: str = ".", is_index: bool = False, expandable: bool = False) -> str:
    """Text inserted after a member operator.

    Identifiers are inserted bare. Indices and other keys use bracket form, which
    replaces the operator itself (`?.[...]` keeps optional chaining).
    """
    if is_index:
        access = f"[{key}]"
    elif is_valid_identifier(key):
        access = key
    else:
        access = f"[{quote_key(key)}]"
    if access.startswith("[") and operator == "?.":
        access = "?." + access
    return access + "." if expandable else access


def root_insert_text(key: str, bracket: bool = False, expandable: bool = False) -> str:
    if bracket or not is_valid_identifier(key):
        access = f"{ROOT_SYMBOL}[{quote_key(key)}]"
    else:
        access = f"{ROOT_SYMBOL}.{key}"
    return access + "." if expandable else access


def replacement_range(
    text_before_cursor: str,
    insert_text: str,
    env_alias: Optional[str] = None,
) -> ReplacementRange:
    """Span of the expression slice that `insert_text` overwrites.

    Rules are tried from the broadest context to the narrowest; the first match
    wins. The end is always the cursor.
    """
    end = len(text_before_cursor)

    # Key literal in progress after `$[`, `][` or the env alias: only the literal is replaced.
    bracket_key = detect_bracket_key(text_before_cursor, env_alias)
    if bracket_key is not None and (bracket_key.quote is not None or bracket_key.partial):
        return ReplacementRange(start=bracket_key.key_start, end=end)

    # `$` or `$[`: the whole trigger is replaced by a full root path.
    root_trigger = detect_root_trigger(text_before_cursor)
    if root_trigger is not None:
        return ReplacementRange(start=root_trigger.start, end=end)

    dot_member = detect_dot_member(text_before_cursor)
    if dot_member is not None:
        if insert_text.startswith("?.["):
            return ReplacementRange(start=dot_member.operator_start, end=end)
        if insert_text.startswith("["):
            # the dot is replaced by the bracket accessor
            return ReplacementRange(start=dot_member.partial_start - 1, end=end)
        return ReplacementRange(start=dot_member.partial_start, end=end)

    identifier = trailing_identifier(text_before_cursor)
    if identifier.prefix:
        return ReplacementRange(start=identifier.start, end=end)

    return ReplacementRange(start=end, end=end)


def apply_suggestion(
    text: str,
    context: Optional[ExpressionContext],
    insert_text: str,
    env_alias: Optional[str] = None,
) -> tuple[str, int]:
    """Splice an accepted suggestion's `insert_text` into the full buffer; return the new text and caret offset."""
    if context is None:
        raise SuggestionApplyError("Cannot apply a suggestion outside of an expression context")

    replaced = replacement_range(context.text_before_cursor, insert_text, env_alias)
    start = context.start_offset + replaced.start
    end = context.start_offset + replaced.end
    new_text = text[:start] + insert_text + text[end:]
    return new_text, start + len(insert_text)
