from collections.abc import Mapping
from typing import Any, Optional

from expr_engine.expressions.context import classify, completion_mode, detect_bracket_key, get_expression_context
from expr_engine.expressions.ranker import build_suggestions
from expr_engine.expressions.tail import is_inside_string
from expr_engine.expressions.types import AutocompleteOptions, AutocompleteResult, Suggestion, WrappingConfig


def autocomplete(
    text: str,
    cursor_offset: int,
    globals_: Optional[Mapping[str, Any]] = None,
    options: Optional[AutocompleteOptions] = None,
    wrapping: Optional[WrappingConfig] = None,
) -> AutocompleteResult:
    """Compute ranked suggestions for the cursor position in `text`.

    Stateless and never raises on bad input: a cursor outside the text, outside a
    wrapped expression or inside a string literal gives no suggestions.
    """
    options = options or AutocompleteOptions()
    context = get_expression_context(text, cursor_offset, wrapping)
    if context is None:
        return AutocompleteResult()

    before_cursor = context.text_before_cursor
    bracket_key = detect_bracket_key(before_cursor, options.env_alias)
    if bracket_key is not None and bracket_key.quote is not None:
        # an open `$["key` literal only completes keys, whatever it contains
        cursor_context = bracket_key
    elif not options.allow_in_strings and is_inside_string(before_cursor):
        return AutocompleteResult(context=context)
    else:
        cursor_context = classify(before_cursor, options.env_alias)

    suggestions = build_suggestions(cursor_context, globals_, options)
    return AutocompleteResult(
        context=context,
        suggestions=suggestions[: max(options.limit, 0)],
        mode=completion_mode(cursor_context),
    )


def get_suggestions(
    text: str,
    cursor_offset: int,
    globals_: Optional[Mapping[str, Any]] = None,
    options: Optional[AutocompleteOptions] = None,
    wrapping: Optional[WrappingConfig] = None,
) -> list[Suggestion]:
    return autocomplete(text, cursor_offset, globals_, options, wrapping).suggestions
