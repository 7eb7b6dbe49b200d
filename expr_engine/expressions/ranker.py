"""Candidate enumeration and ordering for each completion mode."""

from collections.abc import Mapping
from typing import Any, Iterable

from expr_engine.expressions.catalog import find_functions, find_keywords
from expr_engine.expressions.context import BracketKey, CursorContext, DefaultPrefix, DotMember, RootTrigger
from expr_engine.expressions.insertion import member_insert_text, quote_key, root_insert_text
from expr_engine.expressions.resolver import MISSING, resolve
from expr_engine.expressions.types import (
    ROOT_SYMBOL,
    AutocompleteOptions,
    NodeReference,
    Suggestion,
    SuggestionKind,
)
from expr_engine.expressions.values import (
    ValueKind,
    display_name,
    format_preview,
    is_expandable,
    type_label,
    value_kind,
    visible_keys,
)

_KIND_ORDER = {
    SuggestionKind.VARIABLE: 0,
    SuggestionKind.FIELD: 1,
    SuggestionKind.FUNCTION: 2,
    SuggestionKind.KEYWORD: 3,
}

# Node-data entries listed ahead of the alphabetical order.
_MANUAL_PRIORITY = {
    ROOT_SYMBOL: 0,
    "root()": 1,
    "previous()": 2,
}


def sort_suggestions(suggestions: Iterable[Suggestion], prefix: str = "") -> list[Suggestion]:
    return sorted(
        suggestions,
        key=lambda s: (
            not s.label.startswith(prefix),
            _KIND_ORDER[s.kind],
            _MANUAL_PRIORITY.get(s.label, len(_MANUAL_PRIORITY)),
            len(s.label),
            s.label,
        ),
    )


def _starts_with(candidate: str, partial: str) -> bool:
    return candidate.lower().startswith(partial.lower())


def _top_level_suggestion(globals_: Mapping[str, Any], key: str, insert_text: str) -> Suggestion:
    value = globals_[key]
    name = display_name(globals_, key)
    return Suggestion(
        label=key,
        kind=SuggestionKind.VARIABLE,
        insert_text=insert_text,
        detail=type_label(value),
        label_detail=name,
        preview=format_preview(value),
        node=NodeReference(node_id=key, name=name) if name else None,
    )


def root_trigger_suggestions(trigger: RootTrigger, globals_: Any) -> list[Suggestion]:
    return [
        _top_level_suggestion(
            globals_,
            key,
            root_insert_text(key, bracket=trigger.bracket, expandable=is_expandable(globals_[key])),
        )
        for key in visible_keys(globals_)
    ]


def bracket_key_suggestions(bracket_key: BracketKey, globals_: Any) -> list[Suggestion]:
    quote = bracket_key.quote or '"'
    return [
        _top_level_suggestion(globals_, key, quote_key(key, quote))
        for key in visible_keys(globals_)
        if _starts_with(key, bracket_key.partial)
    ]


def _members(target: Any, array_index_cap: int) -> list[tuple[str, Any, bool]]:
    match value_kind(target):
        case ValueKind.OBJECT:
            return [(key, target[key], False) for key in visible_keys(target)]
        case ValueKind.ARRAY:
            return [(str(i), target[i], True) for i in range(min(len(target), array_index_cap))]
        case _:
            return []


def dot_member_suggestions(member: DotMember, globals_: Any, array_index_cap: int) -> list[Suggestion]:
    target = resolve(member.base, globals_)
    if target is MISSING:
        return []

    suggestions: list[Suggestion] = []
    for key, value, is_index in _members(target, array_index_cap):
        if not _starts_with(key, member.partial) or key == member.partial:
            continue
        suggestions.append(
            Suggestion(
                label=key,
                kind=SuggestionKind.FIELD,
                insert_text=member_insert_text(
                    key,
                    operator=member.operator,
                    is_index=is_index,
                    expandable=is_expandable(value),
                ),
                detail=type_label(value),
                preview=format_preview(value),
            )
        )
    return suggestions


def default_suggestions(prefix: DefaultPrefix, globals_: Any, options: AutocompleteOptions) -> list[Suggestion]:
    suggestions: list[Suggestion] = []
    typed = prefix.prefix

    if options.include_globals and (not typed or ROOT_SYMBOL.startswith(typed)):
        suggestions.append(
            Suggestion(
                label=ROOT_SYMBOL,
                kind=SuggestionKind.VARIABLE,
                insert_text=ROOT_SYMBOL,
                detail="root",
                preview=format_preview(globals_ if globals_ is not None else {}),
            )
        )

    if options.include_functions:
        for spec in find_functions(typed):
            signature = spec.signature
            suggestions.append(
                Suggestion(
                    label=spec.label,
                    kind=SuggestionKind.FUNCTION,
                    insert_text=spec.snippet,
                    detail=spec.category,
                    label_detail=signature.signature,
                    function=signature,
                )
            )
        if typed:
            suggestions.extend(
                Suggestion(label=keyword, kind=SuggestionKind.KEYWORD, insert_text=keyword, detail="keyword")
                for keyword in find_keywords(typed)
            )
    return suggestions


def build_suggestions(
    cursor_context: CursorContext,
    globals_: Any,
    options: AutocompleteOptions,
) -> list[Suggestion]:
    """Enumerate the candidates of the active mode and return them ranked, untruncated."""
    match cursor_context:
        case RootTrigger() if options.include_globals:
            return sort_suggestions(root_trigger_suggestions(cursor_context, globals_))
        case BracketKey(partial=partial) if options.include_globals:
            return sort_suggestions(bracket_key_suggestions(cursor_context, globals_), partial)
        case DotMember(partial=partial) if options.include_globals:
            return sort_suggestions(
                dot_member_suggestions(cursor_context, globals_, options.array_index_cap),
                partial,
            )
        case DefaultPrefix(prefix=prefix):
            return sort_suggestions(default_suggestions(cursor_context, globals_, options), prefix)
        case _:
            return []
