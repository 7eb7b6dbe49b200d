import logging
from typing import Optional

from expr_backend.schemas.expression_schema import (
    ApplySuggestionRequest,
    ApplySuggestionResponse,
    AutocompleteRequest,
    AutocompleteResponse,
    ExpressionContextSchema,
    FunctionCatalogEntry,
    FunctionSignatureSchema,
    NodeReferenceSchema,
    PathAutocompleteRequest,
    PathAutocompleteResponse,
    PathSuggestionSchema,
    ReplacementRangeSchema,
    ResolveRequest,
    ResolveResponse,
    SuggestionSchema,
)
from expr_engine.expressions.autocomplete import autocomplete
from expr_engine.expressions.catalog import FUNCTION_CATALOG
from expr_engine.expressions.context import get_expression_context
from expr_engine.expressions.insertion import apply_suggestion, replacement_range
from expr_engine.expressions.paths import flatten_for_autocomplete, suggest_paths_with_types
from expr_engine.expressions.resolver import MISSING, resolve
from expr_engine.expressions.types import (
    AutocompleteOptions,
    ExpressionMode,
    ReplacementRange,
    Suggestion,
    WrappingConfig,
)
from expr_engine.expressions.values import format_preview, type_label
from settings import settings

LOGGER = logging.getLogger(__name__)


def _build_wrapping(mode: Optional[ExpressionMode]) -> WrappingConfig:
    return WrappingConfig(
        mode=mode or settings.EXPRESSION_MODE,
        start_word=settings.EXPRESSION_START_WORD,
        suffix=settings.EXPRESSION_SUFFIX,
    )


def _build_options(request: AutocompleteRequest) -> AutocompleteOptions:
    if request.limit is not None:
        limit = request.limit
    elif request.power:
        limit = settings.AUTOCOMPLETE_POWER_LIMIT
    else:
        limit = settings.AUTOCOMPLETE_DEFAULT_LIMIT
    return AutocompleteOptions(
        include_functions=request.include_functions,
        include_globals=request.include_globals,
        limit=limit,
        allow_in_strings=request.allow_in_strings,
        env_alias=settings.AUTOCOMPLETE_ENV_ALIAS,
        array_index_cap=settings.AUTOCOMPLETE_ARRAY_INDEX_CAP,
    )


def _to_suggestion_schema(suggestion: Suggestion, replacement: ReplacementRange) -> SuggestionSchema:
    function = suggestion.function
    node = suggestion.node
    return SuggestionSchema(
        label=suggestion.label,
        kind=suggestion.kind,
        insert_text=suggestion.insert_text,
        detail=suggestion.detail,
        label_detail=suggestion.label_detail,
        preview=suggestion.preview,
        function=(
            FunctionSignatureSchema(
                name=function.name,
                snippet=function.snippet,
                signature=function.signature,
                min_args=function.min_args,
                max_args=function.max_args,
            )
            if function
            else None
        ),
        node=NodeReferenceSchema(node_id=node.node_id, name=node.name) if node else None,
        replacement=ReplacementRangeSchema(start=replacement.start, end=replacement.end),
    )


def autocomplete_expression(request: AutocompleteRequest) -> AutocompleteResponse:
    options = _build_options(request)
    result = autocomplete(
        request.text,
        request.caret,
        request.globals_,
        options=options,
        wrapping=_build_wrapping(request.mode),
    )
    if result.context is None:
        LOGGER.debug("Expression autocomplete: caret %d is outside of an expression", request.caret)
        return AutocompleteResponse(suggestions=[])

    text_before_cursor = result.context.text_before_cursor
    suggestions = [
        _to_suggestion_schema(
            suggestion,
            replacement_range(text_before_cursor, suggestion.insert_text, options.env_alias),
        )
        for suggestion in result.suggestions
    ]

    LOGGER.debug(
        "Expression autocomplete: mode=%s cursor=%d count=%d limit=%d",
        result.mode,
        result.context.expression_cursor,
        len(suggestions),
        options.limit,
    )
    return AutocompleteResponse(
        suggestions=suggestions,
        context=ExpressionContextSchema(
            expression_text=result.context.expression_text,
            expression_cursor=result.context.expression_cursor,
            start_offset=result.context.start_offset,
            end_offset=result.context.end_offset,
        ),
    )


def apply_expression_suggestion(request: ApplySuggestionRequest) -> ApplySuggestionResponse:
    context = get_expression_context(request.text, request.caret, _build_wrapping(request.mode))
    text, caret = apply_suggestion(request.text, context, request.insert_text, settings.AUTOCOMPLETE_ENV_ALIAS)
    return ApplySuggestionResponse(text=text, caret=caret)


def resolve_expression_value(request: ResolveRequest) -> ResolveResponse:
    value = resolve(request.expression, request.globals_)
    if value is MISSING:
        LOGGER.debug("Expression preview: '%s' did not resolve", request.expression)
        return ResolveResponse(found=False)
    return ResolveResponse(found=True, value_type=type_label(value), preview=format_preview(value))


def list_function_catalog() -> list[FunctionCatalogEntry]:
    entries: list[FunctionCatalogEntry] = []
    for spec in FUNCTION_CATALOG:
        signature = spec.signature
        entries.append(
            FunctionCatalogEntry(
                name=spec.name,
                label=spec.label,
                category=spec.category,
                description=spec.description,
                snippet=signature.snippet,
                signature=signature.signature,
                min_args=signature.min_args,
                max_args=signature.max_args,
            )
        )
    return entries


def autocomplete_path(request: PathAutocompleteRequest) -> PathAutocompleteResponse:
    flattened = flatten_for_autocomplete(request.data, settings.AUTOCOMPLETE_ARRAY_INDEX_CAP)
    suggestions = suggest_paths_with_types(flattened, request.value, request.data)
    LOGGER.debug("Path autocomplete: value=%r count=%d", request.value, len(suggestions))
    return PathAutocompleteResponse(
        suggestions=[
            PathSuggestionSchema(suggestion=s.suggestion, label=s.label, type=s.type) for s in suggestions
        ]
    )
