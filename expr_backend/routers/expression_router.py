import logging

from fastapi import APIRouter, HTTPException

from expr_backend.schemas.expression_schema import (
    ApplySuggestionRequest,
    ApplySuggestionResponse,
    AutocompleteRequest,
    AutocompleteResponse,
    FunctionCatalogEntry,
    PathAutocompleteRequest,
    PathAutocompleteResponse,
    ResolveRequest,
    ResolveResponse,
)
from expr_backend.services.expression_autocomplete_service import (
    apply_expression_suggestion,
    autocomplete_expression,
    autocomplete_path,
    list_function_catalog,
    resolve_expression_value,
)
from expr_engine.expressions.errors import ExpressionError

router = APIRouter(prefix="/expressions", tags=["Expressions"])
LOGGER = logging.getLogger(__name__)


@router.post(
    "/autocomplete",
    summary="Suggest completions at the caret",
    response_model=AutocompleteResponse,
)
def autocomplete_expression_endpoint(request: AutocompleteRequest) -> AutocompleteResponse:
    try:
        return autocomplete_expression(request)
    except ExpressionError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        LOGGER.error(f"Failed to autocomplete expression at caret {request.caret}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal Server Error") from e


@router.post(
    "/apply",
    summary="Apply an accepted suggestion to the text",
    response_model=ApplySuggestionResponse,
)
def apply_suggestion_endpoint(request: ApplySuggestionRequest) -> ApplySuggestionResponse:
    try:
        return apply_expression_suggestion(request)
    except ExpressionError as e:
        LOGGER.warning(f"Cannot apply suggestion at caret {request.caret}: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        LOGGER.error(f"Failed to apply suggestion at caret {request.caret}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal Server Error") from e


@router.post("/resolve", summary="Preview the value of a path expression", response_model=ResolveResponse)
def resolve_expression_endpoint(request: ResolveRequest) -> ResolveResponse:
    try:
        return resolve_expression_value(request)
    except Exception as e:
        LOGGER.error(f"Failed to resolve expression '{request.expression}': {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal Server Error") from e


@router.get("/functions", summary="List builtin functions", response_model=list[FunctionCatalogEntry])
def list_functions_endpoint() -> list[FunctionCatalogEntry]:
    return list_function_catalog()


@router.post("/paths", summary="Suggest plain data paths", response_model=PathAutocompleteResponse)
def autocomplete_path_endpoint(request: PathAutocompleteRequest) -> PathAutocompleteResponse:
    try:
        return autocomplete_path(request)
    except Exception as e:
        LOGGER.error(f"Failed to autocomplete path '{request.value}': {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal Server Error") from e
