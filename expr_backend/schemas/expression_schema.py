"""Expression autocomplete schemas for API requests and responses."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from expr_engine.expressions.types import ExpressionMode, SuggestionKind


class AutocompleteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    caret: int = Field(ge=0)
    globals_: Optional[dict[str, Any]] = Field(default=None, alias="globals")
    include_functions: bool = True
    include_globals: bool = True
    allow_in_strings: bool = False
    limit: Optional[int] = Field(default=None, ge=1, le=500)
    # Use the larger suggestion limit of power contexts.
    power: bool = False
    mode: Optional[ExpressionMode] = None


class ReplacementRangeSchema(BaseModel):
    start: int
    end: int


class FunctionSignatureSchema(BaseModel):
    name: str
    snippet: str
    signature: str
    min_args: int
    max_args: Optional[int] = None


class NodeReferenceSchema(BaseModel):
    node_id: str
    name: str


class SuggestionSchema(BaseModel):
    label: str
    kind: SuggestionKind
    insert_text: str
    detail: str
    label_detail: Optional[str] = None
    preview: Optional[str] = None
    function: Optional[FunctionSignatureSchema] = None
    node: Optional[NodeReferenceSchema] = None
    replacement: ReplacementRangeSchema


class ExpressionContextSchema(BaseModel):
    expression_text: str
    expression_cursor: int
    start_offset: int
    end_offset: int


class AutocompleteResponse(BaseModel):
    suggestions: list[SuggestionSchema] = []
    context: Optional[ExpressionContextSchema] = None


class ApplySuggestionRequest(BaseModel):
    text: str
    caret: int = Field(ge=0)
    insert_text: str
    mode: Optional[ExpressionMode] = None


class ApplySuggestionResponse(BaseModel):
    text: str
    caret: int


class ResolveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    expression: str
    globals_: Optional[dict[str, Any]] = Field(default=None, alias="globals")


class ResolveResponse(BaseModel):
    found: bool
    value_type: Optional[str] = None
    preview: Optional[str] = None


class FunctionCatalogEntry(BaseModel):
    name: str
    label: str
    category: str
    description: str
    snippet: str
    signature: str
    min_args: int
    max_args: Optional[int] = None


class PathAutocompleteRequest(BaseModel):
    value: str
    data: dict[str, Any]


class PathSuggestionSchema(BaseModel):
    suggestion: str
    label: str
    type: str


class PathAutocompleteResponse(BaseModel):
    suggestions: list[PathSuggestionSchema] = []
