"""Value objects exchanged by the expression autocomplete engine."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional

ROOT_SYMBOL = "$"
NODE_NAMES_KEY = "__nodeNames"
NODE_NAME_KEY = "__nodeName"
RESERVED_KEYS = frozenset({NODE_NAMES_KEY, NODE_NAME_KEY})

DEFAULT_LIMIT = 30
POWER_LIMIT = 150
ARRAY_INDEX_CAP = 10


class SuggestionKind(StrEnum):
    FUNCTION = "function"
    VARIABLE = "variable"
    FIELD = "field"
    KEYWORD = "keyword"


class CompletionMode(StrEnum):
    ROOT_TRIGGER = "root_trigger"
    BRACKET_KEY = "bracket_key"
    DOT_MEMBER = "dot_member"
    DEFAULT = "default"


class ExpressionMode(StrEnum):
    """Whether the whole field is the expression or only delimited spans are."""

    WRAPPED = "wrapped"
    RAW = "raw"


@dataclass(frozen=True)
class FunctionSignature:
    name: str
    snippet: str
    signature: str
    min_args: int
    max_args: Optional[int]


@dataclass(frozen=True)
class NodeReference:
    node_id: str
    name: str


@dataclass(frozen=True)
class Suggestion:
    label: str
    kind: SuggestionKind
    insert_text: str
    detail: str
    label_detail: Optional[str] = None
    preview: Optional[str] = None
    function: Optional[FunctionSignature] = None
    node: Optional[NodeReference] = None


@dataclass(frozen=True)
class ExpressionContext:
    """Slice of the full buffer that is considered inside the expression.

    `expression_cursor` is relative to `expression_text`; `start_offset` and
    `end_offset` map the slice back into the full buffer.
    """

    expression_text: str
    expression_cursor: int
    start_offset: int
    end_offset: int

    @property
    def text_before_cursor(self) -> str:
        return self.expression_text[: self.expression_cursor]


@dataclass(frozen=True)
class ReplacementRange:
    start: int
    end: int


@dataclass(frozen=True)
class WrappingConfig:
    mode: ExpressionMode = ExpressionMode.RAW
    start_word: str = "{{"
    suffix: str = "}}"


@dataclass(frozen=True)
class AutocompleteOptions:
    include_functions: bool = True
    include_globals: bool = True
    limit: int = DEFAULT_LIMIT
    allow_in_strings: bool = False
    # Optional second root alias accepted in bracket-key position, e.g. "env".
    env_alias: Optional[str] = None
    array_index_cap: int = ARRAY_INDEX_CAP


@dataclass(frozen=True)
class AutocompleteResult:
    context: Optional[ExpressionContext] = None
    suggestions: list[Suggestion] = field(default_factory=list)
    mode: Optional[CompletionMode] = None
