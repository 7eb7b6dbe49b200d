"""Static catalog of builtin functions and keywords offered by autocomplete."""

import re
from dataclasses import dataclass
from typing import Optional

from expr_engine.expressions.types import FunctionSignature

_PLACEHOLDER_PATTERN = re.compile(r"\$\{\d+:([^}]*)\}")

NODE_DATA_CATEGORY = "node data"


@dataclass(frozen=True)
class FunctionSpec:
    name: str
    params: tuple[str, ...]
    category: str
    description: str
    optional_params: tuple[str, ...] = ()
    variadic: bool = False

    @property
    def label(self) -> str:
        return f"{self.name}()"

    @property
    def snippet(self) -> str:
        placeholders = ", ".join(f"${{{i}:{param}}}" for i, param in enumerate(self.params, start=1))
        return f"{self.name}({placeholders})"

    @property
    def signature(self) -> FunctionSignature:
        max_args: Optional[int] = None if self.variadic else len(self.params) + len(self.optional_params)
        return FunctionSignature(
            name=self.name,
            snippet=self.snippet,
            signature=strip_placeholders(self.snippet),
            min_args=len(self.params),
            max_args=max_args,
        )


def strip_placeholders(snippet: str) -> str:
    """`upper(${1:str})` -> `upper(str)`."""
    return _PLACEHOLDER_PATTERN.sub(r"\1", snippet)


FUNCTION_CATALOG: tuple[FunctionSpec, ...] = (
    # Node data
    FunctionSpec("root", (), NODE_DATA_CATEGORY, "Payload of the event that started the run"),
    FunctionSpec(
        "previous",
        (),
        NODE_DATA_CATEGORY,
        "Output of an upstream node, `depth` steps back (default 1)",
        optional_params=("depth",),
    ),
    # String
    FunctionSpec("trim", ("str",), "string", "Strip whitespace or the given characters", optional_params=("chars",)),
    FunctionSpec("trimPrefix", ("str", "prefix"), "string", "Remove a leading prefix"),
    FunctionSpec("trimSuffix", ("str", "suffix"), "string", "Remove a trailing suffix"),
    FunctionSpec("upper", ("str",), "string", "Uppercase a string"),
    FunctionSpec("lower", ("str",), "string", "Lowercase a string"),
    FunctionSpec("split", ("str", "delimiter"), "string", "Split a string", optional_params=("n",)),
    FunctionSpec("replace", ("str", "old", "new"), "string", "Replace every occurrence of a substring"),
    FunctionSpec("repeat", ("str", "n"), "string", "Repeat a string n times"),
    FunctionSpec("indexOf", ("str", "substring"), "string", "Index of the first occurrence, or -1"),
    FunctionSpec("lastIndexOf", ("str", "substring"), "string", "Index of the last occurrence, or -1"),
    FunctionSpec("hasPrefix", ("str", "prefix"), "string", "True if the string starts with prefix"),
    FunctionSpec("hasSuffix", ("str", "suffix"), "string", "True if the string ends with suffix"),
    # Date
    FunctionSpec("now", (), "date", "Current date and time"),
    FunctionSpec("date", ("str",), "date", "Parse a date string"),
    FunctionSpec("duration", ("str",), "date", "Parse a duration such as 1h30m"),
    # Number
    FunctionSpec("max", ("a", "b"), "number", "Larger of two numbers"),
    FunctionSpec("min", ("a", "b"), "number", "Smaller of two numbers"),
    FunctionSpec("abs", ("n",), "number", "Absolute value"),
    FunctionSpec("ceil", ("n",), "number", "Round up"),
    FunctionSpec("floor", ("n",), "number", "Round down"),
    FunctionSpec("round", ("n",), "number", "Round to the nearest integer"),
    # Array / object
    FunctionSpec("len", ("v",), "array", "Length of a string, array or object"),
    FunctionSpec("keys", ("obj",), "object", "Keys of an object"),
    FunctionSpec("values", ("obj",), "object", "Values of an object"),
    FunctionSpec("first", ("arr",), "array", "First element or nil"),
    FunctionSpec("last", ("arr",), "array", "Last element or nil"),
    FunctionSpec("reverse", ("arr",), "array", "Reversed copy of an array"),
    FunctionSpec("sort", ("arr",), "array", "Sorted copy of an array"),
    FunctionSpec("uniq", ("arr",), "array", "Array without duplicates"),
    FunctionSpec("flatten", ("arr",), "array", "Flatten one level of nesting"),
    FunctionSpec("concat", ("arr1", "arr2"), "array", "Concatenate arrays", variadic=True),
    FunctionSpec("join", ("arr",), "array", "Join elements into a string", optional_params=("delimiter",)),
    FunctionSpec("sum", ("arr",), "array", "Sum of the elements"),
    FunctionSpec("mean", ("arr",), "array", "Average of the elements"),
    FunctionSpec("count", ("arr",), "array", "Number of elements"),
    FunctionSpec("take", ("arr", "n"), "array", "First n elements"),
    # Conversion
    FunctionSpec("string", ("v",), "conversion", "Convert to string"),
    FunctionSpec("int", ("v",), "conversion", "Convert to integer"),
    FunctionSpec("float", ("v",), "conversion", "Convert to float"),
    FunctionSpec("type", ("v",), "conversion", "Type name of a value"),
    FunctionSpec("toJSON", ("v",), "conversion", "Encode as JSON"),
    FunctionSpec("fromJSON", ("str",), "conversion", "Decode JSON, nil on error"),
    FunctionSpec("toBase64", ("str",), "conversion", "Encode as base64"),
    FunctionSpec("fromBase64", ("str",), "conversion", "Decode base64"),
    # Misc
    FunctionSpec("get", ("obj", "key"), "misc", "Value at key, or nil"),
)

KEYWORDS: tuple[str, ...] = (
    "true",
    "false",
    "nil",
    "and",
    "or",
    "not",
    "in",
    "contains",
    "startsWith",
    "endsWith",
    "matches",
)


def find_functions(prefix: str) -> list[FunctionSpec]:
    lowered = prefix.lower()
    return [spec for spec in FUNCTION_CATALOG if spec.name.lower().startswith(lowered)]


def find_keywords(prefix: str) -> list[str]:
    lowered = prefix.lower()
    return [keyword for keyword in KEYWORDS if keyword.lower().startswith(lowered)]
