from unittest.mock import patch

import pytest

from expr_backend.schemas.expression_schema import (
    ApplySuggestionRequest,
    AutocompleteRequest,
    PathAutocompleteRequest,
    ResolveRequest,
)
from expr_backend.services import expression_autocomplete_service
from expr_backend.services.expression_autocomplete_service import (
    apply_expression_suggestion,
    autocomplete_expression,
    autocomplete_path,
    list_function_catalog,
    resolve_expression_value,
)
from expr_engine.expressions.errors import SuggestionApplyError
from expr_engine.expressions.types import CompletionMode, ExpressionMode
from settings import settings


def test_explicit_limit_wins_over_power():
    request = AutocompleteRequest(text="", caret=0, mode=ExpressionMode.RAW, limit=3, power=True)
    assert len(autocomplete_expression(request).suggestions) == 3


def test_limits_come_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "AUTOCOMPLETE_DEFAULT_LIMIT", 2)
    request = AutocompleteRequest(text="", caret=0, mode=ExpressionMode.RAW)
    assert len(autocomplete_expression(request).suggestions) == 2


def test_env_alias_from_settings(monkeypatch, user_globals):
    text = 'env["us'
    request = AutocompleteRequest(text=text, caret=len(text), globals=user_globals, mode=ExpressionMode.RAW)
    assert autocomplete_expression(request).suggestions == []

    monkeypatch.setattr(settings, "AUTOCOMPLETE_ENV_ALIAS", "env")
    (suggestion,) = autocomplete_expression(request).suggestions
    assert suggestion.insert_text == '"user"'
    assert (suggestion.replacement.start, suggestion.replacement.end) == (4, 7)


def test_array_index_cap_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "AUTOCOMPLETE_ARRAY_INDEX_CAP", 2)
    request = AutocompleteRequest(text="$.xs.", caret=5, globals={"xs": [1, 2, 3]}, mode=ExpressionMode.RAW)
    assert [s.label for s in autocomplete_expression(request).suggestions] == ["0", "1"]


def test_node_reference_is_exposed(node_globals):
    request = AutocompleteRequest(text="$", caret=1, globals=node_globals, mode=ExpressionMode.RAW)
    node1 = autocomplete_expression(request).suggestions[0]
    assert node1.node.node_id == "node1"
    assert node1.node.name == "Fetch users"


def test_apply_expression_suggestion_raises_outside_expression():
    with pytest.raises(SuggestionApplyError):
        apply_expression_suggestion(ApplySuggestionRequest(text="plain", caret=1, insert_text="x"))


def test_apply_expression_suggestion_raw_mode():
    request = ApplySuggestionRequest(text="abs(up", caret=6, insert_text="upper(${1:str})", mode=ExpressionMode.RAW)
    response = apply_expression_suggestion(request)
    assert response.text == "abs(upper(${1:str})"
    assert response.caret == len(response.text)


def test_resolve_expression_value_of_object(user_globals):
    response = resolve_expression_value(ResolveRequest(expression="$.user.address", globals=user_globals))
    assert response.found
    assert response.value_type == "object"
    assert response.preview == "{city}"


def test_resolve_expression_value_of_null(user_globals):
    user_globals["user"]["address"] = None
    response = resolve_expression_value(ResolveRequest(expression="$.user.address", globals=user_globals))
    assert response.found
    assert response.preview == "null"


def test_list_function_catalog():
    entries = {entry.name: entry for entry in list_function_catalog()}
    assert entries["concat"].max_args is None
    assert entries["previous"].label == "previous()"


def test_autocomplete_path_typed(company_globals):
    response = autocomplete_path(PathAutocompleteRequest(value="company.departments", data=company_globals))
    assert [(s.suggestion, s.type) for s in response.suggestions] == [("company.departments[0]", "object")]


def test_autocomplete_logs_completion_mode(user_globals):
    request = AutocompleteRequest(text="$.user.", caret=7, globals=user_globals, mode=ExpressionMode.RAW)
    with patch.object(expression_autocomplete_service.LOGGER, "debug") as debug:
        autocomplete_expression(request)
    assert debug.call_args.args[1] == CompletionMode.DOT_MEMBER
