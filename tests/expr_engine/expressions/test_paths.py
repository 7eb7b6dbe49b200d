import pytest

from expr_engine.expressions.paths import (
    PathSuggestion,
    build_lookup_path,
    complete_path,
    flatten_for_autocomplete,
    format_display_path,
    get_path_suggestions,
    get_path_suggestions_with_types,
    parse_path_segments,
    suggest_paths,
    suggest_paths_with_types,
)


@pytest.fixture
def flattened(company_globals):
    return flatten_for_autocomplete(company_globals)


def test_flatten_for_autocomplete(flattened):
    assert flattened == {
        "root": ["company"],
        "company": ["departments"],
        "company.departments": ["company.departments[0]"],
        "company.departments[0]": ["name", "employees"],
        "company.departments[0].employees": [
            "company.departments[0].employees[0]",
            "company.departments[0].employees[1]",
        ],
        "company.departments[0].employees[0]": ["id", "name"],
        "company.departments[0].employees[1]": ["id", "name"],
    }


def test_flatten_caps_array_items_and_skips_reserved_keys():
    flattened = flatten_for_autocomplete({"xs": list(range(20)), "__nodeName": "n"}, max_array_items=3)
    assert flattened["root"] == ["xs"]
    assert flattened["xs"] == ["xs[0]", "xs[1]", "xs[2]"]


def test_dot_chain_walks_the_lookup_table(flattened):
    assert get_path_suggestions(flattened, "company") == ["departments"]
    assert get_path_suggestions(flattened, "company.departments") == ["company.departments[0]"]
    assert get_path_suggestions(flattened, "company.departments[0]") == ["name", "employees"]
    assert get_path_suggestions(flattened, "unknown") == []


class TestSuggestPaths:
    def test_partial_key(self, flattened):
        assert suggest_paths(flattened, "company.dep") == ["departments"]

    def test_array_path_suggests_indices(self, flattened):
        assert suggest_paths(flattened, "company.departments") == ["company.departments[0]"]

    def test_empty_input_lists_top_level(self, flattened):
        assert suggest_paths(flattened, "") == ["company"]

    def test_with_types(self, flattened, company_globals):
        assert suggest_paths_with_types(flattened, "company.departments", company_globals) == [
            PathSuggestion("company.departments[0]", "object")
        ]
        assert suggest_paths_with_types(flattened, "company.dep", company_globals) == [
            PathSuggestion("departments", "array")
        ]


def test_get_path_suggestions_with_types(flattened, company_globals):
    path = "company.departments[0]"
    assert get_path_suggestions_with_types(flattened, path, path, company_globals) == [
        PathSuggestion("name", "string"),
        PathSuggestion("employees", "array"),
    ]


@pytest.mark.parametrize(
    "value, suggestion, expected",
    [
        ("comp", "company", "company."),
        ("company.dep", "departments", "company.departments"),
        ("company.departments", "company.departments[0]", "company.departments[0]."),
        ("company.departments[0].na", "name", "company.departments[0].name"),
    ],
)
def test_complete_path(flattened, value, suggestion, expected):
    assert complete_path(flattened, value, suggestion) == expected


def test_parse_path_segments():
    assert parse_path_segments('$.a["b c"][0].d') == ["a", "b c", 0, "d"]
    assert parse_path_segments("company.departments[0].employees") == ["company", "departments", 0, "employees"]


def test_build_lookup_path():
    assert build_lookup_path(["company", "departments", 0, "name"]) == "company.departments[0].name"


def test_format_display_path():
    assert format_display_path(["user", "first name", 0]) == "$.user['first name'][0]"
    assert format_display_path(["user", "name"], include_root=False) == "user.name"


def test_path_suggestion_label():
    assert PathSuggestion("first name", "string").label == "['first name']"
    assert PathSuggestion("company.departments[0]", "object").label == "company.departments[0]"
    assert PathSuggestion("name", "string").label == "name"
