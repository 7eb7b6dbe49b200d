import pytest

from expr_engine.expressions.context import (
    BracketKey,
    DefaultPrefix,
    DotMember,
    RootTrigger,
    classify,
    completion_mode,
    detect_bracket_key,
    detect_dot_member,
    detect_root_trigger,
    get_expression_context,
    trailing_identifier,
)
from expr_engine.expressions.types import CompletionMode, ExpressionContext, ExpressionMode, WrappingConfig

WRAPPED = WrappingConfig(mode=ExpressionMode.WRAPPED)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("$", RootTrigger(start=0)),
        ("abs($", RootTrigger(start=4)),
        ("$[", RootTrigger(start=0, bracket=True)),
        ("$ [ ", RootTrigger(start=0, bracket=True)),
        ("foo$", None),
        ("$.", None),
        ("$.a[", None),
    ],
)
def test_detect_root_trigger(text, expected):
    assert detect_root_trigger(text) == expected


def test_detect_bracket_key_with_double_quote():
    assert detect_bracket_key('$["my') == BracketKey(base="$", quote='"', partial="my", key_start=2)


def test_detect_bracket_key_unescapes_partial():
    ctx = detect_bracket_key("$['it\\'s")
    assert ctx == BracketKey(base="$", quote="'", partial="it's", key_start=2)


def test_detect_bracket_key_after_closing_bracket():
    assert detect_bracket_key('$["a"]["b') == BracketKey(base="]", quote='"', partial="b", key_start=7)


def test_detect_bracket_key_without_quote():
    assert detect_bracket_key("$[my") == BracketKey(base="$", quote=None, partial="my", key_start=2)


def test_detect_bracket_key_env_alias_is_opt_in():
    assert detect_bracket_key('env["HO') is None
    ctx = detect_bracket_key('env["HO', env_alias="env")
    assert ctx is not None
    assert ctx.base == "env"
    assert ctx.partial == "HO"


def test_detect_bracket_key_ignores_member_subscript():
    assert detect_bracket_key('$.a["x') is None


def test_detect_dot_member():
    assert detect_dot_member("$.user.na") == DotMember(
        base="$.user", operator=".", partial="na", operator_start=6, partial_start=7
    )


def test_detect_dot_member_optional_chaining():
    ctx = detect_dot_member("$.a?.b")
    assert ctx == DotMember(base="$.a", operator="?.", partial="b", operator_start=3, partial_start=5)


def test_detect_dot_member_narrows_base_inside_call():
    ctx = detect_dot_member("abs($.a.b.")
    assert ctx is not None
    assert ctx.base == "$.a.b"
    assert ctx.partial == ""


@pytest.mark.parametrize("text", ["user.addr", "$.x + 1.", "1.5", "."])
def test_detect_dot_member_requires_rooted_base(text):
    assert detect_dot_member(text) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("abs(up", DefaultPrefix(prefix="up", start=4)),
        ("12ab", DefaultPrefix(prefix="ab", start=2)),
        ("x + ", DefaultPrefix(prefix="", start=4)),
        ("", DefaultPrefix(prefix="", start=0)),
    ],
)
def test_trailing_identifier(text, expected):
    assert trailing_identifier(text) == expected


class TestClassify:
    def test_root_trigger_wins(self):
        assert isinstance(classify("$"), RootTrigger)

    def test_bracket_key(self):
        assert isinstance(classify('$["a'), BracketKey)

    def test_dot_member(self):
        assert classify("$.a") == DotMember(base="$", operator=".", partial="a", operator_start=1, partial_start=2)

    def test_default_prefix(self):
        assert classify("up") == DefaultPrefix(prefix="up", start=0)


class TestGetExpressionContext:
    def test_raw_mode_uses_whole_text(self):
        assert get_expression_context("abc", 2) == ExpressionContext("abc", 2, 0, 3)

    def test_wrapped_mode_slices_between_delimiters(self):
        text = "Hello {{ $.na }} bye"
        caret = text.index("na") + 2
        assert get_expression_context(text, caret, WRAPPED) == ExpressionContext(" $.na ", 5, 8, 14)

    def test_wrapped_mode_after_closing_delimiter(self):
        text = "Hello {{ $.na }} bye"
        assert get_expression_context(text, len(text), WRAPPED) is None

    def test_wrapped_mode_without_opening_delimiter(self):
        assert get_expression_context("plain $.a", 9, WRAPPED) is None

    def test_wrapped_mode_unclosed_expression_runs_to_end(self):
        assert get_expression_context("{{ $.a", 6, WRAPPED) == ExpressionContext(" $.a", 4, 2, 6)

    def test_custom_delimiters(self):
        wrapping = WrappingConfig(mode=ExpressionMode.WRAPPED, start_word="${", suffix="}")
        ctx = get_expression_context("a ${$.x} b", 7, wrapping)
        assert ctx is not None
        assert ctx.expression_text == "$.x"
        assert ctx.text_before_cursor == "$.x"

    @pytest.mark.parametrize("caret", [-1, 4])
    def test_caret_out_of_range(self, caret):
        assert get_expression_context("abc", caret) is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("$", CompletionMode.ROOT_TRIGGER),
        ('$["a', CompletionMode.BRACKET_KEY),
        ("$.a", CompletionMode.DOT_MEMBER),
        ("up", CompletionMode.DEFAULT),
    ],
)
def test_completion_mode(text, expected):
    assert completion_mode(classify(text)) == expected
