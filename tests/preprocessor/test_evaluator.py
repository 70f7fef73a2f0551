"""
Тесты рендеринга AST шаблона.
"""

import pytest

from pmake.preprocessor.context import InterpreterContext
from pmake.preprocessor.errors import EvaluationError, EvaluationErrorKind
from pmake.preprocessor.evaluator import render_template
from pmake.preprocessor.lexer import tokenize_template
from pmake.preprocessor.parser import parse_template


def render(text, context, file="t.txt"):
    ast = parse_template(tokenize_template(text, file), file)
    return render_template(ast, context, file)


@pytest.fixture
def ctx():
    return InterpreterContext({
        "ON": "true",
        "OFF": "false",
        "LANG": "c++",
        "FEATURES": ["tests", "docs"],
        "NONE": [],
    })


class TestRendering:

    def test_text_is_copied(self, ctx):
        assert render("plain text\n", ctx) == "plain text\n"

    def test_scalar_substitution(self, ctx):
        assert render("lang={{ LANG }};", ctx) == "lang=c++;"

    def test_list_substitution_uses_separator(self, ctx):
        assert render("{{ FEATURES }}", ctx) == "tests,docs"
        assert render("[{{ NONE }}]", ctx) == "[]"

    def test_first_true_branch_wins(self, ctx):
        text = "{% if OFF %}a{% elif ON %}b{% elif LANG == \"c++\" %}c{% else %}d{% endif %}"
        assert render(text, ctx) == "b"

    def test_else_branch(self, ctx):
        assert render("{% if OFF %}a{% else %}b{% endif %}", ctx) == "b"

    def test_no_branch_no_else(self, ctx):
        assert render("x{% if OFF %}a{% elif not ON %}b{% endif %}y", ctx) == "xy"

    def test_nested(self, ctx):
        text = "{% if ON %}<{% if FEATURES has \"docs\" %}docs{% else %}-{% endif %}>{% endif %}"
        assert render(text, ctx) == "<docs>"

    def test_deep_nesting(self, ctx):
        depth = 3000
        assert render("{% if ON %}" * depth + "x" + "{% endif %}" * depth, ctx) == "x"

    def test_raw_block_is_literal(self, ctx):
        assert render("{% raw %}{{ MISSING }}{% endraw %}", ctx) == "{{ MISSING }}"

    def test_comment_removed(self, ctx):
        assert render("a{# {{ MISSING }} #}b", ctx) == "ab"


class TestLaziness:
    """Недостижимые ветки не вычисляются и не могут упасть."""

    def test_undefined_in_unselected_body(self, ctx):
        assert render("{% if ON %}a{% else %}{{ MISSING }}{% endif %}", ctx) == "a"

    def test_later_condition_not_evaluated(self, ctx):
        assert render("{% if ON %}a{% elif MISSING %}b{% endif %}", ctx) == "a"

    def test_nested_block_in_unselected_branch(self, ctx):
        text = "{% if OFF %}{% if MISSING %}x{% endif %}{{ ALSO_MISSING }}{% endif %}done"
        assert render(text, ctx) == "done"

    def test_and_short_circuit(self, ctx):
        assert render("{% if OFF and MISSING %}a{% else %}b{% endif %}", ctx) == "b"


class TestRenderErrors:

    def test_undefined_variable_reference(self, ctx):
        with pytest.raises(EvaluationError) as exc:
            render("line\n  {{ MISSING }}", ctx)

        err = exc.value
        assert err.kind == EvaluationErrorKind.UNDEFINED_VARIABLE
        assert err.name == "MISSING"
        assert (err.file, err.line, err.column) == ("t.txt", 2, 3)
        assert str(err) == "t.txt:2:3: undefined variable 'MISSING'"

    def test_undefined_variable_in_condition(self, ctx):
        with pytest.raises(EvaluationError) as exc:
            render("{% if OFF %}{% elif MISSING %}{% endif %}", ctx)

        err = exc.value
        assert err.kind == EvaluationErrorKind.UNDEFINED_VARIABLE
        assert (err.line, err.column) == (1, 13)

    def test_equals_on_list(self, ctx):
        with pytest.raises(EvaluationError) as exc:
            render('{% if FEATURES == "tests" %}{% endif %}', ctx)
        assert exc.value.kind == EvaluationErrorKind.TYPE_MISMATCH

    def test_has_on_scalar(self, ctx):
        with pytest.raises(EvaluationError) as exc:
            render('\n{% if LANG has "c" %}{% endif %}', ctx)

        err = exc.value
        assert err.kind == EvaluationErrorKind.TYPE_MISMATCH
        assert str(err) == "t.txt:2:1: 'has' expects a list, but 'LANG' is a scalar"
