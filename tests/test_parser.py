"""
Unit tests for the formula parser.

Covers the three expression shapes, argument splitting and nesting limits.
"""

import pytest

from formula import (
    FunctionCall,
    Identifier,
    InvalidExpression,
    Literal,
    MaxDepthExceeded,
    parse,
)
from formula.parser import iter_calls, referenced_identifiers, split_parameters, strip_whitespace


# =============================================================================
# Parameter splitting
# =============================================================================

class TestSplitParameters:

    def test_top_level_commas_only(self):
        assert split_parameters("A,MA(B,3),2") == ["A", "MA(B,3)", "2"]

    def test_commas_inside_quotes_are_kept(self):
        assert split_parameters('"a,b",C') == ['"a,b"', "C"]

    def test_escaped_quote_does_not_toggle(self):
        assert split_parameters('"a\\",b",C') == ['"a\\",b"', "C"]

    def test_empty_string_has_no_parameters(self):
        assert split_parameters("") == []

    def test_trailing_empty_parameter_is_dropped(self):
        assert split_parameters("A,") == ["A"]

    def test_interior_empty_parameter_is_kept(self):
        assert split_parameters("A,,B") == ["A", "", "B"]


def test_strip_whitespace_removes_everything():
    assert strip_whitespace(" MA( GDP ,\t3 )\n") == "MA(GDP,3)"


# =============================================================================
# Expression shapes
# =============================================================================

class TestParse:

    def test_identifier(self):
        node = parse("GDP_US")
        assert node == Identifier("GDP_US")
        assert node.key == "gdp_us"

    def test_numeric_literal(self):
        assert parse("12.5") == Literal(12.5)
        assert parse("-3") == Literal(-3.0)
        assert parse("1e3") == Literal(1000.0)

    def test_function_call(self):
        node = parse("MA(GDP, 3)")
        assert node == FunctionCall("MA", (Identifier("GDP"), Literal(3.0)))

    def test_nested_calls(self):
        node = parse("ROC(MA(GDP,3),2)")
        assert isinstance(node, FunctionCall)
        assert node.name == "ROC"
        assert node.args[0] == FunctionCall("MA", (Identifier("GDP"), Literal(3.0)))

    def test_whitespace_is_ignored(self):
        assert parse("  MA ( GDP , 3 ) ") == parse("MA(GDP,3)")

    def test_function_with_no_arguments(self):
        assert parse("SUM()") == FunctionCall("SUM", ())

    @pytest.mark.parametrize("formula", ["gdp", "GDP+1", "1GDP", "MA(GDP,3", "ma(GDP,3)", "inf", "nan"])
    def test_invalid_expressions(self, formula):
        with pytest.raises(InvalidExpression):
            parse(formula)

    def test_empty_interior_argument_is_invalid(self):
        with pytest.raises(InvalidExpression) as exc:
            parse("CORRELATION(A,,B)")
        assert str(exc.value) == "Invalid expression: "

    def test_to_formula_round_trips(self):
        node = parse("ROC( MA(GDP, 3), 2 )")
        assert node.to_formula() == "ROC(MA(GDP,3),2)"
        assert parse(node.to_formula()) == node


# =============================================================================
# Depth limit
# =============================================================================

class TestMaxDepth:

    def test_within_limit(self):
        assert isinstance(parse("SUM(SUM(X))", max_depth=2), FunctionCall)

    def test_exceeding_limit(self):
        with pytest.raises(MaxDepthExceeded) as exc:
            parse("SUM(SUM(SUM(X)))", max_depth=2)
        assert exc.value.limit == 2

    def test_deep_nesting_fails_cleanly_at_default(self):
        formula = "SUM(" * 200 + "X" + ")" * 200
        with pytest.raises(MaxDepthExceeded):
            parse(formula)


# =============================================================================
# Tree walking
# =============================================================================

def test_iter_calls_outermost_first():
    names = [call.name for call in iter_calls(parse("ROC(MA(GDP,3),2)"))]
    assert names == ["ROC", "MA"]


def test_referenced_identifiers_in_first_use_order():
    tree = parse("CORRELATION(MA(CPI,3),ROC(GDP,CPI))")
    assert referenced_identifiers(tree) == ["cpi", "gdp"]
