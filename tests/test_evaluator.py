"""
Tests for expression evaluation and number formatting.
"""

import math

import numpy as np
import pytest

from webcalc.config import settings
from webcalc.evaluator import (
    CalculatorError,
    EvaluationError,
    bind_literals,
    evaluate_expression,
    format_number,
)


class TestExpressionEvaluator:
    """Test expression evaluation."""

    def test_simple_addition(self):
        assert evaluate_expression("2 + 3") == 5

    def test_operator_precedence(self):
        assert evaluate_expression("2 + 3 * 4") == 14

    def test_parentheses(self):
        assert evaluate_expression("(2 + 3) * 4") == 20

    def test_division(self):
        assert evaluate_expression("10 / 2") == 5

    def test_true_division(self):
        assert evaluate_expression("7/2") == 3.5

    def test_complex_expression(self):
        assert evaluate_expression("((10 + 5) * 2) / 3") == 10

    def test_decimals(self):
        assert evaluate_expression("1.5+.5") == 2

    def test_unary_minus(self):
        assert evaluate_expression("-5+3") == -2

    def test_returns_float(self):
        assert isinstance(evaluate_expression("1+1"), float)

    def test_division_by_zero_is_infinite(self):
        assert math.isinf(evaluate_expression("5/0"))

    def test_invalid_characters_raises_error(self):
        with pytest.raises(EvaluationError):
            evaluate_expression("2 + a")

    def test_names_are_rejected(self):
        with pytest.raises(EvaluationError):
            evaluate_expression("Infinity+1")

    def test_unbalanced_parentheses_raises_error(self):
        with pytest.raises(EvaluationError):
            evaluate_expression("(2 + 3")

    def test_trailing_operator_raises_error(self):
        with pytest.raises(EvaluationError):
            evaluate_expression("5+")

    def test_double_dot_raises_error(self):
        with pytest.raises(EvaluationError):
            evaluate_expression("1..5")

    def test_empty_raises_error(self):
        with pytest.raises(EvaluationError):
            evaluate_expression("")

    def test_too_long_raises_error(self):
        expr = "1+" * settings.max_expression_length + "1"
        with pytest.raises(EvaluationError):
            evaluate_expression(expr)

    def test_evaluation_error_is_calculator_error(self):
        with pytest.raises(CalculatorError):
            evaluate_expression("*")


class TestBindLiterals:
    """Test binding numeric literals to float64 values."""

    def test_binds_each_literal(self):
        text, values = bind_literals("1.5+2")
        assert text.split() == ["n0", "+", "n1"]
        assert values["n0"] == 1.5
        assert values["n1"] == 2.0
        assert all(v.dtype == np.float64 for v in values.values())

    def test_leading_zeros(self):
        _, values = bind_literals("05+007.5")
        assert [float(v) for v in values.values()] == [5.0, 7.5]

    def test_exponent(self):
        _, values = bind_literals("1e+20*2")
        assert float(values["n0"]) == 1e20

    def test_adjacent_literals_stay_separate(self):
        text, values = bind_literals("1..5")
        assert text.split() == ["n0", "n1"]
        assert len(values) == 2


class TestLargeNumbers:
    """Test arithmetic beyond the int64 range."""

    def test_product_beyond_int64(self):
        assert evaluate_expression("4000000000*4000000000") == 1.6e19

    def test_literal_beyond_int64(self):
        assert evaluate_expression("9223372036854775807+1") == 9223372036854775808.0

    def test_twenty_digit_literal(self):
        assert evaluate_expression("12345678901234567890+1") == float("12345678901234567890")

    def test_float_division_by_zero(self):
        assert evaluate_expression("5.0/0.0") == math.inf

    def test_zero_divided_by_zero(self):
        assert math.isnan(evaluate_expression("0/0"))

    def test_negative_division_by_zero(self):
        assert evaluate_expression("-5/0") == -math.inf


class TestFormatNumber:
    """Test display formatting of numbers."""

    def test_integral_value(self):
        assert format_number(4.0) == "4"

    def test_negative_integral_value(self):
        assert format_number(-12.0) == "-12"

    def test_fraction(self):
        assert format_number(3.5) == "3.5"

    def test_infinity(self):
        assert format_number(math.inf) == "Infinity"
        assert format_number(-math.inf) == "-Infinity"

    def test_nan(self):
        assert format_number(math.nan) == "NaN"

    def test_large_value(self):
        assert format_number(1e20) == "1e+20"

    @pytest.mark.parametrize("value", [0.1 + 0.2, -2.5, math.inf, -math.inf, 1e20, 7.0])
    def test_output_parses_back(self, value):
        assert float(format_number(value)) == value
