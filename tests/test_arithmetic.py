"""Tests for zacai/arithmetic.py."""

import pytest

from zacai import config
from zacai.arithmetic import evaluate, format_number, match_rule, normalize_expression
from zacai.router import MATHEMATICAL


class TestBinaryOperations:
    @pytest.mark.parametrize("text,expected", [
        ("7+5", 12),
        ("10-4", 6),
        ("6*7", 42),
        ("6×7", 42),
        ("6 x 7", 42),
        ("20÷4", 5),
        ("9/2", 4.5),
        ("1.5+2.25", 3.75),
        ("what is 12 + 30?", 42),
    ])
    def test_exact_result(self, text, expected):
        result = evaluate(text)
        assert result.pathway == MATHEMATICAL
        assert result.data["answer"] == expected
        assert result.confidence >= 0.9

    def test_division_by_zero_fails_softly(self):
        result = evaluate("10/0")
        assert result.confidence <= 0.3
        assert result.data is None
        assert any("Division by zero" in step for step in result.trace)


class TestCompoundExpressions:
    def test_multiplication_before_addition(self):
        result = evaluate("3×3+3")
        assert result.data["answer"] == 12
        assert result.data["steps"] == ["3 × 3 = 9", "9 + 3 = 12"]
        assert result.data["expression"] == "3×3+3"
        assert result.confidence == config.ARITHMETIC_MATCH_CONFIDENCE

    def test_addition_then_multiplication(self):
        result = evaluate("2+3×4")
        assert result.data["answer"] == 14
        assert result.data["steps"] == ["3 × 4 = 12", "2 + 12 = 14"]

    def test_triple_addition(self):
        result = evaluate("1 + 2 + 3")
        assert result.data["answer"] == 6
        assert result.data["method"] == "Sequential addition"

    def test_triple_multiplication(self):
        assert evaluate("2*3*4").data["answer"] == 24


class TestExtendedOperations:
    def test_percentage(self):
        assert evaluate("15% of 200").data["answer"] == 30
        assert evaluate("what is 15 percent of 200").data["answer"] == 30

    def test_power(self):
        assert evaluate("2^10").data["answer"] == 1024
        assert evaluate("2**3").data["answer"] == 8

    def test_square_root(self):
        assert evaluate("sqrt 144").data["answer"] == 12
        assert evaluate("√81").data["answer"] == 9

    def test_factorial(self):
        result = evaluate("5!")
        assert result.data["answer"] == 120
        assert result.data["steps"] == ["5! = 5 × 4 × 3 × 2 × 1 = 120"]

    def test_exclamation_after_sum_is_not_factorial(self):
        assert evaluate("2+2!").data["answer"] == 4

    def test_huge_factorial_is_a_failure(self):
        result = evaluate("200!")
        assert result.confidence == config.ARITHMETIC_FAILURE_CONFIDENCE
        assert result.data is None


class TestLargeAndSignedNumbers:
    def test_big_integers_stay_exact(self):
        result = evaluate("12345678901234567890+1")
        assert result.data["answer"] == 12345678901234567891
        assert result.confidence >= 0.9
        assert "Final result: 12345678901234567891" in result.trace

    def test_exact_integer_division(self):
        assert evaluate("100000000000000000000/4").data["answer"] == 25000000000000000000

    def test_very_long_operand_does_not_raise(self):
        result = evaluate("1" * 400 + "+1")
        assert result.data["answer"] == int("1" * 399 + "2")

    def test_decimal_too_large_for_a_float_fails_softly(self):
        result = evaluate("1" * 400 + ".5+1")
        assert result.confidence == config.ARITHMETIC_FAILURE_CONFIDENCE
        assert result.data is None
        assert any("Calculation failed" in step for step in result.trace)

    def test_float_overflow_fails_softly(self):
        result = evaluate("2.5^999")
        assert result.confidence == config.ARITHMETIC_FAILURE_CONFIDENCE
        assert result.data is None

    @pytest.mark.parametrize("text,expected", [
        ("-3+5", 2),
        ("-3-5", -8),
        ("-4×2+1", -7),
        ("what is -6/3", -2),
    ])
    def test_negative_leading_operand(self, text, expected):
        result = evaluate(text)
        assert result.data["answer"] == expected
        assert result.confidence >= 0.9

    def test_minus_inside_a_longer_expression_is_not_a_sign(self):
        assert evaluate("10-3+5").data is None


class TestNoMatch:
    def test_plain_text(self):
        result = evaluate("what is the weather")
        assert result.confidence == config.ARITHMETIC_NO_MATCH_CONFIDENCE
        assert result.data is None
        assert not result.found

    def test_empty_input(self):
        assert evaluate("").data is None

    def test_match_rule_returns_none(self):
        assert match_rule("hello") is None


class TestHelpers:
    def test_normalize_expression(self):
        assert normalize_expression("  3 × 3 + 3 = ?") == "3×3+3"

    def test_format_number(self):
        assert format_number(4.0) == "4"
        assert format_number(4.5) == "4.5"
        assert format_number(12) == "12"
