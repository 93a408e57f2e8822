import pytest
from decimal import Decimal

from splitledger.core.exceptions import AmountExpressionError
from splitledger.services.amount_expression import evaluate_amount


@pytest.mark.parametrize("expression, expected", [
    ("42", Decimal("42")),
    ("10+5*2", Decimal("20")),
    ("(10 + 5) * 2", Decimal("30")),
    ("12,50 + 7,5", Decimal("20.00")),
    ("100/4-5", Decimal("20")),
    ("-3+10", Decimal("7")),
    ("2*(3+(4-1))", Decimal("12")),
    ("0.1+0.2", Decimal("0.3")),
])
def test_evaluate_amount(expression, expected):
    assert evaluate_amount(expression) == expected


def test_division_keeps_decimal_precision():
    assert evaluate_amount("10/4") == Decimal("2.5")
    assert evaluate_amount("10/3").quantize(Decimal("0.01")) == Decimal("3.33")


def test_division_by_zero():
    with pytest.raises(AmountExpressionError, match="Division by zero"):
        evaluate_amount("5/(2-2)")


@pytest.mark.parametrize("expression", ["5€", "2^3", "abc", "1e3"])
def test_invalid_characters(expression):
    with pytest.raises(AmountExpressionError, match="Invalid characters"):
        evaluate_amount(expression)


@pytest.mark.parametrize("expression, message", [
    ("", "must not be empty"),
    ("   ", "must not be empty"),
    ("(1+2", "Missing closing parenthesis"),
    ("1+", "Unexpected end"),
    ("3)", "Unexpected token"),
    ("1.2.3", "Invalid number"),
    ("1" * 201, "too long"),
])
def test_malformed_expressions(expression, message):
    with pytest.raises(AmountExpressionError, match=message) as exc_info:
        evaluate_amount(expression)

    assert exc_info.value.error_code == "INVALID_AMOUNT_EXPRESSION"
    assert isinstance(exc_info.value, ValueError)
