"""
Evaluate amounts typed as simple arithmetic, e.g. ``"12,50 + 3*4"``.

Supports ``+ - * /``, unary signs, parentheses and ``,`` as a decimal
separator. Arithmetic is done in Decimal; rounding to cents is left to
the caller.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import List

from splitledger.core.exceptions import AmountExpressionError

MAX_EXPRESSION_LENGTH = 200

_ALLOWED = re.compile(r"^[0-9+\-*/().,]+$")
_TOKEN = re.compile(r"[0-9.]+|[+\-*/()]")


def evaluate_amount(expression: str) -> Decimal:
    """Evaluate ``expression`` and return the unrounded result."""
    if not expression or not expression.strip():
        raise AmountExpressionError("Expression must not be empty", expression)

    compact = re.sub(r"\s+", "", expression)
    if len(compact) > MAX_EXPRESSION_LENGTH:
        raise AmountExpressionError("Expression is too long", expression)
    if not _ALLOWED.match(compact):
        raise AmountExpressionError(
            "Invalid characters. Allowed are digits, +, -, *, /, (, ), . and ,",
            expression
        )

    parser = _Parser(_TOKEN.findall(compact.replace(",", ".")), expression)
    return parser.parse()


class _Parser:
    """Recursive descent: expression -> term (+|- term)*, term -> factor (*|/ factor)*."""

    def __init__(self, tokens: List[str], expression: str):
        self.tokens = tokens
        self.expression = expression
        self.pos = 0

    def parse(self) -> Decimal:
        result = self._expression()
        if self.pos < len(self.tokens):
            self._fail(f"Unexpected token: {self.tokens[self.pos]}")
        return result

    def _fail(self, message: str):
        raise AmountExpressionError(message, self.expression)

    def _peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _expression(self) -> Decimal:
        result = self._term()
        while self._peek() in ("+", "-"):
            op = self.tokens[self.pos]
            self.pos += 1
            right = self._term()
            result = result + right if op == "+" else result - right
        return result

    def _term(self) -> Decimal:
        result = self._factor()
        while self._peek() in ("*", "/"):
            op = self.tokens[self.pos]
            self.pos += 1
            right = self._factor()
            if op == "*":
                result = result * right
            else:
                if right == 0:
                    self._fail("Division by zero is not possible")
                result = result / right
        return result

    def _factor(self) -> Decimal:
        token = self._peek()
        if token is None:
            self._fail("Unexpected end of expression")
        self.pos += 1

        if token == "-":
            return -self._factor()
        if token == "+":
            return self._factor()
        if token == "(":
            result = self._expression()
            if self._peek() != ")":
                self._fail("Missing closing parenthesis")
            self.pos += 1
            return result

        try:
            return Decimal(token)
        except InvalidOperation:
            self._fail(f"Invalid number: {token}")
