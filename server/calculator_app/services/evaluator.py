from __future__ import annotations

import logging
import math
import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from calculator_app.core.exceptions import AppError

logger = logging.getLogger("calculator_app.evaluator")


class CalculatorError(AppError):
    status_code = 400
    error_type = "CALCULATOR_ERROR"


class EvaluationError(CalculatorError):
    error_type = "EVALUATION_ERROR"


class DivisionByZeroError(EvaluationError):
    error_type = "DIVISION_BY_ZERO"


class InvalidExpressionError(EvaluationError):
    error_type = "INVALID_EXPRESSION"


_TOKEN_PATTERN = re.compile(
    r"""
    (?P<number>\d+(?:\.\d*)?|\.\d+)
    |(?P<sqrt>sqrt\()
    |(?P<power>\*\*)
    |(?P<operator>[-+*/()])
    |(?P<space>\s+)
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    position: int


def tokenize(expression: str) -> list[Token]:
    """Split keypad input into tokens; punctuation tokens use their text as kind."""
    tokens: list[Token] = []
    position = 0
    while position < len(expression):
        match = _TOKEN_PATTERN.match(expression, position)
        if match is None:
            raise InvalidExpressionError(
                f"Invalid expression: unexpected character {expression[position]!r} at position {position}.",
                details={"expression": expression, "position": position},
            )
        text = match.group()
        if match.lastgroup == "number":
            tokens.append(Token("number", text, position))
        elif match.lastgroup != "space":
            tokens.append(Token(text, text, position))
        position = match.end()
    tokens.append(Token("end", "", len(expression)))
    return tokens


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and exponent.is_integer() and exponent % 2 == 1:
            return -math.inf
        return math.inf
    except ValueError:
        # math.pow rejects 0 ** negative and negative ** fractional
        if base == 0.0:
            return math.inf
        return math.nan


def _square_root(value: float) -> float:
    # Negative operands produce NaN and fail later at the formatting boundary.
    if value < 0 or math.isnan(value):
        return math.nan
    return math.sqrt(value)


class _Parser:
    """
    Recursive-descent evaluator over the keypad grammar:

        expr   := term (('+' | '-') term)*
        term   := factor (('*' | '/') factor)*
        factor := base ('**' factor)?
        base   := number | '(' expr ')' | 'sqrt(' expr ')' | '-' base

    Values are computed while parsing, so flat operator chains stay iterative
    and only nesting consumes stack depth.
    """

    def __init__(self, expression: str, max_depth: int) -> None:
        self._expression = expression
        self._tokens = tokenize(expression)
        self._index = 0
        self._depth = 0
        self._max_depth = max_depth

    def parse(self) -> float:
        value = self._sum()
        token = self._peek()
        if token.kind != "end":
            raise self._unexpected(token)
        return value

    @contextmanager
    def _nested(self) -> Iterator[None]:
        self._depth += 1
        if self._depth > self._max_depth:
            raise InvalidExpressionError(
                "Invalid expression: nesting is too deep.",
                details={"expression": self._expression, "maxDepth": self._max_depth},
            )
        try:
            yield
        finally:
            self._depth -= 1

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        if token.kind != "end":
            self._index += 1
        return token

    def _unexpected(self, token: Token) -> InvalidExpressionError:
        if token.kind == "end":
            message = "Invalid expression: unexpected end of input."
        else:
            message = f"Invalid expression: unexpected {token.text!r} at position {token.position}."
        return InvalidExpressionError(
            message,
            details={"expression": self._expression, "position": token.position},
        )

    def _sum(self) -> float:
        with self._nested():
            value = self._product()
            while self._peek().kind in ("+", "-"):
                operator = self._advance().kind
                right = self._product()
                value = value + right if operator == "+" else value - right
            return value

    def _product(self) -> float:
        value = self._factor()
        while self._peek().kind in ("*", "/"):
            operator = self._advance().kind
            right = self._factor()
            if operator == "*":
                value = value * right
                continue
            if right == 0.0:
                raise DivisionByZeroError(
                    "Division by zero is not allowed.",
                    details={"expression": self._expression},
                )
            value = value / right
        return value

    def _factor(self) -> float:
        base = self._base()
        if self._peek().kind != "**":
            return base
        self._advance()
        with self._nested():
            exponent = self._factor()
        return _power(base, exponent)

    def _base(self) -> float:
        token = self._advance()
        if token.kind == "number":
            return float(token.text)
        if token.kind == "-":
            with self._nested():
                return -self._base()
        if token.kind in ("(", "sqrt("):
            value = self._sum()
            closing = self._advance()
            if closing.kind != ")":
                raise self._unexpected(closing)
            if token.kind == "sqrt(":
                return _square_root(value)
            return value
        raise self._unexpected(token)


class ExpressionEvaluator:
    """
    Stateless evaluator for the strings built by the calculator keypad.

    Supports ``+ - * / **``, parentheses, ``sqrt(`` groups and unary minus.
    Raises ``DivisionByZeroError`` when a divisor is exactly zero and
    ``InvalidExpressionError`` for anything that does not parse.
    """

    MAX_DEPTH = 100

    def __init__(self, max_depth: int | None = None) -> None:
        self.max_depth = self.MAX_DEPTH if max_depth is None else max_depth

    def evaluate(self, expression: str) -> float:
        logger.debug("expression.evaluate", extra={"expression": expression})
        try:
            return _Parser(expression, self.max_depth).parse()
        except RecursionError as exc:
            raise InvalidExpressionError(
                "Invalid expression: nesting is too deep.",
                details={"expression": expression, "maxDepth": self.max_depth},
            ) from exc


def evaluate(expression: str) -> float:
    return ExpressionEvaluator().evaluate(expression)
