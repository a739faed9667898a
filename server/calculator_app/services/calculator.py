from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property

from langchain_core.tools import tool

from calculator_app.core.config import get_settings
from calculator_app.models.calculator import CalculatorResult
from calculator_app.services.evaluator import (
    CalculatorError,
    DivisionByZeroError,
    ExpressionEvaluator,
    InvalidExpressionError,
)
from calculator_app.services.formatter import NonFiniteResultError, format_result

__all__ = [
    "CalculatorError",
    "CalculatorService",
    "DivisionByZeroError",
    "InvalidExpressionError",
    "NonFiniteResultError",
]


@dataclass
class _EvaluationResult:
    value: float

    def as_number(self) -> int | float:
        if self.value.is_integer():
            return int(self.value)
        return self.value


@dataclass
class CalculatorService:
    max_expression_length: int = 1000
    evaluator: ExpressionEvaluator = field(default_factory=ExpressionEvaluator)

    @classmethod
    def from_settings(cls) -> "CalculatorService":
        settings = get_settings()
        return cls(
            max_expression_length=settings.max_expression_length,
            evaluator=ExpressionEvaluator(max_depth=settings.max_nesting_depth),
        )

    def evaluate(self, expression: str) -> CalculatorResult:
        cleaned = expression.strip()
        if not cleaned:
            raise InvalidExpressionError("Expression cannot be empty.")

        if len(cleaned) > self.max_expression_length:
            raise InvalidExpressionError(f"Expression exceeds {self.max_expression_length} characters.")

        result = _EvaluationResult(self.evaluator.evaluate(cleaned))
        display = format_result(result.value)

        return CalculatorResult(
            expression=expression,
            result=result.as_number(),
            display=display,
        )

    @cached_property
    def langchain_tool(self):
        service = self

        @tool("calculator", return_direct=True)
        def _calculator(expression: str) -> int | float:
            """Evaluate an arithmetic expression using + - * / ** sqrt( ) and return the numeric result."""
            return service.evaluate(expression).result

        return _calculator
