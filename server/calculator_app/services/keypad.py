from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from calculator_app.models.calculator import CalculatorResult, KeypadKey, KeypadState
from calculator_app.services.evaluator import CalculatorError

logger = logging.getLogger("calculator_app.keypad")

ERROR_ANSWER = "= Error"

_OPERATOR_TOKENS: dict[KeypadKey, str] = {
    KeypadKey.power: "**",
    KeypadKey.divide: "/",
    KeypadKey.multiply: "*",
    KeypadKey.subtract: "-",
    KeypadKey.add: "+",
}

# Characters after which a new operand starts.
_OPERAND_BOUNDARIES = "+-*/^("


class Calculator(Protocol):
    def evaluate(self, expression: str) -> CalculatorResult:
        ...


def count_current_number_digits(expression: str) -> int:
    """Count the digits of the operand currently being typed (points excluded)."""
    start = max(expression.rfind(char) for char in _OPERAND_BOUNDARIES) + 1
    return sum(1 for char in expression[start:] if char.isdigit())


@dataclass
class KeypadService:
    """
    Turns key presses into the evaluator string and its display twin.

    States are treated as values: ``press`` returns an updated copy and never
    mutates its input.
    """

    calculator: Calculator
    max_digits: int = 15

    def press(self, state: KeypadState, key: KeypadKey | str) -> KeypadState:
        key = KeypadKey(key)
        if key is KeypadKey.clear:
            return KeypadState(sessionId=state.sessionId)

        updated = state.model_copy()
        if key is KeypadKey.sqrt:
            updated.expression += "sqrt("
            updated.equation += key.value
            updated.waitingForSqrt = True
        elif key in _OPERATOR_TOKENS:
            self._close_sqrt(updated)
            updated.expression += _OPERATOR_TOKENS[key]
            updated.equation += key.value
        elif key in (KeypadKey.zero, KeypadKey.double_zero):
            if updated.expression in ("", "0"):
                updated.expression = "0"
                updated.equation = "0"
            else:
                self._append_digits(updated, key.value)
        elif key is KeypadKey.decimal_point:
            updated.expression += key.value
            updated.equation += key.value
        elif key is KeypadKey.equals:
            self._close_sqrt(updated)
            updated.answer = self.evaluate(updated.expression)
        else:
            self._append_digits(updated, key.value)
        return updated

    def evaluate(self, expression: str) -> str:
        logger.info("keypad.evaluate", extra={"expression": expression})
        try:
            result = self.calculator.evaluate(expression)
        except CalculatorError as exc:
            logger.info(
                "keypad.evaluate_failed",
                extra={"expression": expression, "error_type": exc.error_type, "error": exc.message},
            )
            return ERROR_ANSWER
        return f"= {result.display}"

    def _append_digits(self, state: KeypadState, digits: str) -> None:
        if count_current_number_digits(state.expression) + len(digits) > self.max_digits:
            return
        state.expression += digits
        state.equation += digits

    @staticmethod
    def _close_sqrt(state: KeypadState) -> None:
        if state.waitingForSqrt:
            state.expression += ")"
            state.waitingForSqrt = False
