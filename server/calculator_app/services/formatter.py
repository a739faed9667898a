from __future__ import annotations

import math

from calculator_app.services.evaluator import CalculatorError

MAX_DISPLAY_LENGTH = 15
MAX_FRACTION_DIGITS = 10


class NonFiniteResultError(CalculatorError):
    error_type = "NON_FINITE_RESULT"


def _scientific(value: float) -> str:
    return f"{value:.{MAX_FRACTION_DIGITS}e}"


def format_result(value: float) -> str:
    """
    Render an evaluation result for the calculator display.

    Whole numbers lose their decimal point, other values keep at most ten
    fractional digits, and anything longer than fifteen characters falls back
    to scientific notation. NaN and infinity cannot be displayed.
    """
    if not math.isfinite(value):
        raise NonFiniteResultError(
            "Result is not a finite number.",
            details={"value": str(value)},
        )

    if value.is_integer():
        formatted = str(int(value))
    else:
        formatted = f"{value:.{MAX_FRACTION_DIGITS}f}".rstrip("0").rstrip(".")
        if formatted in ("", "-", "-0"):
            formatted = "0"

    if len(formatted) > MAX_DISPLAY_LENGTH:
        return _scientific(value)
    return formatted
