import math

import pytest

from calculator_app.services.evaluator import CalculatorError, evaluate
from calculator_app.services.formatter import NonFiniteResultError, format_result


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (8.0, "8"),
        (-3.0, "-3"),
        (-0.0, "0"),
        (2.5, "2.5"),
        (-2.5, "-2.5"),
        (1 / 3, "0.3333333333"),
        (0.1 + 0.2, "0.3"),
        (1e-12, "0"),
        (123456789012345.0, "123456789012345"),
    ],
)
def test_format_result_plain_values(value: float, expected: str) -> None:
    assert format_result(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1e20, "1.0000000000e+20"),
        (1234567890123456.0, "1.2345678901e+15"),
        (12345.6789012345, "1.2345678901e+04"),
    ],
)
def test_format_result_falls_back_to_scientific_notation(value: float, expected: str) -> None:
    assert format_result(value) == expected


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_format_result_rejects_non_finite_values(value: float) -> None:
    with pytest.raises(NonFiniteResultError) as exc_info:
        format_result(value)

    assert isinstance(exc_info.value, CalculatorError)
    assert exc_info.value.error_type == "NON_FINITE_RESULT"


def test_format_result_of_evaluated_division() -> None:
    assert format_result(evaluate("10/4")) == "2.5"


def test_negative_sqrt_fails_at_formatting() -> None:
    with pytest.raises(NonFiniteResultError):
        format_result(evaluate("sqrt(0-9)"))
