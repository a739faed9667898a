from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class CalculatorResult(BaseModel):
    expression: str = Field(..., description="The arithmetic expression that was evaluated.")
    result: float | int = Field(..., description="The evaluated numerical result.")
    display: str = Field(..., description="The result formatted for the calculator display.")


class KeypadKey(str, Enum):
    clear = "C"
    sqrt = "√"
    power = "^"
    divide = "÷"
    multiply = "×"
    subtract = "-"
    add = "+"
    zero = "0"
    double_zero = "00"
    one = "1"
    two = "2"
    three = "3"
    four = "4"
    five = "5"
    six = "6"
    seven = "7"
    eight = "8"
    nine = "9"
    decimal_point = "."
    equals = "="


class KeyPressRequest(BaseModel):
    key: KeypadKey = Field(..., description="Label of the keypad button that was pressed.")


class KeypadState(BaseModel):
    sessionId: str = Field(..., description="Keypad session identifier.")
    expression: str = Field(default="", description="Evaluator input accumulated from key presses.")
    equation: str = Field(default="", description="Display version of the expression.")
    answer: str = Field(default="", description="Last evaluation outcome, prefixed with '= '.")
    waitingForSqrt: bool = Field(
        default=False,
        description="Whether a sqrt( group is open and will be closed by the next operator or '='.",
    )
