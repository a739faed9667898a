from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from calculator_app.core.config import get_settings
from calculator_app.core.context import bind_session_id, reset_session_id
from calculator_app.core.exceptions import AppError
from calculator_app.models.calculator import KeyPressRequest, KeypadState
from calculator_app.services.calculator import CalculatorService
from calculator_app.services.calculator_http import CalculatorHttpService
from calculator_app.services.keypad import KeypadService
from calculator_app.services.sessions import session_store

router = APIRouter(prefix="/keypad", tags=["keypad"])


class KeypadSessionNotFoundError(AppError):
    status_code = 404
    error_type = "KEYPAD_SESSION_NOT_FOUND"


def get_keypad_service() -> KeypadService:
    settings = get_settings()
    if settings.calc_tool_mode.lower() == "http":
        calculator = CalculatorHttpService.from_settings()
    else:
        calculator = CalculatorService.from_settings()
    return KeypadService(calculator=calculator, max_digits=settings.keypad_max_digits)


@router.get("/{session_id}", response_model=KeypadState)
async def get_keypad_state(session_id: str) -> KeypadState:
    state = session_store.get(session_id)
    if state is None:
        raise KeypadSessionNotFoundError(
            f"Keypad session '{session_id}' does not exist.",
            details={"sessionId": session_id},
        )
    return state


@router.post("/{session_id}/press", response_model=KeypadState)
def press_keypad_key(
    session_id: str,
    request: KeyPressRequest,
    keypad: KeypadService = Depends(get_keypad_service),
) -> KeypadState:
    token = bind_session_id(session_id)
    try:
        return session_store.update(session_id, lambda state: keypad.press(state, request.key))
    finally:
        reset_session_id(token)


@router.delete("/{session_id}", status_code=204)
async def reset_keypad_session(session_id: str) -> Response:
    session_store.clear(session_id)
    return Response(status_code=204)
