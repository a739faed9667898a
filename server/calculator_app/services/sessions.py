from __future__ import annotations

import threading
from typing import Callable, Dict, Optional

from calculator_app.models.calculator import KeypadState


class KeypadSessionStore:
    """
    In-memory keypad state keyed by sessionId.

    Provides thread-safe access for the FastAPI app without extra
    infrastructure. State is lost on restart. ``update`` serialises
    read-modify-write cycles per session, so concurrent key presses on one
    session apply in turn while other sessions proceed.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sessions: Dict[str, KeypadState] = {}
        self._session_locks: Dict[str, threading.Lock] = {}

    def get(self, session_id: str) -> Optional[KeypadState]:
        with self._lock:
            return self._sessions.get(session_id)

    def get_or_create(self, session_id: str) -> KeypadState:
        with self._lock:
            state = self._sessions.get(session_id)
            if state is None:
                state = KeypadState(sessionId=session_id)
                self._sessions[session_id] = state
            return state

    def update(self, session_id: str, fn: Callable[[KeypadState], KeypadState]) -> KeypadState:
        with self._session_lock(session_id):
            state = fn(self.get_or_create(session_id))
            self.save(state)
            return state

    def save(self, state: KeypadState) -> None:
        with self._lock:
            self._sessions[state.sessionId] = state

    def clear(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def _session_lock(self, session_id: str) -> threading.Lock:
        with self._lock:
            return self._session_locks.setdefault(session_id, threading.Lock())


session_store = KeypadSessionStore()
