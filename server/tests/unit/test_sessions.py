import threading
import time

from calculator_app.models.calculator import KeypadState
from calculator_app.services.sessions import KeypadSessionStore


def test_get_returns_none_for_unknown_session() -> None:
    store = KeypadSessionStore()

    assert store.get("missing") is None


def test_get_or_create_persists_a_blank_state() -> None:
    store = KeypadSessionStore()

    state = store.get_or_create("abc")

    assert state == KeypadState(sessionId="abc")
    assert store.get("abc") is state


def test_save_replaces_existing_state() -> None:
    store = KeypadSessionStore()
    store.get_or_create("abc")

    store.save(KeypadState(sessionId="abc", expression="1+1", equation="1+1"))

    assert store.get("abc").expression == "1+1"


def test_clear_reports_whether_a_session_existed() -> None:
    store = KeypadSessionStore()
    store.save(KeypadState(sessionId="abc"))

    assert store.clear("abc") is True
    assert store.clear("abc") is False
    assert store.get("abc") is None


def test_update_applies_the_function_and_saves() -> None:
    store = KeypadSessionStore()

    state = store.update("abc", lambda current: current.model_copy(update={"expression": current.expression + "7"}))

    assert state.expression == "7"
    assert store.get("abc").expression == "7"


def test_concurrent_updates_on_one_session_are_not_lost() -> None:
    store = KeypadSessionStore()

    def slow_append(current: KeypadState) -> KeypadState:
        time.sleep(0.05)
        return current.model_copy(update={"expression": current.expression + "1"})

    threads = [threading.Thread(target=store.update, args=("race", slow_append)) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.get("race").expression == "1111"
