import pytest
from fastapi.testclient import TestClient

from calculator_app.main import create_app


def create_test_client() -> TestClient:
    app = create_app()
    return TestClient(app)


def test_calc_endpoint_returns_result_for_valid_expression() -> None:
    client = create_test_client()

    response = client.get("/calc", params={"query": "3*(4+5)"})

    assert response.status_code == 200
    assert response.json() == {
        "expression": "3*(4+5)",
        "result": 27,
        "display": "27",
    }
    assert response.headers["X-Request-ID"]


def test_calc_endpoint_formats_fractional_results() -> None:
    client = create_test_client()

    response = client.get("/calc", params={"query": "sqrt(2)"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["result"] == pytest.approx(1.41421356, abs=1e-8)
    assert payload["display"] == "1.4142135624"


def test_calc_endpoint_returns_error_for_invalid_expression() -> None:
    client = create_test_client()

    response = client.get("/calc", params={"query": "abc"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"]["type"] == "INVALID_EXPRESSION"
    assert "expression" in payload["error"]["message"].lower()
    assert payload["error"]["traceId"] == response.headers["X-Request-ID"]


@pytest.mark.parametrize(
    ("query", "error_type"),
    [
        ("1/0", "DIVISION_BY_ZERO"),
        ("5+", "INVALID_EXPRESSION"),
        ("sqrt(0-1)", "NON_FINITE_RESULT"),
    ],
)
def test_calc_endpoint_reports_error_kind(query: str, error_type: str) -> None:
    client = create_test_client()

    response = client.get("/calc", params={"query": query})

    assert response.status_code == 400
    assert response.json()["error"]["type"] == error_type


def test_calc_endpoint_echoes_request_id() -> None:
    client = create_test_client()

    response = client.get("/calc", params={"query": "1+1"}, headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_calc_endpoint_requires_query_param() -> None:
    client = create_test_client()

    response = client.get("/calc")

    assert response.status_code == 422
