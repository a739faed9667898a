from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from calculator_app.core.config import get_settings
from calculator_app.models.calculator import CalculatorResult
from calculator_app.services.evaluator import CalculatorError, InvalidExpressionError

logger = logging.getLogger("calculator_app.calculator_http")


class CalculatorHttpServiceError(CalculatorError):
    status_code = 502
    error_type = "CALCULATOR_HTTP_ERROR"


@dataclass
class CalculatorHttpService:
    """Evaluates expressions against a remote instance of this API's /calc route."""

    base_url: str
    timeout: float = 5.0

    @classmethod
    def from_settings(cls) -> "CalculatorHttpService":
        settings = get_settings()
        if not settings.calc_http_base_url:
            raise CalculatorHttpServiceError("CALC_HTTP_BASE_URL is not configured.")
        return cls(
            base_url=settings.calc_http_base_url.rstrip("/"),
            timeout=float(settings.calc_http_timeout_sec),
        )

    def evaluate(self, expression: str) -> CalculatorResult:
        query = expression.strip()
        if not query:
            raise InvalidExpressionError("Expression cannot be empty.")

        url = f"{self.base_url}/calc"
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(url, params={"query": query})
        except httpx.RequestError as exc:
            logger.warning("calculator_http.unavailable", extra={"url": url, "error": str(exc)})
            raise CalculatorHttpServiceError("Calculator service is unavailable.") from exc

        if response.status_code != 200:
            message = "Calculator request failed."
            error_type = None
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                error = payload.get("error")
                if isinstance(error, dict):
                    message = error.get("message", message)
                    error_type = error.get("type")
            raise CalculatorHttpServiceError(
                message,
                details={"status": response.status_code, "remoteType": error_type},
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise CalculatorHttpServiceError("Calculator response was not valid JSON.") from exc

        return CalculatorResult.model_validate(payload)
