"""Classification and reporting of control-plane request failures.

The control plane answers failed requests with a structured body::

    {"message": "...", "statusCode": 409, "requestID": "...", "DetailedError": "..."}

Anything else (connection errors, timeouts, proxies returning HTML, bodies
that do not parse) is reported with the raw exception message.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dbos_cloud.utils.console_like import ConsoleLike, coalesce_console


class CloudAPIErrorResponse(BaseModel):
    """Structured error body returned by the control plane."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    status_code: int = Field(alias="statusCode")
    request_id: str = Field(alias="requestID")
    detailed_error: str | None = Field(default=None, alias="DetailedError")


def parse_cloud_api_error(body: Any) -> CloudAPIErrorResponse | None:
    """Return the structured error carried by ``body``, if it has that shape."""
    if not isinstance(body, dict):
        return None
    try:
        return CloudAPIErrorResponse.model_validate(body)
    except ValidationError:
        return None


def is_cloud_api_error_response(body: Any) -> bool:
    return parse_cloud_api_error(body) is not None


def _response_body(error: BaseException) -> Any:
    response = getattr(error, "response", None)
    if not isinstance(response, httpx.Response):
        return None
    try:
        return response.json()
    except ValueError:
        return None


class ErrorClassifier:
    """Reports a failed operation under an operation-specific label."""

    def __init__(self, console: ConsoleLike | None = None) -> None:
        self._console = coalesce_console(console)

    def classify(self, error: BaseException) -> CloudAPIErrorResponse | None:
        return parse_cloud_api_error(_response_body(error))

    def report(self, label: str, error: BaseException) -> None:
        api_error = self.classify(error)
        if api_error is None:
            logger.debug(f"{label}: unstructured failure {type(error).__name__}")
            self._console.error(f"{label}: {error}")
            return

        logger.debug(
            f"{label}: control plane returned {api_error.status_code} "
            f"(request {api_error.request_id})"
        )
        self._console.error(f"[{api_error.request_id}] {label}: {api_error.message}.")
        if api_error.detailed_error:
            self._console.error(api_error.detailed_error)
