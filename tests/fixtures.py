"""Shared fixtures for the cloud client tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from dbos_cloud.infra.cloud import (
    CloudCredentials,
    DatabaseAdminClient,
    StaticCredentialProvider,
)

HOST = "cloud.example.test"
ORGANIZATION = "acme"
TOKEN = "tok-123"
BASE_URL = f"https://{HOST}/v1alpha1/{ORGANIZATION}/databases"


def instance_payload(
    name: str = "orders", status: str = "available", **overrides: object
) -> dict[str, object]:
    """Build an instance record as returned by the control plane."""
    payload: dict[str, object] = {
        "PostgresInstanceName": name,
        "Status": status,
        "HostName": f"{name}.db.example.test",
        "Port": 5432,
        "DatabaseUsername": "admin",
    }
    payload.update(overrides)
    return payload


class RecordingTransport(httpx.MockTransport):
    """Mock transport that replays queued responses and records requests.

    Queued exceptions are raised instead of returning a response.
    """

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


__all__ = [
    "BASE_URL",
    "HOST",
    "ORGANIZATION",
    "TOKEN",
    "RecordingTransport",
    "instance_payload",
    "mock_console",
    "credentials",
    "mock_sleep",
    "make_client",
]


@pytest.fixture
def mock_console() -> Mock:
    """Console double recording every message and payload line."""
    return Mock()


@pytest.fixture
def credentials() -> StaticCredentialProvider:
    return StaticCredentialProvider(
        CloudCredentials(token=TOKEN, organization=ORGANIZATION, user_name="alice")
    )


@pytest.fixture
def mock_sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def make_client(mock_console, credentials, mock_sleep):
    """Factory building a client around a RecordingTransport."""

    def _make(transport: RecordingTransport, **kwargs: object) -> DatabaseAdminClient:
        kwargs.setdefault("credentials", credentials)
        return DatabaseAdminClient(
            console=mock_console,
            transport=transport,
            sleep=mock_sleep,
            **kwargs,
        )

    return _make
