"""
Shared fixtures for edge processor tests.
"""

import json
from typing import Any, Optional

import pytest


class FakeResponse:
    """Minimal stand-in for an aiohttp response."""

    def __init__(self, status: int = 200, body: bytes = b"{}"):
        self.status = status
        self._body = body

    async def read(self) -> bytes:
        return self._body


class FakeRequest:
    """Async context manager returned by FakeSession.get()."""

    def __init__(self, response: Optional[FakeResponse], error: Optional[BaseException]):
        self._response = response
        self._error = error

    async def __aenter__(self) -> FakeResponse:
        if self._error is not None:
            raise self._error
        return self._response

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class FakeSession:
    """Records GET calls and answers with a canned response or error."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[BaseException] = None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, **kwargs) -> FakeRequest:
        self.calls.append({"url": url, **kwargs})
        return FakeRequest(self.response, self.error)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def metadata_payload():
    """Metadata document as served by the endpoint."""
    return {
        "id": "42",
        "cycle": "c-1001",
        "device_config": "dc-7",
        "grind_cycle": "G1",
        "steam_cycle": "S3",
        "waste_type": "organic",
        "type": "autoclave",
        "start_time": "2024-05-01T10:00:00Z",
        "end_time": "2024-05-01T11:00:00Z",
        "completed": "true",
        "successful": "false",
    }


@pytest.fixture
def make_session():
    """Build a FakeSession serving a JSON payload or raw body."""

    def _make(payload: Any = None, status: int = 200, body: Optional[bytes] = None, error=None):
        if body is None:
            body = json.dumps(payload if payload is not None else {}).encode()
        return FakeSession(FakeResponse(status, body), error)

    return _make
