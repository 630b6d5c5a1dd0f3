from typing import Dict, List, Optional, Union

import aiohttp
import pytest

from redditgrab.utils.session import GlobalSession


class FakeContent:
    def __init__(self, body: bytes, fail_after: Optional[int] = None):
        self._body = body
        self._pos = 0
        self._reads = 0
        self._fail_after = fail_after

    async def read(self, n: int = -1) -> bytes:
        if self._fail_after is not None and self._reads >= self._fail_after:
            raise aiohttp.ClientPayloadError("connection reset mid-body")
        self._reads += 1
        if n < 0:
            n = len(self._body)
        chunk = self._body[self._pos:self._pos + n]
        self._pos += len(chunk)
        return chunk


class FakeResponse:
    def __init__(self, status: int = 200, body: bytes = b"", json_data=None, fail_after: Optional[int] = None):
        self.status = status
        self.content = FakeContent(body, fail_after=fail_after)
        self._json = json_data

    async def json(self, **kwargs):
        if isinstance(self._json, Exception):
            raise self._json
        return self._json

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


Route = Union[FakeResponse, Exception]


class FakeSession:
    """Minimal stand-in for aiohttp.ClientSession keyed by exact URL."""

    def __init__(self, routes: Optional[Dict[str, Route]] = None):
        self.routes = dict(routes or {})
        self.requested: List[str] = []
        self.closed = False
        self.timeouts: List[Optional[float]] = []

    def get(self, url, **kwargs):
        self.requested.append(url)
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(status=404)
        if isinstance(route, Exception):
            raise route
        return route

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_session(monkeypatch):
    session = FakeSession()

    async def _get(timeout=None):
        session.timeouts.append(timeout)
        return session

    async def _close():
        session.closed = True

    monkeypatch.setattr(GlobalSession, "get", staticmethod(_get))
    monkeypatch.setattr(GlobalSession, "close", staticmethod(_close))
    return session


@pytest.fixture
def response():
    """Factory for fake responses: response(status=200, body=b"...", json_data=...)."""
    return FakeResponse
