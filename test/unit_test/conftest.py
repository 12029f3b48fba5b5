"""Shared fixtures for unit tests.

External services are replaced by ``FakeUpstream`` instances: an
``httpx.MockTransport`` handler with canned answers per method and path that
records every request it receives.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

Answer = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """Canned HTTP answers keyed by ``(method, path)``; unknown routes answer 404."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Answer] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json_body: Optional[Any] = None,
        text: Optional[str] = None,
    ) -> None:
        """Answer every ``method path`` request with a fresh response built from these values."""

        def _answer(_request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json_body if json_body is not None else {})

        self.routes[(method, path)] = _answer

    def add_handler(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method, path)] = handler

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.routes.get((request.method, request.url.path))
        if answer is None:
            return httpx.Response(404, json={"error": {"type": "not_found"}})
        return answer(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content or b"null")


@pytest.fixture
def mux_api() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def loops_api() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def storage_api() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def auth_users() -> Dict[str, Dict[str, Any]]:
    """Users known to the fake auth provider, keyed by access token."""
    return {}


@pytest.fixture
def auth_api(auth_users: Dict[str, Dict[str, Any]]) -> FakeUpstream:
    upstream = FakeUpstream()

    def _user(request: httpx.Request) -> httpx.Response:
        scheme, _, token = request.headers.get("authorization", "").partition(" ")
        user = auth_users.get(token) if scheme == "Bearer" else None
        if user is None:
            return httpx.Response(401, json={"msg": "invalid JWT"})
        return httpx.Response(200, json=user)

    upstream.add_handler("GET", "/auth/v1/user", _user)
    return upstream
