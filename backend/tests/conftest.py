from __future__ import annotations

import os
from typing import Any

import httpx
import pytest
from fastapi import Depends

os.environ.setdefault("DDM_BASE_URL", "http://ddm.test/web/api/masking")

BASE_URL = "http://ddm.test/web/api/masking"
BASE_PATH = "/web/api/masking"


class FakeBackend:
    """Stand-in for the DDM REST API, answering from a route table."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []

    def reply(self, method: str, path: str, json: Any = None, status_code: int = 200) -> None:
        self.routes[(method, path)] = (status_code, json)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(BASE_PATH)
        status_code, payload = self.routes.get(
            (request.method, path),
            (404, {"success": False, "error": f"No route for {request.method} {path}"}),
        )
        return httpx.Response(status_code, json=payload)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def ddm_client(backend: FakeBackend):
    from ddm_api.client import DDMClient
    return DDMClient(base_url=BASE_URL, transport=httpx.MockTransport(backend))


@pytest.fixture
def console(backend: FakeBackend):
    """An httpx client for the console app, wired to the fake backend."""
    from api.dependencies import get_credentials, get_ddm_client
    from ddm_api.client import DDMClient
    from main import app

    def _client(credentials=Depends(get_credentials)) -> DDMClient:
        return DDMClient(
            base_url=BASE_URL,
            credentials=credentials,
            transport=httpx.MockTransport(backend),
        )

    app.dependency_overrides[get_ddm_client] = _client
    yield httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")
    app.dependency_overrides.clear()


@pytest.fixture
def sample_summaries() -> dict[str, str]:
    """Summary strings in the shapes the backend has been seen to produce."""
    return {
        "mask_first": "mask: D:, auth tag: #DDM_See_PII",
        "tag_first": "auth tag: #DDM_See_PII, mask: L:MASKED",
        "verbose": "Mask Value: N:; Auth Tag: #DDM_See_Contact",
        "free_text": "some unrelated text with P:0,X,4 embedded and #DDM_See_Sensitive present",
        "nothing": "no recognizable tokens here",
    }
