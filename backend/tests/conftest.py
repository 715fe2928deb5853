import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient


# Ensure backend package is importable
backend_root = Path(__file__).resolve().parents[1]
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


class FakeAsyncClient:
    """Stand-in for httpx.AsyncClient; records calls and replays a canned outcome."""

    Response = FakeResponse
    calls = []
    outcome = None

    def __init__(self, *args, **kwargs):
        self.timeout = kwargs.get("timeout")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def post(self, url, json=None, headers=None):
        FakeAsyncClient.calls.append({"url": url, "json": json, "headers": headers, "timeout": self.timeout})
        if isinstance(FakeAsyncClient.outcome, Exception):
            raise FakeAsyncClient.outcome
        return FakeAsyncClient.outcome


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    for name in ("OPTIMIZER_BACKEND", "GITHUB_MODEL_ID", "LLM_TIMEOUT_SECONDS", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    # Avoid accidental usage of a real token during tests
    monkeypatch.setenv("GITHUB_MODELS_TOKEN", "test-token")


@pytest.fixture
def fake_http(monkeypatch):
    """Route every backend call through FakeAsyncClient.

    Set ``fake_http.outcome`` to a FakeResponse or an exception instance.
    """
    from resume_optimizer import backends

    FakeAsyncClient.calls = []
    FakeAsyncClient.outcome = FakeResponse(200, "{}")
    monkeypatch.setattr(backends.httpx, "AsyncClient", FakeAsyncClient)
    return FakeAsyncClient


@pytest.fixture
def client():
    from resume_optimizer.main import app

    return TestClient(app)
