from __future__ import annotations

import time

import httpx
import pytest

BASE_URL = "https://example.com/api/v0.1/"
OAUTH_URL = "https://isso.example.com/"
TOKEN_URL = f"{OAUTH_URL}oauth/token"


class FakeHttp:
    """Stands in for the network behind httpx.Client.request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], object] = {}
        self.calls: list[dict] = []

    def stub(self, method: str, url: str, status: int = 200, text: str = "", delay_s: float = 0.0) -> None:
        self.routes[(method, url)] = (status, text, delay_s)

    def stub_error(self, method: str, url: str, exc: Exception) -> None:
        self.routes[(method, url)] = exc

    def calls_to(self, method: str, url: str) -> list[dict]:
        return [c for c in self.calls if c["method"] == method and c["url"] == url]

    def handle(self, method: str, url: str, kwargs: dict) -> httpx.Response:
        self.calls.append({"method": method, "url": url, **kwargs})
        route = self.routes.get((method, url))
        if route is None:
            raise AssertionError(f"unexpected request: {method} {url}")
        if isinstance(route, Exception):
            raise route
        status, text, delay_s = route
        if delay_s:
            time.sleep(delay_s)
        return httpx.Response(status, text=text)


@pytest.fixture(autouse=True)
def platform_env(monkeypatch) -> None:
    monkeypatch.setenv("PLATFORM_API_BASE_URL", BASE_URL)
    monkeypatch.setenv("NYPL_OAUTH_ID", "fake-client")
    monkeypatch.setenv("NYPL_OAUTH_SECRET", "fake-secret")
    monkeypatch.setenv("NYPL_OAUTH_URL", OAUTH_URL)
    monkeypatch.delenv("LOG_LEVEL", raising=False)


@pytest.fixture
def fake_http(monkeypatch) -> FakeHttp:
    fake = FakeHttp()
    fake.stub("POST", TOKEN_URL, 200, '{ "access_token": "fake-access-token" }')

    def _fake_request(self, method, url, **kwargs):
        return fake.handle(method, str(url), kwargs)

    monkeypatch.setattr(httpx.Client, "request", _fake_request)
    return fake
