"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import httpx
import pytest

from src.checks.catalog import default_checks
from src.checks.models import EndpointCheck

API_URL = "http://backend.test:8080"
FRONTEND_URL = "http://frontend.test:3000"

# A route is either a Response or an exception class raised as a transport failure.
Route = dict[str, Any] | type[Exception]


class FakeServices:
    """Scripted frontend/backend behind an httpx.MockTransport.

    Unrouted URLs behave like a refused connection.
    """

    def __init__(self, api: str = API_URL, frontend: str = FRONTEND_URL) -> None:
        self.api = api
        self.frontend = frontend
        self.routes: dict[str, Route] = {}
        self.requests: list[str] = []

    def route(self, url: str, status: int = 200, json: Any = None, text: str | None = None) -> None:
        if json is not None:
            self.routes[url] = {"status_code": status, "json": json}
        else:
            self.routes[url] = {"status_code": status, "text": text or ""}

    def fail(self, url: str, exc: type[Exception] = httpx.ConnectError) -> None:
        self.routes[url] = exc

    def healthy(self) -> None:
        """Every built-in check passes."""
        self.route(f"{self.frontend}/", text="<html></html>")
        self.route(f"{self.frontend}/health", json={"status": "ok"})
        self.route(f"{self.api}/health", json={"status": "ok"})
        self.route(f"{self.api}/api/db-check", json={"database": "connected"})
        self.route(f"{self.frontend}/api/health", json={"status": "ok"})

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        route = self.routes.get(url, httpx.ConnectError)
        if isinstance(route, dict):
            return httpx.Response(**route)
        if issubclass(route, httpx.RequestError):
            raise route(f"[Errno 111] Connection refused: {url}", request=request)
        raise route(url)


@pytest.fixture
def services() -> FakeServices:
    return FakeServices()


@pytest.fixture
def client(services: FakeServices) -> Generator[httpx.Client, None, None]:
    with httpx.Client(transport=httpx.MockTransport(services.handler)) as c:
        yield c


@pytest.fixture
def checks() -> list[EndpointCheck]:
    return default_checks(API_URL, FRONTEND_URL)


@pytest.fixture
def by_name() -> Callable[[Any], dict[str, Any]]:
    """Index a report's results by check name."""
    return lambda report: {r.name: r for r in report.results}


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Isolate settings from the developer's environment and .env file."""
    for var in ("API_URL", "FRONTEND_URL", "CHECK_TIMEOUT_MS", "CHECKS_FILE", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
