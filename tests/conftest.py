"""Shared fixtures: isolated settings, temp SQLite database, stubbed upstream."""

import json
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from cotacao.core.config import Settings
from cotacao.db.dal import Database
from cotacao.main import create_app
from cotacao.routers import quotes
from cotacao.services.http_client import UpstreamClient

UPSTREAM_URL = "https://quotes.test/json/last/USD-BRL"

SAMPLE_PAYLOAD = {
    "USDBRL": {
        "code": "USD",
        "codein": "BRL",
        "name": "Dólar Americano/Real Brasileiro",
        "high": "6.2012",
        "low": "6.0985",
        "varBid": "-0.0695",
        "pctChange": "-1.12",
        "bid": "6.1098",
        "ask": "6.1108",
        "timestamp": "1736197196",
        "create_date": "2025-01-06 17:59:56",
    }
}


@pytest.fixture
def settings(tmp_path) -> Settings:
    # Generous store deadline so inserts land before assertions read the table.
    return Settings(
        db_path=tmp_path / "database.db",
        upstream_url=UPSTREAM_URL,
        store_timeout_ms=2000,
        debug=False,
    )


@pytest.fixture
def db(settings) -> Database:
    database = Database.from_settings(settings)
    database.init_schema()
    yield database
    database.dispose()


@pytest.fixture
def upstream_calls() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_client(settings, upstream_calls):
    """Build a TestClient whose upstream answers through ``handler``."""
    apps = []

    def _make(handler: Callable, app_settings: Settings | None = None) -> TestClient:
        def recording(request: httpx.Request):
            upstream_calls.append(request)
            return handler(request)

        app = create_app(settings_override=app_settings or settings)
        upstream = UpstreamClient(
            UPSTREAM_URL, httpx.AsyncClient(transport=httpx.MockTransport(recording))
        )
        app.dependency_overrides[quotes.get_upstream_client] = lambda: upstream
        apps.append(app)
        return TestClient(app)

    yield _make
    for app in apps:
        app.state.db.dispose()


def json_response(payload, status_code: int = 200) -> Callable:
    body = json.dumps(payload).encode("utf-8")
    return lambda request: httpx.Response(status_code, content=body)
