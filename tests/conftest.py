import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.services.quote_fetcher import QuoteFetcher

API_KEY = "test-key-123"

IBM_PAYLOAD = {
    "Meta Data": {
        "1. Information": "Intraday (5min) open, high, low, close prices and volume",
        "2. Symbol": "IBM",
        "4. Interval": "5min",
    },
    "Time Series (5min)": {
        "2024-01-05 19:55:00": {"1. open": "159.9500", "4. close": "159.9800", "5. volume": "3201"},
    },
}


class Upstream:
    """Provedor falso: registra as requisições e responde com o handler configurado."""

    def __init__(self, handler=None):
        self.requests = []
        self.handler = handler or (lambda request: httpx.Response(200, json=IBM_PAYLOAD))

    async def __call__(self, request: httpx.Request):
        self.requests.append(request)
        response = self.handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    @property
    def symbols(self):
        return [r.url.params.get("symbol") for r in self.requests]


@pytest.fixture
def settings():
    return Settings(api_key=API_KEY, upstream_timeout=1.0)


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
def fetcher(settings, upstream):
    return QuoteFetcher(settings, transport=httpx.MockTransport(upstream))


@pytest.fixture
def app(settings, fetcher):
    return create_app(settings, fetcher)


@pytest.fixture
def client(app):
    return TestClient(app)
