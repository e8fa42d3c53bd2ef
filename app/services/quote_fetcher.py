import json
import logging
from typing import Any, Dict, Optional

import httpx

from app.config import Settings

log = logging.getLogger("quote-relay")

# =========================
# Upstream (Alpha Vantage)
# =========================
ALPHA_VANTAGE_URL = "https://www.alphavantage.co/query"
FUNCTION = "TIME_SERIES_INTRADAY"
INTERVAL = "5min"

HTTP_HEADERS = {
    "User-Agent": "quote-relay/1.0",
    "Accept": "application/json, text/plain, */*",
}


def _reject_constant(name: str):
    # NaN/Infinity não são JSON válido e não podem ser reenviados ao cliente
    raise ValueError(f"invalid JSON constant: {name}")


class QuoteFetchError(RuntimeError):
    """Falha ao obter a cotação no provedor (rede, status != 200 ou corpo inválido)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class QuoteFetcher:
    """
    Uma chamada GET por invocação, sem retry e sem cache.
    O payload do provedor é devolvido como veio (opaco).
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    def _params(self, symbol: str) -> Dict[str, str]:
        return {
            "function": FUNCTION,
            "symbol": symbol,
            "interval": INTERVAL,
            "apikey": self.settings.api_key,
        }

    def build_url(self, symbol: str) -> str:
        return str(httpx.URL(ALPHA_VANTAGE_URL, params=self._params(symbol)))

    def _redact(self, text: str) -> str:
        # a chave nunca pode ir para o log
        if self.settings.api_key:
            text = text.replace(self.settings.api_key, "[REDACTED]")
        return text

    async def fetch_quote(self, symbol: str) -> Any:
        log.debug("GET %s", self._redact(self.build_url(symbol)))
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.upstream_timeout,
                headers=HTTP_HEADERS,
                transport=self.transport,
            ) as client:
                r = await client.get(ALPHA_VANTAGE_URL, params=self._params(symbol))
        except httpx.TimeoutException as e:
            raise QuoteFetchError(self._redact(f"upstream timeout: {type(e).__name__}")) from e
        except httpx.HTTPError as e:
            raise QuoteFetchError(self._redact(f"upstream transport error: {type(e).__name__}: {e}")) from e

        if r.status_code != 200:
            raise QuoteFetchError(f"upstream returned HTTP {r.status_code}", status_code=r.status_code)
        try:
            return json.loads(r.content, parse_constant=_reject_constant)
        except ValueError as e:
            raise QuoteFetchError("upstream returned a non-JSON body", status_code=r.status_code) from e
