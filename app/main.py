from fastapi import FastAPI, Query, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, HTMLResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Optional
import logging
import sys

import uvicorn

from app import middleware
from app.config import Settings
from app.models.quote import (
    FETCH_FAILED, SYMBOL_INVALID, SYMBOL_REQUIRED, ErrorResponse, QuoteRequest
)
from app.services.quote_fetcher import QuoteFetcher, QuoteFetchError

settings = Settings.from_env()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)s | quote-relay | %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger("quote-relay")
# httpx/httpcore logam a URL completa, com a apikey na query
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

# ---------- HOME HTML embutido (sem templates) ----------
HOME_HTML = """<!doctype html>
<html lang="pt-br"><head>
<meta charset="utf-8"/><meta name="viewport" content="width=device-width,initial-scale=1"/>
<title>Quote Relay</title>
<style>
body{margin:0;background:#10141c;color:#dde4f0;font-family:system-ui,Arial}
main{max-width:760px;margin:32px auto;padding:0 16px}
.sub{color:#8a9ab5}
form{display:flex;gap:8px}
input{flex:1;padding:10px;border-radius:8px;border:1px solid #2a3446;background:#161c28;color:inherit}
button{padding:10px 16px;border-radius:8px;border:0;background:#3d8bfd;color:#fff;cursor:pointer}
pre{white-space:pre-wrap;background:#161c28;padding:12px;border-radius:8px;max-height:480px;overflow:auto}
a{color:#3d8bfd}
</style></head>
<body>
<main>
  <h1>Quote Relay</h1>
  <p class="sub">Bem-vindo! Cotações intraday (5min) direto do provedor, sem transformação.</p>
  <form onsubmit="go(); return false;">
    <input id="q" placeholder="Ex.: IBM, AAPL, MSFT" value="IBM"/>
    <button id="btn">Buscar</button>
  </form>
  <pre id="out">{ "dica": "o retorno de /api/data aparece aqui" }</pre>
  <p><small>Endpoint: <a href="/api/data?symbol=IBM">/api/data?symbol=IBM</a></small></p>
</main>
<script>
async function go(){
  const q=document.getElementById('q').value.trim(); if(!q) return;
  const btn=document.getElementById('btn'); btn.disabled=true;
  try{
    const r = await fetch('/api/data?symbol='+encodeURIComponent(q));
    document.getElementById('out').textContent = JSON.stringify(await r.json(), null, 2);
  }catch(e){ document.getElementById('out').textContent = JSON.stringify({erro:String(e)}, null, 2); }
  finally{ btn.disabled=false; }
}
</script>
</body></html>"""

NOT_FOUND_HTML = "<h1>404 Not Found</h1><p>The page you requested could not be found.</p>"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(ErrorResponse(error=message).model_dump(), status_code=status_code)


def create_app(cfg: Optional[Settings] = None, fetcher: Optional[QuoteFetcher] = None) -> FastAPI:
    cfg = cfg or settings
    app = FastAPI(title="Quote Relay", version="1.0", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = cfg
    app.state.fetcher = fetcher or QuoteFetcher(cfg)

    middleware.install(app)

    # 404 (e 405: só existem rotas GET) -> página HTML simples
    @app.exception_handler(StarletteHTTPException)
    async def not_found(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return HTMLResponse(NOT_FOUND_HTML, status_code=404)
        return await http_exception_handler(request, exc)

    # ---------- Rotas ----------
    @app.get("/", response_class=HTMLResponse)
    def home():
        return HTMLResponse(HOME_HTML)

    @app.get("/api/data")
    async def api_data(request: Request, symbol: Optional[str] = Query(None, description="Ticker ex: IBM, AAPL")):
        if symbol is None or not symbol.strip():
            return _error(400, SYMBOL_REQUIRED)
        try:
            req = QuoteRequest(symbol=symbol)
        except ValidationError:
            return _error(400, SYMBOL_INVALID)

        try:
            data = await request.app.state.fetcher.fetch_quote(req.symbol)
        except QuoteFetchError as e:
            log.warning("falha ao buscar %s: %s", req.symbol, e)
            return _error(500, FETCH_FAILED)
        return JSONResponse(data)

    return app


app = create_app()


def main() -> None:
    base = f"http://localhost:{settings.port}"
    log.info("Quote relay rodando em %s/", base)
    log.info("Experimente:")
    log.info("- %s/api/data?symbol=IBM", base)
    if not settings.api_key:
        log.warning("ALPHA_VANTAGE_API_KEY não definida; o provedor deve recusar as consultas")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
