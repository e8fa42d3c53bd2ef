import json
import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.models.quote import MALFORMED_BODY, ErrorResponse

log = logging.getLogger("quote-relay")


def _is_json(request: Request) -> bool:
    ctype = request.headers.get("content-type", "").split(";")[0].strip().lower()
    return ctype == "application/json" or ctype.endswith("+json")


def install(app: FastAPI) -> None:
    """
    Registra os middlewares na ordem de execução:
      1) log da requisição (sempre segue adiante)
      2) parse do corpo JSON (400 se malformado, antes de qualquer rota)
    No Starlette o último registrado é o mais externo, por isso o log vem por último.
    """

    @app.middleware("http")
    async def parse_json_body(request: Request, call_next):
        request.state.json_body = None
        if _is_json(request):
            raw = await request.body()
            if raw.strip():
                try:
                    request.state.json_body = json.loads(raw)
                except ValueError:
                    return JSONResponse(ErrorResponse(error=MALFORMED_BODY).model_dump(), status_code=400)
        return await call_next(request)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        log.info("%s %s", request.method, path)
        t0 = time.perf_counter()
        response = await call_next(request)
        log.debug("%s %s -> %s (%.1f ms)", request.method, path, response.status_code,
                  (time.perf_counter() - t0) * 1000.0)
        return response
