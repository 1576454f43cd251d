"""Middlewares Starlette de mesure du temps de traitement et de délai maximal.

- `TimingMiddleware` ajoute l'en-tête X-Process-Time-ms.
- `TimeoutMiddleware` borne la durée d'une requête à la frontière du transport
  et répond 504 au-delà.
"""

import asyncio
import time
from collections.abc import Callable

import structlog
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from monde_delice.core.http_constants import HTTP_GATEWAY_TIMEOUT

log = structlog.get_logger(__name__)


class TimingMiddleware(BaseHTTPMiddleware):
    """Mesure la durée de chaque requête et l'ajoute en en-tête de réponse."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Process-Time-ms") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request, call_next: Callable):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers[self.header_name] = str(duration_ms)
        return response


class TimeoutMiddleware(BaseHTTPMiddleware):
    """Interrompt l'attente d'une réponse après `timeout_s` secondes."""

    def __init__(self, app: ASGIApp, timeout_s: float = 30.0) -> None:
        super().__init__(app)
        self.timeout_s = timeout_s

    async def dispatch(self, request, call_next: Callable):
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout_s)
        except TimeoutError:
            log.warning("request_timeout", timeout_s=self.timeout_s)
            return JSONResponse(
                status_code=HTTP_GATEWAY_TIMEOUT,
                content={"success": False, "message": "Délai de traitement dépassé"},
            )
