"""Traduction des erreurs métier et HTTP en réponses à enveloppe standard.

Toutes les réponses d'erreur ont la forme `{success: false, message, errors?}`.
Les exceptions non prévues sont journalisées avec leur trace et renvoyées en
500 sans détail interne.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from monde_delice.api.schemas import fail
from monde_delice.core.http_constants import (
    HTTP_BAD_GATEWAY,
    HTTP_BAD_REQUEST,
    HTTP_CONFLICT,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_NOT_FOUND,
    HTTP_UNAUTHORIZED,
)
from monde_delice.domain.errors import (
    AuthError,
    ConflictError,
    MondeDeliceError,
    NotFoundError,
    UpstreamError,
    ValidationError,
    pydantic_errors,
)

log = structlog.get_logger(__name__)

_STATUS_BY_ERROR: dict[type[MondeDeliceError], int] = {
    ValidationError: HTTP_BAD_REQUEST,
    AuthError: HTTP_UNAUTHORIZED,
    NotFoundError: HTTP_NOT_FOUND,
    ConflictError: HTTP_CONFLICT,
    UpstreamError: HTTP_BAD_GATEWAY,
}


def status_for(exc: MondeDeliceError) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[cls]
    return HTTP_INTERNAL_SERVER_ERROR


async def handle_domain_error(request: Request, exc: MondeDeliceError) -> JSONResponse:
    """Erreurs du domaine -> statut HTTP correspondant."""
    status = status_for(exc)
    errors = exc.errors if isinstance(exc, ValidationError) else None
    log.info("domain_error", error=type(exc).__name__, status_code=status, error_message=exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(status_code=status, content=fail(exc.message, errors), headers=headers)


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Corps/paramètres invalides -> 400 avec la liste des champs en violation."""
    errors = pydantic_errors(exc.errors(), skip_prefix=("body", "query", "path"))
    return JSONResponse(
        status_code=HTTP_BAD_REQUEST, content=fail("Données invalides", errors)
    )


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """HTTPException (routes inconnues, méthodes refusées...) avec l'enveloppe standard."""
    return JSONResponse(
        status_code=exc.status_code,
        content=fail(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    """Toute autre exception: trace côté serveur, message générique côté client."""
    log.exception("unhandled_exception", error=type(exc).__name__)
    return JSONResponse(
        status_code=HTTP_INTERNAL_SERVER_ERROR, content=fail("Erreur serveur")
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MondeDeliceError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
