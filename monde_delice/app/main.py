"""
Application principale FastAPI.

Ce module assemble les composants de l'API Monde Délice : conteneur,
middlewares, gestionnaires d'erreurs, routes et métriques.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI à partir d'un conteneur (injectable en test)
- Ajouter les middlewares (request id, timing, délai maximal, métriques, CORS)
- Monter les routers et, en stockage local, le répertoire des uploads
- Fermer le stockage et le moteur SQL à l'arrêt (lifespan)
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from monde_delice.api.errors import register_error_handlers
from monde_delice.api.routes_admin import router as admin_router
from monde_delice.api.routes_blogs import router as blogs_router
from monde_delice.api.routes_health import router as health_router
from monde_delice.api.routes_images import router as images_router
from monde_delice.api.routes_products import router as products_router
from monde_delice.app.metrics import PrometheusMiddleware, metrics_router
from monde_delice.core.container import Container
from monde_delice.core.logging import setup_logging
from monde_delice.infra.storage.local_storage import LocalImageStorage
from monde_delice.middlewares.request_id import RequestIDMiddleware
from monde_delice.middlewares.timing import TimeoutMiddleware, TimingMiddleware


def create_app(container: Container | None = None) -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Lit les paramètres via le conteneur (créé si non fourni)
    - Configure le logging structuré (structlog)
    - Ajoute les middlewares utiles au debug/traçabilité
    - Publie les routes produits, blogs/likes, admin, images, santé, métriques
    """
    container = container or Container()
    settings = container.settings
    setup_logging(settings.LOG_LEVEL, json=settings.LOG_JSON)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        container.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.APP_DEBUG,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(TimeoutMiddleware, timeout_s=settings.REQUEST_TIMEOUT_S)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(admin_router)
    app.include_router(products_router)
    app.include_router(blogs_router)
    app.include_router(images_router)
    app.include_router(metrics_router)

    if isinstance(container.storage, LocalImageStorage) and settings.UPLOAD_PUBLIC_URL.startswith("/"):
        app.mount(
            settings.UPLOAD_PUBLIC_URL.rstrip("/"),
            StaticFiles(directory=container.storage.directory),
            name="uploads",
        )
    return app


def run() -> None:
    """Point d'entrée console: sert l'application avec uvicorn."""
    import uvicorn  # noqa: PLC0415

    from monde_delice.core.settings import get_settings  # noqa: PLC0415

    settings = get_settings()
    uvicorn.run(
        "monde_delice.app.main:create_app",
        factory=True,
        host=settings.APP_HOST,
        port=settings.APP_PORT,
    )
