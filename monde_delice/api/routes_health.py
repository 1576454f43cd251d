"""
Endpoint de santé pour vérifier la disponibilité de l'API et de la base.

Expose `/health`: 200 si la base répond, 503 sinon.
"""

from datetime import UTC, datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from monde_delice.api.deps import container_dep
from monde_delice.core.container import Container
from monde_delice.core.http_constants import HTTP_OK, HTTP_SERVICE_UNAVAILABLE

router = APIRouter(tags=["health"])


@router.get("/health")
def health(container: Container = container_dep):
    """Vérifie la disponibilité de l'API, de la base et du stockage d'images."""
    settings = container.settings
    db_ok = container.ping_database()
    body = {
        "success": db_ok,
        "message": "API Monde Délice est en ligne"
        if db_ok
        else "API Monde Délice - Problème de connexion",
        "timestamp": datetime.now(UTC).isoformat(),
        "version": settings.APP_VERSION,
        "environment": settings.APP_ENV,
        "database": "connected" if db_ok else "disconnected",
        "storage": container.storage.name,
        "storageReachable": container.storage.ping(),
    }
    return JSONResponse(
        status_code=HTTP_OK if db_ok else HTTP_SERVICE_UNAVAILABLE, content=body
    )
