"""
Exposition de métriques Prometheus et middleware de mesure.

Fournit `/metrics`, les compteurs métier (likes, uploads) et un middleware
mesurant le volume et la latence des requêtes HTTP par route.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter(tags=["metrics"])

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

LIKE_TRANSITIONS = Counter(
    "blog_like_transitions_total",
    "Like state transitions (liked, unliked, race_lost)",
    ["result"],
)
IMAGE_UPLOADS = Counter(
    "image_uploads_total",
    "Image upload outcomes (stored, rejected, storage_error)",
    ["result"],
)


def route_label(request: Request) -> str:
    """Gabarit de route (`/blogs/{blog_id}`) pour borner la cardinalité des labels."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


@metrics_router.get("/metrics")
def metrics():
    """Expose les métriques Prometheus au format texte."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Compte les requêtes et mesure leur latence par gabarit de route."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        route = route_label(request)
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - start)
        return response
