"""Tests pour l'endpoint de santé de l'application."""

import asyncio
from unittest.mock import patch

import httpx
from fastapi.testclient import TestClient

from monde_delice.app.main import create_app
from monde_delice.core.container import Container
from monde_delice.core.http_constants import (
    HTTP_GATEWAY_TIMEOUT,
    HTTP_OK,
    HTTP_SERVICE_UNAVAILABLE,
)
from monde_delice.infra.storage.remote_storage import RemoteImageStorage


def test_health(client):
    """Teste que l'endpoint de santé retourne un statut OK avec la base connectée."""
    r = client.get("/health")
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["success"] is True
    assert body["database"] == "connected"
    assert body["version"] == "1.0.0"
    assert body["environment"] == "dev"
    assert body["storage"] == "local"
    assert body["storageReachable"] is True


def test_health_reports_database_down(client, container):
    """La base injoignable donne 503 et `database: disconnected`."""
    with patch.object(container, "ping_database", return_value=False):
        r = client.get("/health")
    assert r.status_code == HTTP_SERVICE_UNAVAILABLE
    body = r.json()
    assert body["success"] is False
    assert body["database"] == "disconnected"


def test_request_id_and_timing_headers(client):
    r = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert r.headers["X-Request-ID"] == "abc123"
    assert int(r.headers["X-Process-Time-ms"]) >= 0

    generated = client.get("/health").headers["X-Request-ID"]
    assert len(generated) == 32


def test_metrics_endpoint_exposes_counters(client):
    client.get("/health")
    r = client.get("/metrics")
    assert r.status_code == HTTP_OK
    assert "http_requests_total" in r.text
    assert 'route="/health"' in r.text


def test_slow_request_times_out(settings):
    """Au-delà de REQUEST_TIMEOUT_S, la requête est interrompue avec un 504."""
    settings.REQUEST_TIMEOUT_S = 0.2
    app = create_app(Container(settings))

    @app.get("/lent")
    async def lent():
        await asyncio.sleep(1)
        return {"success": True}

    r = TestClient(app).get("/lent")
    assert r.status_code == HTTP_GATEWAY_TIMEOUT
    assert r.json() == {"success": False, "message": "Délai de traitement dépassé"}


def test_shutdown_closes_remote_storage_client(settings):
    settings.UPLOAD_BACKEND = "remote"
    settings.UPLOAD_REMOTE_URL = "https://uploads.example.com/api/upload"
    container = Container(settings)
    assert isinstance(container.storage, RemoteImageStorage)

    with TestClient(create_app(container)) as c:
        assert c.get("/health").status_code == HTTP_OK
        assert not container.storage._client.is_closed
    assert container.storage._client.is_closed


def test_injected_storage_client_is_left_open():
    http = httpx.Client()
    storage = RemoteImageStorage("https://uploads.example.com/api/upload", client=http)
    storage.close()
    assert not http.is_closed
    http.close()
