"""Tests de la porte d'authentification admin et de `POST /admin/validate`."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from monde_delice.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_OK,
    HTTP_UNAUTHORIZED,
)
from monde_delice.domain.auth import AdminAuthGate, hash_password
from monde_delice.domain.errors import AuthError
from tests.fakes import TEST_ADMIN_PASSWORD, TEST_JWT_SECRET

ONE_DAY_S = 24 * 60 * 60


def _gate(**kwargs) -> AdminAuthGate:
    return AdminAuthGate(password=TEST_ADMIN_PASSWORD, secret=TEST_JWT_SECRET, **kwargs)


def test_validate_issues_admin_token() -> None:
    gate = _gate()
    credential = gate.validate(TEST_ADMIN_PASSWORD)
    assert credential.expires_in == ONE_DAY_S
    claims = gate.verify(credential.token)
    assert claims is not None
    assert claims.admin is True
    assert claims.exp - claims.iat == ONE_DAY_S


def test_validate_rejects_wrong_password() -> None:
    with pytest.raises(AuthError) as exc:
        _gate().validate("mauvais")
    assert exc.value.message == "Mot de passe incorrect"


def test_verify_returns_none_after_expiry() -> None:
    """Un jeton émis il y a plus de 24 h n'est plus valide."""
    issued_at = datetime.now(UTC) - timedelta(hours=25)
    stale = _gate(clock=lambda: issued_at).validate(TEST_ADMIN_PASSWORD)
    assert _gate().verify(stale.token) is None


@pytest.mark.parametrize("token", [None, "", "pas-un-jeton"])
def test_verify_returns_none_for_missing_or_garbage(token) -> None:
    assert _gate().verify(token) is None


def test_verify_rejects_foreign_signature() -> None:
    other = AdminAuthGate(password=TEST_ADMIN_PASSWORD, secret="autre-secret")
    token = other.validate(TEST_ADMIN_PASSWORD).token
    assert _gate().verify(token) is None


def test_verify_rejects_non_admin_or_incomplete_claims() -> None:
    now = int(datetime.now(UTC).timestamp())
    not_admin = jwt.encode(
        {"admin": False, "iat": now, "exp": now + 60}, TEST_JWT_SECRET, algorithm="HS256"
    )
    no_exp = jwt.encode({"admin": True, "iat": now}, TEST_JWT_SECRET, algorithm="HS256")
    assert _gate().verify(not_admin) is None
    assert _gate().verify(no_exp) is None


def test_password_hash_takes_precedence() -> None:
    gate = AdminAuthGate(
        password="ignoré", secret=TEST_JWT_SECRET, password_hash=hash_password("haché")
    )
    assert gate.verify(gate.validate("haché").token) is not None
    with pytest.raises(AuthError):
        gate.validate("ignoré")


def test_validate_endpoint(client) -> None:
    r = client.post("/admin/validate", json={"password": TEST_ADMIN_PASSWORD})
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Authentification réussie"
    assert body["data"]["expiresIn"] == ONE_DAY_S
    assert body["data"]["token"]


def test_validate_endpoint_errors(client) -> None:
    r = client.post("/admin/validate", json={"password": "mauvais"})
    assert r.status_code == HTTP_UNAUTHORIZED
    assert r.json() == {"success": False, "message": "Mot de passe incorrect"}

    r = client.post("/admin/validate", json={})
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json()["message"] == "Mot de passe requis"


def test_gated_route_rejects_bad_credentials(client) -> None:
    for headers in ({}, {"Authorization": "Bearer faux"}, {"Authorization": "Basic abc"}):
        r = client.get("/admin/stats", headers=headers)
        assert r.status_code == HTTP_UNAUTHORIZED
        assert r.json() == {"success": False, "message": "Non autorisé"}
        assert r.headers["WWW-Authenticate"] == "Bearer"
