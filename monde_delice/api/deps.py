"""Dépendances partagées pour les routes de l'API.

But du module
-------------
- Donner accès au conteneur de l'application (`app.state.container`).
- Exiger un jeton admin valide (`Authorization: Bearer <jeton>`).
- Résoudre l'identité (IP) du demandeur pour le moteur de likes.
"""

from fastapi import Depends, Header, Request

from monde_delice.core.container import Container
from monde_delice.core.http_constants import BEARER_PREFIX, LOOPBACK_IP
from monde_delice.domain.entities import AdminClaims
from monde_delice.domain.errors import AuthError

MAX_IDENTITY_LEN = 64


def get_container(request: Request) -> Container:
    """Retourne le conteneur attaché à l'application."""
    return request.app.state.container


container_dep = Depends(get_container)


def bearer_token(authorization: str | None) -> str | None:
    """Extrait le jeton d'un en-tête `Bearer`, None si absent ou mal formé."""
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):].strip() or None


def require_admin(
    authorization: str | None = Header(None),
    container: Container = container_dep,
) -> AdminClaims:
    """Valide le jeton admin; toute défaillance donne la même AuthError."""
    claims = container.auth.verify(bearer_token(authorization))
    if claims is None:
        raise AuthError()
    return claims


def client_identity(request: Request) -> str:
    """Identité de like: X-Forwarded-For, puis X-Real-IP, puis pair direct, puis loopback.

    Clé de déduplication au mieux, falsifiable: pas une frontière de sécurité.
    """
    forwarded = request.headers.get("x-forwarded-for", "")
    candidate = forwarded.split(",")[0].strip()
    if not candidate:
        candidate = request.headers.get("x-real-ip", "").strip()
    if not candidate and request.client and request.client.host:
        candidate = request.client.host
    return (candidate or LOOPBACK_IP)[:MAX_IDENTITY_LEN]


admin_dep = Depends(require_admin)
