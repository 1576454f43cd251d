"""
Module d'authentification admin.

Un seul secret partagé (mot de passe admin), pas de comptes utilisateurs.
`validate` échange le mot de passe contre un jeton JWT signé portant la
revendication `admin: true`; `verify` contrôle signature et expiration et ne
renvoie jamais de revendications partielles.
"""

from __future__ import annotations

import hmac
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt
import structlog
from jwt import InvalidTokenError
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from monde_delice.domain.entities import AdminClaims, AdminCredential
from monde_delice.domain.errors import AuthError

log = structlog.get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

INVALID_PASSWORD_MESSAGE = "Mot de passe incorrect"


def hash_password(p: str) -> str:
    """Hache un mot de passe en utilisant PBKDF2."""
    return pwd_context.hash(p)


class AdminAuthGate:
    """Émet et vérifie les jetons admin à partir d'un secret injecté."""

    def __init__(
        self,
        password: str,
        secret: str,
        alg: str = "HS256",
        expires_min: int = 24 * 60,
        password_hash: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialise la porte d'authentification.

        Paramètres:
        - password: secret partagé en clair (ignoré si `password_hash` est fourni).
        - secret: clé de signature des jetons.
        - password_hash: hash passlib du secret, prioritaire sur `password`.
        - clock: horloge injectable (tests d'expiration).
        """
        self._password = password
        self._password_hash = password_hash
        self._secret = secret
        self._alg = alg
        self.expires_in = timedelta(minutes=expires_min)
        self._clock = clock or (lambda: datetime.now(UTC))

    def _password_matches(self, password: str) -> bool:
        if self._password_hash:
            try:
                return pwd_context.verify(password, self._password_hash)
            except ValueError:
                log.error("admin_password_hash_invalid")
                return False
        if not self._password:
            return False
        return hmac.compare_digest(password.encode("utf-8"), self._password.encode("utf-8"))

    def validate(self, password: str) -> AdminCredential:
        """Vérifie le mot de passe et émet un jeton admin valable `expires_in`."""
        if not self._password_matches(password):
            log.warning("admin_login_failed")
            raise AuthError(INVALID_PASSWORD_MESSAGE)
        now = self._clock()
        payload = {
            "admin": True,
            "iat": int(now.timestamp()),
            "exp": int((now + self.expires_in).timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self._alg)
        log.info("admin_login_succeeded")
        return AdminCredential(
            token=token, expires_in=int(self.expires_in.total_seconds())
        )

    def verify(self, token: str | None) -> AdminClaims | None:
        """Décode et valide un jeton; None si absent, falsifié, expiré ou non admin."""
        if not token:
            return None
        try:
            data = jwt.decode(
                token,
                self._secret,
                algorithms=[self._alg],
                options={"require": ["exp", "iat"]},
            )
            claims = AdminClaims(**data)
        except (InvalidTokenError, PydanticValidationError, TypeError):
            return None
        if claims.admin is not True:
            return None
        return claims
