"""
Taxonomie des erreurs métier.

Les services lèvent ces exceptions; la couche API les traduit en réponses HTTP
(voir `monde_delice.api.errors`).
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError


class MondeDeliceError(Exception):
    """Erreur de base du domaine."""

    default_message = "Erreur serveur"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MondeDeliceError):
    """Données invalides; `errors` énumère chaque champ en violation."""

    default_message = "Données invalides"

    def __init__(
        self, errors: list[dict[str, str]], message: str | None = None
    ) -> None:
        super().__init__(message)
        self.errors = errors

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> ValidationError:
        """Construit l'erreur à partir d'une erreur de validation pydantic."""
        return cls(pydantic_errors(exc.errors()))


class AuthError(MondeDeliceError):
    """Identifiant admin absent, invalide ou expiré (message volontairement générique)."""

    default_message = "Non autorisé"


class NotFoundError(MondeDeliceError):
    default_message = "Ressource non trouvée"


class ConflictError(MondeDeliceError):
    """Violation d'unicité (like en double, slug déjà pris)."""

    default_message = "Conflit"


class UpstreamError(MondeDeliceError):
    """Stockage distant ou base de données injoignable."""

    default_message = "Service de stockage indisponible"


def pydantic_errors(
    raw: list[Any], skip_prefix: tuple[str, ...] = ()
) -> list[dict[str, str]]:
    """Aplatit les erreurs pydantic en `[{field, message}]`."""
    out: list[dict[str, str]] = []
    for err in raw:
        loc = [str(p) for p in err.get("loc", ()) if str(p) not in skip_prefix]
        out.append({"field": ".".join(loc) or "__root__", "message": err.get("msg", "")})
    return out
