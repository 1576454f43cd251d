"""
Routes d'administration: échange du mot de passe contre un jeton et statistiques.
"""

from fastapi import APIRouter

from monde_delice.api.deps import admin_dep, container_dep
from monde_delice.api.schemas import AdminLoginPayload, dump, ok
from monde_delice.core.container import Container
from monde_delice.domain.entities import AdminClaims
from monde_delice.domain.errors import ValidationError

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/validate")
def validate_admin(p: AdminLoginPayload, container: Container = container_dep):
    """Vérifie le mot de passe admin et retourne un jeton signé (24 h par défaut)."""
    if not p.password:
        raise ValidationError(
            [{"field": "password", "message": "Mot de passe requis"}],
            message="Mot de passe requis",
        )
    credential = container.auth.validate(p.password)
    return ok(dump(credential), message="Authentification réussie")


@router.get("/stats")
def admin_stats(_: AdminClaims = admin_dep, container: Container = container_dep):
    return ok(dump(container.stats.stats()))
