"""
Routes d'images: téléversement admin et enregistrement de métadonnées client.
"""

from fastapi import APIRouter, File, UploadFile
from starlette.concurrency import run_in_threadpool

from monde_delice.api.deps import admin_dep, container_dep
from monde_delice.api.schemas import ok
from monde_delice.core.container import Container
from monde_delice.domain.entities import AdminClaims, ImageRegistration
from monde_delice.domain.errors import ValidationError

router = APIRouter(prefix="/images", tags=["images"])


@router.post("/upload")
async def upload_image(
    image: UploadFile | None = File(None),
    _: AdminClaims = admin_dep,
    container: Container = container_dep,
):
    """Téléverse une image (champ multipart `image`), admin uniquement."""
    if image is None:
        raise ValidationError(
            [{"field": "image", "message": "Aucun fichier fourni"}],
            message="Aucun fichier fourni",
        )
    intake = container.images
    # un octet au-delà du plafond suffit à refuser le fichier
    data = await image.read(intake.max_bytes + 1)
    record = await run_in_threadpool(
        intake.upload, data, image.filename, image.content_type, "admin"
    )
    return ok(
        {
            "url": record.url,
            "filename": record.filename,
            "originalName": record.original_name,
            "size": record.size,
            "mimetype": record.mimetype,
        },
        message="Image uploadée avec succès",
    )


@router.post("/save")
def save_image(payload: ImageRegistration, container: Container = container_dep):
    """Enregistre une image déjà hébergée (aucun octet transmis)."""
    record = container.images.register(payload)
    return ok(
        {"id": record.id, "url": record.url, "filename": record.filename},
        message="Image sauvegardée avec succès",
    )
