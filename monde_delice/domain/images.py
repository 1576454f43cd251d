"""
Réception des images téléversées.

Politique: liste blanche de types MIME déclarés et plafond de taille
configurable (taille égale au plafond acceptée, un octet de plus refusé).
Le nom de fichier stocké est généré, indépendant du nom d'origine. Les
métadonnées ne sont écrites qu'après un stockage réussi.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable

import structlog
from sqlalchemy.orm import sessionmaker

from monde_delice.app.metrics import IMAGE_UPLOADS
from monde_delice.domain.entities import ImageRecord, ImageRegistration
from monde_delice.domain.errors import UpstreamError, ValidationError
from monde_delice.infra.repo.db import session_scope
from monde_delice.infra.repositories import ImageRepo, to_image
from monde_delice.infra.storage.base import ImageStorage

log = structlog.get_logger(__name__)

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def _fmt_size(n: int) -> str:
    return f"{n / (1024 * 1024):g}MB"


class ImageIntake:
    """Valide, stocke et référence les images."""

    def __init__(
        self,
        storage: ImageStorage,
        sessions: sessionmaker,
        max_bytes: int,
        allowed_types: Iterable[str],
    ) -> None:
        self.storage = storage
        self._sessions = sessions
        self.max_bytes = max_bytes
        self.allowed_types = frozenset(t.lower() for t in allowed_types)

    def check_policy(self, mimetype: str | None, size: int) -> None:
        """Lève ValidationError si le type déclaré ou la taille sont refusés."""
        if (mimetype or "").lower() not in self.allowed_types:
            raise ValidationError(
                [{"field": "image", "message": "Type de fichier non autorisé"}],
                message="Type de fichier non autorisé",
            )
        if size > self.max_bytes:
            message = f"Fichier trop volumineux (max {_fmt_size(self.max_bytes)})"
            raise ValidationError([{"field": "image", "message": message}], message=message)

    def new_filename(self, mimetype: str) -> str:
        return f"{uuid.uuid4().hex}{_EXTENSIONS.get(mimetype.lower(), '')}"

    def upload(
        self,
        data: bytes,
        original_name: str | None,
        mimetype: str | None,
        uploaded_by: str = "admin",
    ) -> ImageRecord:
        """Valide puis stocke les octets et enregistre les métadonnées."""
        size = len(data)
        try:
            self.check_policy(mimetype, size)
        except ValidationError as err:
            IMAGE_UPLOADS.labels(result="rejected").inc()
            log.info("image_upload_rejected", mimetype=mimetype, size=size, reason=err.message)
            raise
        mimetype = (mimetype or "").lower()
        try:
            stored = self.storage.store(self.new_filename(mimetype), data, mimetype)
        except UpstreamError:
            IMAGE_UPLOADS.labels(result="storage_error").inc()
            raise
        with session_scope(self._sessions) as session:
            row = ImageRepo(session).create(
                {
                    "filename": stored.filename,
                    "original_name": original_name or stored.filename,
                    "url": stored.url,
                    "size": size,
                    "mimetype": mimetype,
                    "uploaded_by": uploaded_by,
                }
            )
            record = to_image(row)
        IMAGE_UPLOADS.labels(result="stored").inc()
        log.info("image_uploaded", filename=record.filename, size=size, backend=self.storage.name)
        return record

    def register(self, payload: ImageRegistration) -> ImageRecord:
        """Enregistre les métadonnées d'une image déjà hébergée (origine client)."""
        missing = [f for f in ("url", "filename") if not getattr(payload, f)]
        if missing:
            raise ValidationError(
                [{"field": f, "message": "Champ requis"} for f in missing],
                message="URL et nom de fichier requis",
            )
        with session_scope(self._sessions) as session:
            row = ImageRepo(session).create(
                {
                    "filename": payload.filename,
                    "original_name": payload.filename,
                    "url": payload.url,
                    "size": payload.size,
                    "mimetype": payload.mimetype,
                    "uploaded_by": "client",
                }
            )
            record = to_image(row)
        log.info("image_registered", filename=record.filename)
        return record
