"""Stockage des images sur le disque local, servi par l'application sous une URL publique."""

from __future__ import annotations

from pathlib import Path

import structlog

from monde_delice.domain.errors import UpstreamError
from monde_delice.infra.storage.base import ImageStorage, StoredImage

log = structlog.get_logger(__name__)


class LocalImageStorage(ImageStorage):
    """Écrit les fichiers dans `directory`; l'URL est `public_url/filename`."""

    name = "local"

    def __init__(self, directory: str | Path, public_url: str = "/uploads") -> None:
        self.directory = Path(directory)
        self.public_url = public_url.rstrip("/")
        self.directory.mkdir(parents=True, exist_ok=True)

    def store(self, filename: str, data: bytes, mimetype: str) -> StoredImage:
        target = self.directory / filename
        try:
            target.write_bytes(data)
        except OSError as err:
            log.error("local_storage_write_failed", filename=filename, error=str(err))
            raise UpstreamError("Erreur lors de l'enregistrement du fichier") from err
        return StoredImage(url=f"{self.public_url}/{filename}", filename=filename)

    def ping(self) -> bool:
        return self.directory.is_dir()
