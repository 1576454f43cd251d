"""
Client du service d'hébergement d'images distant (API de type UploadThing).

Le service reçoit un formulaire multipart (`files`) et répond par une liste
`[{"name": ..., "url": ...}]`; une réponse objet unique est aussi acceptée.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from monde_delice.domain.errors import UpstreamError
from monde_delice.infra.storage.base import ImageStorage, StoredImage

log = structlog.get_logger(__name__)


class RemoteImageStorage(ImageStorage):
    """Téléverse les images vers un hôte distant via HTTP."""

    name = "remote"

    def __init__(
        self,
        upload_url: str,
        token: str | None = None,
        timeout: float = 20.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.upload_url = upload_url
        self._token = token
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"} if self._token else {}

    def store(self, filename: str, data: bytes, mimetype: str) -> StoredImage:
        try:
            response = self._client.post(
                self.upload_url,
                headers=self._headers(),
                files={"files": (filename, data, mimetype)},
            )
            response.raise_for_status()
            payload: Any = response.json()
        except (httpx.HTTPError, ValueError) as err:
            log.error("remote_upload_failed", filename=filename, error=str(err))
            raise UpstreamError("Erreur lors de l'upload distant") from err

        uploaded = payload[0] if isinstance(payload, list) and payload else payload
        if not isinstance(uploaded, dict) or not uploaded.get("url"):
            log.error("remote_upload_bad_response", filename=filename)
            raise UpstreamError("Réponse invalide du service d'upload")
        return StoredImage(
            url=str(uploaded["url"]), filename=str(uploaded.get("name") or filename)
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
