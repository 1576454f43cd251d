"""
Client Python du moteur de likes pour les clients de présentation.

L'état de like a deux niveaux explicites:
- confirmé (`confirmed=True`): réponse du serveur, seule source faisant foi;
- local (`confirmed=False`): l'API est injoignable, l'état est basculé dans
  un magasin local non autoritatif et `total_likes` vaut None.

Les deux ne sont jamais fusionnés: un total n'est affiché que s'il vient du
serveur, et une réponse confirmée écrase l'état local.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

import httpx
import structlog

log = structlog.get_logger(__name__)

HTTP_SERVER_ERROR_MIN = 500


class LikeClientError(Exception):
    """Réponse du serveur faisant foi mais en échec (ex. blog inexistant)."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


@dataclass(frozen=True)
class LikeState:
    blog_id: str
    liked: bool
    total_likes: int | None
    confirmed: bool


class LocalLikeStore:
    """Ensemble des blogs likés localement, persisté en JSON si `path` est fourni."""

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path else None
        self._liked: set[str] = set()
        if self._path and self._path.exists():
            try:
                self._liked = set(json.loads(self._path.read_text(encoding="utf-8")))
            except (OSError, ValueError) as err:
                log.warning("local_likes_unreadable", error=str(err))

    def is_liked(self, blog_id: str) -> bool:
        return blog_id in self._liked

    def set(self, blog_id: str, liked: bool) -> None:
        if liked:
            self._liked.add(blog_id)
        else:
            self._liked.discard(blog_id)
        if self._path:
            self._path.write_text(json.dumps(sorted(self._liked)), encoding="utf-8")


class LikeClient:
    """Appelle `/blogs/{id}/like/toggle` et `/blogs/{id}/like-status` avec repli local."""

    def __init__(
        self,
        base_url: str,
        local: LocalLikeStore | None = None,
        client: httpx.Client | None = None,
        timeout: float = 5.0,
    ) -> None:
        self.local = local or LocalLikeStore()
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def _unconfirmed(self, blog_id: str, liked: bool) -> LikeState:
        return LikeState(blog_id=blog_id, liked=liked, total_likes=None, confirmed=False)

    def _call(self, method: str, url: str) -> dict | None:
        """Retourne `data` de la réponse, ou None si le serveur est indisponible."""
        try:
            response = self._client.request(method, url)
        except httpx.TransportError as err:
            log.warning("like_api_unreachable", url=url, error=str(err))
            return None
        if response.status_code >= HTTP_SERVER_ERROR_MIN:
            log.warning("like_api_unavailable", url=url, status_code=response.status_code)
            return None
        try:
            body = response.json()
        except ValueError:
            if response.status_code >= httpx.codes.BAD_REQUEST:
                raise LikeClientError(response.status_code, response.text) from None
            log.warning("like_api_bad_payload", url=url)
            return None
        if response.status_code >= httpx.codes.BAD_REQUEST or not body.get("success"):
            raise LikeClientError(response.status_code, body.get("message", ""))
        return body.get("data") or {}

    def toggle(self, blog_id: str) -> LikeState:
        data = self._call("POST", f"/blogs/{blog_id}/like/toggle")
        if data is None:
            liked = not self.local.is_liked(blog_id)
            self.local.set(blog_id, liked)
            return self._unconfirmed(blog_id, liked)
        liked = bool(data["liked"])
        self.local.set(blog_id, liked)
        return LikeState(
            blog_id=blog_id,
            liked=liked,
            total_likes=int(data["totalLikes"]),
            confirmed=True,
        )

    def status(self, blog_id: str) -> LikeState:
        data = self._call("GET", f"/blogs/{blog_id}/like-status")
        if data is None:
            return self._unconfirmed(blog_id, self.local.is_liked(blog_id))
        liked = bool(data["hasLiked"])
        self.local.set(blog_id, liked)
        return LikeState(
            blog_id=blog_id,
            liked=liked,
            total_likes=int(data["totalLikes"]),
            confirmed=True,
        )
