"""
Moteur de likes des réalisations.

Deux états par couple (blog, identité): « non liké » (aucun enregistrement) et
« liké » (exactement un enregistrement). L'unicité est garantie par la
contrainte `uq_likes_blog_ip` de la base, jamais par un contrôle applicatif
seul: une insertion concurrente perdante est interprétée comme « déjà liké ».
L'écriture du like et la mise à jour du compteur partagent une transaction.

L'identité est l'adresse IP du demandeur: clé de déduplication grossière et
falsifiable, pas une frontière de sécurité.
"""

from __future__ import annotations

import structlog
from sqlalchemy.orm import sessionmaker

from monde_delice.app.metrics import LIKE_TRANSITIONS
from monde_delice.domain.entities import LikeStatus, LikeToggle
from monde_delice.domain.errors import ConflictError, NotFoundError
from monde_delice.domain.services import BLOG_NOT_FOUND
from monde_delice.infra.repo.db import session_scope
from monde_delice.infra.repositories import BlogRepo, LikeRepo

log = structlog.get_logger(__name__)

ALREADY_LIKED = "Vous avez déjà liké ce blog"
LIKE_NOT_FOUND = "Like non trouvé"


class LikeEngine:
    """Bascule et consulte la relation de like entre un visiteur et un blog."""

    def __init__(self, sessions: sessionmaker) -> None:
        self._sessions = sessions

    def toggle(
        self, blog_id: str, identity: str, user_agent: str | None = None
    ) -> LikeToggle:
        """Like si absent, retire le like sinon. Retourne l'état et le total."""
        with session_scope(self._sessions) as session:
            blogs, likes = BlogRepo(session), LikeRepo(session)
            if not blogs.exists(blog_id):
                raise NotFoundError(BLOG_NOT_FOUND)
            if likes.find(blog_id, identity) is None:
                return self._add(blogs, likes, blog_id, identity, user_agent, strict=False)
            return self._remove(blogs, likes, blog_id, identity, strict=False)

    def like(self, blog_id: str, identity: str, user_agent: str | None = None) -> int:
        """Ajoute un like; ConflictError si l'identité a déjà liké. Retourne le total."""
        with session_scope(self._sessions) as session:
            blogs, likes = BlogRepo(session), LikeRepo(session)
            if not blogs.exists(blog_id):
                raise NotFoundError(BLOG_NOT_FOUND)
            if likes.find(blog_id, identity) is not None:
                raise ConflictError(ALREADY_LIKED)
            return self._add(blogs, likes, blog_id, identity, user_agent, strict=True).total_likes

    def unlike(self, blog_id: str, identity: str) -> int:
        """Retire un like; NotFoundError si absent. Retourne le total."""
        with session_scope(self._sessions) as session:
            blogs, likes = BlogRepo(session), LikeRepo(session)
            if not blogs.exists(blog_id):
                raise NotFoundError(BLOG_NOT_FOUND)
            return self._remove(blogs, likes, blog_id, identity, strict=True).total_likes

    def status(self, blog_id: str, identity: str) -> LikeStatus:
        """Lecture seule: l'identité a-t-elle liké, et total courant."""
        with session_scope(self._sessions) as session:
            row = BlogRepo(session).get(blog_id)
            if row is None:
                raise NotFoundError(BLOG_NOT_FOUND)
            has_liked = LikeRepo(session).find(blog_id, identity) is not None
            return LikeStatus(has_liked=has_liked, total_likes=row.likes or 0)

    def _add(
        self,
        blogs: BlogRepo,
        likes: LikeRepo,
        blog_id: str,
        identity: str,
        user_agent: str | None,
        strict: bool,
    ) -> LikeToggle:
        try:
            likes.create(blog_id, identity, user_agent)
        except ConflictError:
            # insertion concurrente gagnée par une autre requête: état déjà « liké »
            LIKE_TRANSITIONS.labels(result="race_lost").inc()
            log.info("like_race_lost", blog_id=blog_id)
            if strict:
                raise ConflictError(ALREADY_LIKED) from None
            return LikeToggle(liked=True, total_likes=blogs.get_likes(blog_id))
        total = blogs.increment_likes(blog_id)
        LIKE_TRANSITIONS.labels(result="liked").inc()
        log.info("blog_liked", blog_id=blog_id, total_likes=total)
        return LikeToggle(liked=True, total_likes=total)

    def _remove(
        self,
        blogs: BlogRepo,
        likes: LikeRepo,
        blog_id: str,
        identity: str,
        strict: bool,
    ) -> LikeToggle:
        if not likes.delete(blog_id, identity):
            # supprimé entre-temps par une requête concurrente: pas de décrément
            if strict:
                raise NotFoundError(LIKE_NOT_FOUND)
            return LikeToggle(liked=False, total_likes=blogs.get_likes(blog_id))
        total = blogs.decrement_likes(blog_id)
        LIKE_TRANSITIONS.labels(result="unliked").inc()
        log.info("blog_unliked", blog_id=blog_id, total_likes=total)
        return LikeToggle(liked=False, total_likes=total)
