"""
Conteneur d'injection de dépendances.

Instancie les composants centraux (settings, moteur SQL, porte d'authentification,
stockage d'images, services) à partir d'une configuration explicite. Le secret
admin est lu ici et passé au constructeur de `AdminAuthGate`.
"""

from __future__ import annotations

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from monde_delice.core.settings import (
    DEFAULT_ADMIN_PASSWORD,
    DEFAULT_JWT_SECRET,
    Settings,
    get_settings,
)
from monde_delice.domain.auth import AdminAuthGate
from monde_delice.domain.images import ImageIntake
from monde_delice.domain.likes import LikeEngine
from monde_delice.domain.services import BlogService, ProductService, StatsService
from monde_delice.infra.repo.db import get_engine, get_session_factory
from monde_delice.infra.repo.models import Base
from monde_delice.infra.storage.base import ImageStorage
from monde_delice.infra.storage.local_storage import LocalImageStorage
from monde_delice.infra.storage.remote_storage import RemoteImageStorage

log = structlog.get_logger(__name__)


def build_storage(settings: Settings) -> ImageStorage:
    """Sélectionne le backend de stockage des images selon `UPLOAD_BACKEND`."""
    if settings.UPLOAD_BACKEND == "remote":
        if not settings.UPLOAD_REMOTE_URL:
            raise RuntimeError("UPLOAD_BACKEND=remote requires UPLOAD_REMOTE_URL")
        return RemoteImageStorage(
            settings.UPLOAD_REMOTE_URL,
            token=settings.UPLOAD_REMOTE_TOKEN,
            timeout=settings.UPLOAD_TIMEOUT_S,
        )
    if settings.UPLOAD_BACKEND != "local":
        raise RuntimeError(f"Unknown UPLOAD_BACKEND: {settings.UPLOAD_BACKEND}")
    return LocalImageStorage(settings.UPLOAD_DIR, settings.UPLOAD_PUBLIC_URL)


class Container:
    def __init__(
        self, settings: Settings | None = None, storage: ImageStorage | None = None
    ):
        self.settings = settings or get_settings()
        self.engine = get_engine(self.settings.DATABASE_URL)
        self.sessions = get_session_factory(self.engine)
        if self.settings.DB_CREATE_ALL:
            Base.metadata.create_all(self.engine)

        if self.settings.APP_ENV != "dev" and (
            self.settings.JWT_SECRET == DEFAULT_JWT_SECRET
            or (
                not self.settings.ADMIN_PASSWORD_HASH
                and self.settings.ADMIN_PASSWORD == DEFAULT_ADMIN_PASSWORD
            )
        ):
            log.warning("default_admin_secrets_in_use", env=self.settings.APP_ENV)

        self.auth = AdminAuthGate(
            password=self.settings.ADMIN_PASSWORD,
            password_hash=self.settings.ADMIN_PASSWORD_HASH,
            secret=self.settings.JWT_SECRET,
            alg=self.settings.JWT_ALG,
            expires_min=self.settings.JWT_EXPIRES_MIN,
        )
        self.storage = storage or build_storage(self.settings)
        self.products = ProductService(self.sessions)
        self.blogs = BlogService(self.sessions)
        self.stats = StatsService(self.sessions)
        self.likes = LikeEngine(self.sessions)
        self.images = ImageIntake(
            self.storage,
            self.sessions,
            max_bytes=self.settings.UPLOAD_MAX_BYTES,
            allowed_types=self.settings.UPLOAD_ALLOWED_TYPES,
        )

    def ping_database(self) -> bool:
        """Vérifie que la base répond à une requête triviale."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as err:
            log.error("database_unreachable", error=str(err))
            return False

    def close(self) -> None:
        """Ferme le stockage et les connexions du moteur."""
        self.storage.close()
        self.engine.dispose()
