"""Modèles ORM SQLAlchemy de la couche de persistance.

Quatre collections: produits, réalisations (blogs), images, likes.
Les contraintes d'unicité (slug, couple blog/IP) sont portées par la base.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Text,
    TypeDecorator,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Ramène un horodatage en UTC; une valeur naïve est supposée déjà en UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class UTCDateTime(TypeDecorator):
    """DateTime toujours écrit et relu en UTC conscient.

    SQLite ne conserve pas le fuseau: sans ce type, les valeurs relues sont naïves.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return as_utc(value)

    def process_result_value(self, value, dialect):
        return as_utc(value)


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class ProductORM(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(100), nullable=False)
    price = Column(Float, nullable=False)
    description = Column(Text, nullable=False)
    images = Column(JSON, nullable=False, default=list)
    categories = Column(JSON, nullable=False, default=list)
    created_at = Column(UTCDateTime, nullable=False, default=_utcnow)
    updated_at = Column(
        UTCDateTime, nullable=False, default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        Index("ix_products_created_at", "created_at"),
        Index("ix_products_price", "price"),
    )


class BlogORM(Base):
    __tablename__ = "blogs"

    id = Column(String(32), primary_key=True, default=_new_id)
    title = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=False)
    excerpt = Column(String(300), nullable=False)
    content = Column(Text, nullable=False)
    images = Column(JSON, nullable=False, default=list)
    featured = Column(Boolean, nullable=False, default=False)
    likes = Column(Integer, nullable=False, default=0)
    tags = Column(JSON, nullable=False, default=list)
    author = Column(String(100), nullable=False)
    event_date = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=_utcnow)
    updated_at = Column(
        UTCDateTime, nullable=False, default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        UniqueConstraint("slug", name="uq_blogs_slug"),
        Index("ix_blogs_featured", "featured"),
        Index("ix_blogs_likes", "likes"),
        Index("ix_blogs_created_at", "created_at"),
    )


class ImageORM(Base):
    __tablename__ = "images"

    id = Column(String(32), primary_key=True, default=_new_id)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    url = Column(String(1024), nullable=False)
    size = Column(Integer, nullable=False, default=0)
    mimetype = Column(String(80), nullable=False)
    uploaded_by = Column(String(64), nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=_utcnow)

    __table_args__ = (
        Index("ix_images_filename", "filename"),
        Index("ix_images_created_at", "created_at"),
    )


class LikeORM(Base):
    """Relation blog <-> identité (IP). Jointure dérivée, le blog n'en est pas propriétaire."""

    __tablename__ = "likes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    blog_id = Column(String(32), nullable=False)
    ip_address = Column(String(64), nullable=False)
    user_agent = Column(String(512), nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=_utcnow)

    __table_args__ = (
        UniqueConstraint("blog_id", "ip_address", name="uq_likes_blog_ip"),
        Index("ix_likes_blog_id", "blog_id"),
    )
