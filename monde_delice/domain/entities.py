"""
Entités du domaine métier.

Ce module définit les modèles pydantic des produits ("services"), des
réalisations (blogs), des images et des likes, ainsi que les payloads de
création et de mise à jour validés avant toute écriture.
Les champs sont exposés en camelCase (`createdAt`, `meta.eventDate`) et
acceptés sous les deux formes en entrée.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Annotated

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)
from pydantic.alias_generators import to_camel

from monde_delice.domain.slugs import SLUG_PATTERN

DEFAULT_CATEGORY = "Général"
DEFAULT_TAG = "Général"
DEFAULT_PRODUCT_IMAGE = "/images/default-cake.jpg"
DEFAULT_BLOG_IMAGE = "/images/default-blog.jpg"
MAX_PRICE = 100_000

_IMAGE_URL_PATTERNS = (
    re.compile(r"^https?://.+\.(jpg|jpeg|png|webp|gif|svg)(\?.*)?$", re.IGNORECASE),
    re.compile(r"^https?://.*uploadthing\.com.*$", re.IGNORECASE),
    re.compile(r"^https?://.*utfs\.io.*$", re.IGNORECASE),
    # chemins servis par le site lui-même (placeholders, uploads locaux)
    re.compile(r"^/[^\s?]+\.(jpg|jpeg|png|webp|gif|svg)(\?.*)?$", re.IGNORECASE),
)


def is_image_url(value: str) -> bool:
    """Indique si l'URL désigne un fichier image ou un hôte d'upload connu."""
    return any(p.match(value) for p in _IMAGE_URL_PATTERNS)


def _check_image_url(value: str) -> str:
    if not is_image_url(value):
        raise ValueError("URL d'image invalide")
    return value


ImageUrl = Annotated[
    str, StringConstraints(strip_whitespace=True), AfterValidator(_check_image_url)
]
Category = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)
]
Tag = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)
]


class CamelModel(BaseModel):
    """Base commune: alias camelCase, espaces superflus retirés."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# ---------------------------------------------------------------------------
# Produits
# ---------------------------------------------------------------------------


class ProductCreate(CamelModel):
    """Payload de création d'un produit."""

    name: str = Field(min_length=1, max_length=100)
    price: float = Field(ge=0, le=MAX_PRICE, allow_inf_nan=False)
    description: str = Field(min_length=1, max_length=1000)
    images: list[ImageUrl] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)


class ProductUpdate(CamelModel):
    """Payload de mise à jour partielle d'un produit."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    price: float | None = Field(default=None, ge=0, le=MAX_PRICE, allow_inf_nan=False)
    description: str | None = Field(default=None, min_length=1, max_length=1000)
    images: list[ImageUrl] | None = None
    categories: list[Category] | None = None


class Product(CamelModel):
    id: str
    name: str
    price: float
    description: str
    images: list[str]
    categories: list[str]
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Réalisations (blogs)
# ---------------------------------------------------------------------------


def _not_in_future(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    aware = value if value.tzinfo else value.replace(tzinfo=UTC)
    if aware > datetime.now(UTC):
        raise ValueError("La date de l'événement ne peut pas être dans le futur")
    return value


def _normalize_slug(value: object) -> object:
    if isinstance(value, str):
        value = value.strip().lower()
        return value or None
    return value


class BlogMeta(CamelModel):
    author: str = Field(min_length=1, max_length=100)
    event_date: datetime | None = None

    @field_validator("event_date")
    @classmethod
    def check_event_date(cls, value: datetime | None) -> datetime | None:
        return _not_in_future(value)


class BlogMetaUpdate(CamelModel):
    author: str | None = Field(default=None, min_length=1, max_length=100)
    event_date: datetime | None = None

    @field_validator("event_date")
    @classmethod
    def check_event_date(cls, value: datetime | None) -> datetime | None:
        return _not_in_future(value)


class BlogCreate(CamelModel):
    """Payload de création d'une réalisation.

    `slug` est dérivé du titre lorsqu'il est absent (voir `slugify_title`).
    """

    title: str = Field(min_length=5, max_length=200)
    slug: str | None = Field(default=None, max_length=200, pattern=SLUG_PATTERN)
    excerpt: str = Field(min_length=20, max_length=300)
    content: str = Field(min_length=50)
    images: list[ImageUrl] = Field(default_factory=list)
    featured: bool = False
    tags: list[Tag] = Field(default_factory=list)
    meta: BlogMeta

    @field_validator("slug", mode="before")
    @classmethod
    def normalize_slug(cls, value: object) -> object:
        return _normalize_slug(value)


class BlogUpdate(CamelModel):
    """Payload de mise à jour partielle; `meta` est fusionné champ par champ."""

    title: str | None = Field(default=None, min_length=5, max_length=200)
    slug: str | None = Field(default=None, max_length=200, pattern=SLUG_PATTERN)
    excerpt: str | None = Field(default=None, min_length=20, max_length=300)
    content: str | None = Field(default=None, min_length=50)
    images: list[ImageUrl] | None = None
    featured: bool | None = None
    tags: list[Tag] | None = None
    meta: BlogMetaUpdate | None = None

    @field_validator("slug", mode="before")
    @classmethod
    def normalize_slug(cls, value: object) -> object:
        return _normalize_slug(value)


class BlogMetaOut(CamelModel):
    author: str
    event_date: datetime | None = None


class Blog(CamelModel):
    id: str
    title: str
    slug: str
    excerpt: str
    content: str
    images: list[str]
    featured: bool
    likes: int
    tags: list[str]
    meta: BlogMetaOut
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Images, likes, administration
# ---------------------------------------------------------------------------


class ImageRecord(CamelModel):
    id: str
    filename: str
    original_name: str
    url: str
    size: int
    mimetype: str
    uploaded_by: str | None = None
    created_at: datetime


class ImageRegistration(CamelModel):
    """Métadonnées d'une image déjà hébergée, enregistrée par le client.

    `url` et `filename` sont contrôlés par `ImageIntake.register`; une taille
    ou un type nuls prennent leur valeur par défaut.
    """

    url: str | None = None
    filename: str | None = None
    size: int = Field(default=0, ge=0)
    mimetype: str = "image/jpeg"

    @field_validator("size", mode="before")
    @classmethod
    def _null_size(cls, v):
        return 0 if v is None else v

    @field_validator("mimetype", mode="before")
    @classmethod
    def _null_mimetype(cls, v):
        return v or "image/jpeg"


class LikeStatus(CamelModel):
    has_liked: bool
    total_likes: int


class LikeToggle(CamelModel):
    liked: bool
    total_likes: int


class AdminClaims(BaseModel):
    """Revendications portées par le jeton admin."""

    admin: bool
    iat: int
    exp: int


class AdminCredential(CamelModel):
    token: str
    expires_in: int


class AdminStats(CamelModel):
    total_products: int
    total_blogs: int
    total_images: int
    featured_blogs: int
