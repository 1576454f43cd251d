"""
Services métier du catalogue et des réalisations.

Responsabilités:
- Valider les payloads avant toute écriture (payloads pydantic).
- Fusionner les mises à jour partielles puis revalider l'entité complète.
- Compléter les valeurs par défaut (catégories, tags, images, slug) juste
  avant l'écriture.
- Ouvrir une transaction par opération (`session_scope`).
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import sessionmaker

from monde_delice.domain.entities import (
    DEFAULT_BLOG_IMAGE,
    DEFAULT_CATEGORY,
    DEFAULT_PRODUCT_IMAGE,
    DEFAULT_TAG,
    AdminStats,
    Blog,
    BlogCreate,
    BlogUpdate,
    Product,
    ProductCreate,
    ProductUpdate,
)
from monde_delice.domain.errors import NotFoundError, ValidationError
from monde_delice.domain.slugs import slugify_title
from monde_delice.infra.repo.db import session_scope
from monde_delice.infra.repositories import (
    BlogRepo,
    ImageRepo,
    ProductRepo,
    to_blog,
    to_product,
)

log = structlog.get_logger(__name__)

PRODUCT_NOT_FOUND = "Produit non trouvé"
BLOG_NOT_FOUND = "Blog non trouvé"


def product_defaults(data: dict[str, Any]) -> dict[str, Any]:
    """Complète catégories et images vides."""
    if not data.get("categories"):
        data["categories"] = [DEFAULT_CATEGORY]
    if not data.get("images"):
        data["images"] = [DEFAULT_PRODUCT_IMAGE]
    return data


def blog_defaults(data: dict[str, Any]) -> dict[str, Any]:
    """Complète slug, tags et images vides."""
    if not data.get("slug"):
        data["slug"] = slugify_title(data["title"])
        if not data["slug"]:
            raise ValidationError(
                [{"field": "slug", "message": "Impossible de dériver un slug du titre"}]
            )
    if not data.get("tags"):
        data["tags"] = [DEFAULT_TAG]
    if not data.get("images"):
        data["images"] = [DEFAULT_BLOG_IMAGE]
    return data


def _blog_columns(payload: BlogCreate) -> dict[str, Any]:
    data = payload.model_dump(exclude={"meta"})
    data["author"] = payload.meta.author
    data["event_date"] = payload.meta.event_date
    return data


class ProductService:
    """CRUD des produits."""

    def __init__(self, sessions: sessionmaker) -> None:
        self._sessions = sessions

    def find(self, search: str | None = None, category: str | None = None) -> list[Product]:
        with session_scope(self._sessions) as session:
            rows = ProductRepo(session).find(search=search, category=category)
            return [to_product(r) for r in rows]

    def get(self, product_id: str) -> Product:
        with session_scope(self._sessions) as session:
            row = ProductRepo(session).get(product_id)
            if row is None:
                raise NotFoundError(PRODUCT_NOT_FOUND)
            return to_product(row)

    def create(self, payload: ProductCreate) -> Product:
        data = product_defaults(payload.model_dump())
        with session_scope(self._sessions) as session:
            row = ProductRepo(session).create(data)
            product = to_product(row)
        log.info("product_created", product_id=product.id)
        return product

    def update(self, product_id: str, patch: ProductUpdate) -> Product:
        with session_scope(self._sessions) as session:
            repo = ProductRepo(session)
            row = repo.get(product_id)
            if row is None:
                raise NotFoundError(PRODUCT_NOT_FOUND)
            merged = to_product(row).model_dump(include=set(ProductCreate.model_fields))
            merged.update(patch.model_dump(exclude_unset=True))
            try:
                validated = ProductCreate.model_validate(merged)
            except PydanticValidationError as err:
                raise ValidationError.from_pydantic(err) from err
            row = repo.update(row, product_defaults(validated.model_dump()))
            product = to_product(row)
        log.info("product_updated", product_id=product_id)
        return product

    def delete(self, product_id: str) -> None:
        with session_scope(self._sessions) as session:
            if not ProductRepo(session).delete(product_id):
                raise NotFoundError(PRODUCT_NOT_FOUND)
        log.info("product_deleted", product_id=product_id)


class BlogService:
    """CRUD des réalisations. Le compteur `likes` n'est modifié que par le moteur de likes."""

    def __init__(self, sessions: sessionmaker) -> None:
        self._sessions = sessions

    def find(
        self, search: str | None = None, tag: str | None = None, featured: bool = False
    ) -> list[Blog]:
        with session_scope(self._sessions) as session:
            rows = BlogRepo(session).find(search=search, tag=tag, featured=featured)
            return [to_blog(r) for r in rows]

    def get(self, blog_id: str) -> Blog:
        with session_scope(self._sessions) as session:
            row = BlogRepo(session).get(blog_id)
            if row is None:
                raise NotFoundError(BLOG_NOT_FOUND)
            return to_blog(row)

    def get_by_slug(self, slug: str) -> Blog:
        with session_scope(self._sessions) as session:
            row = BlogRepo(session).get_by_slug(slug.lower())
            if row is None:
                raise NotFoundError(BLOG_NOT_FOUND)
            return to_blog(row)

    def create(self, payload: BlogCreate) -> Blog:
        data = blog_defaults(_blog_columns(payload))
        data["likes"] = 0
        with session_scope(self._sessions) as session:
            row = BlogRepo(session).create(data)
            blog = to_blog(row)
        log.info("blog_created", blog_id=blog.id, slug=blog.slug)
        return blog

    def update(self, blog_id: str, patch: BlogUpdate) -> Blog:
        with session_scope(self._sessions) as session:
            repo = BlogRepo(session)
            row = repo.get(blog_id)
            if row is None:
                raise NotFoundError(BLOG_NOT_FOUND)
            current = to_blog(row).model_dump(include=set(BlogCreate.model_fields))
            changes = patch.model_dump(exclude_unset=True)
            meta_changes = changes.pop("meta", None) or {}
            current.update(changes)
            current["meta"] = {**current["meta"], **meta_changes}
            try:
                validated = BlogCreate.model_validate(current)
            except PydanticValidationError as err:
                raise ValidationError.from_pydantic(err) from err
            row = repo.update(row, blog_defaults(_blog_columns(validated)))
            blog = to_blog(row)
        log.info("blog_updated", blog_id=blog_id)
        return blog

    def delete(self, blog_id: str) -> None:
        """Suppression définitive; les likes associés sont supprimés avec le blog."""
        with session_scope(self._sessions) as session:
            if not BlogRepo(session).delete(blog_id):
                raise NotFoundError(BLOG_NOT_FOUND)
        log.info("blog_deleted", blog_id=blog_id)


class StatsService:
    """Compteurs du tableau de bord admin."""

    def __init__(self, sessions: sessionmaker) -> None:
        self._sessions = sessions

    def stats(self) -> AdminStats:
        with session_scope(self._sessions) as session:
            blogs = BlogRepo(session)
            return AdminStats(
                total_products=ProductRepo(session).count(),
                total_blogs=blogs.count(),
                total_images=ImageRepo(session).count(),
                featured_blogs=blogs.count(featured=True),
            )
