"""
Repositories pour la gestion des données.

Chaque dépôt travaille sur une session SQLAlchemy fournie par l'appelant
(voir `session_scope`); les violations d'unicité sont traduites en
`ConflictError` au point d'écriture.
"""

from __future__ import annotations

import json
from typing import Any

from sqlalchemy import String, case, cast, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from monde_delice.domain.entities import Blog, BlogMetaOut, ImageRecord, Product
from monde_delice.domain.errors import ConflictError
from monde_delice.infra.repo.models import (
    BlogORM,
    ImageORM,
    LikeORM,
    ProductORM,
    as_utc,
)

_LIKE_ESCAPE = "\\"


def _contains(term: str) -> str:
    """Motif LIKE littéral (les jokers saisis par l'utilisateur sont échappés)."""
    escaped = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def _flush(session: Session, conflict_message: str) -> None:
    try:
        session.flush()
    except IntegrityError as err:
        session.rollback()
        raise ConflictError(conflict_message) from err


def to_product(row: ProductORM) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        price=row.price,
        description=row.description,
        images=list(row.images or []),
        categories=list(row.categories or []),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def to_blog(row: BlogORM) -> Blog:
    return Blog(
        id=row.id,
        title=row.title,
        slug=row.slug,
        excerpt=row.excerpt,
        content=row.content,
        images=list(row.images or []),
        featured=bool(row.featured),
        likes=row.likes or 0,
        tags=list(row.tags or []),
        meta=BlogMetaOut(author=row.author, event_date=as_utc(row.event_date)),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def to_image(row: ImageORM) -> ImageRecord:
    return ImageRecord(
        id=row.id,
        filename=row.filename,
        original_name=row.original_name,
        url=row.url,
        size=row.size,
        mimetype=row.mimetype,
        uploaded_by=row.uploaded_by,
        created_at=as_utc(row.created_at),
    )


class ProductRepo:
    """Dépôt des produits (services proposés au catalogue)."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, data: dict[str, Any]) -> ProductORM:
        row = ProductORM(**data)
        self._session.add(row)
        _flush(self._session, "Produit en conflit")
        return row

    def get(self, product_id: str) -> ProductORM | None:
        return self._session.get(ProductORM, product_id)

    def find(
        self, search: str | None = None, category: str | None = None
    ) -> list[ProductORM]:
        """Recherche plein texte (nom, description, catégories) et filtre de catégorie.

        Tri: plus récents d'abord. Pas de pagination.
        """
        stmt = select(ProductORM)
        if search:
            pattern = _contains(search)
            stmt = stmt.where(
                or_(
                    ProductORM.name.ilike(pattern, escape=_LIKE_ESCAPE),
                    ProductORM.description.ilike(pattern, escape=_LIKE_ESCAPE),
                    cast(ProductORM.categories, String).ilike(
                        pattern, escape=_LIKE_ESCAPE
                    ),
                )
            )
        if category:
            stmt = stmt.where(
                cast(ProductORM.categories, String).like(
                    _contains(json.dumps(category, ensure_ascii=False)),
                    escape=_LIKE_ESCAPE,
                )
            )
        stmt = stmt.order_by(ProductORM.created_at.desc())
        rows = self._session.execute(stmt).scalars().all()
        if category:
            # LIKE est insensible à la casse sous SQLite: on confirme l'égalité exacte
            rows = [r for r in rows if category in (r.categories or [])]
        return list(rows)

    def update(self, row: ProductORM, data: dict[str, Any]) -> ProductORM:
        for key, value in data.items():
            setattr(row, key, value)
        _flush(self._session, "Produit en conflit")
        return row

    def delete(self, product_id: str) -> bool:
        result = self._session.execute(
            delete(ProductORM).where(ProductORM.id == product_id)
        )
        return result.rowcount > 0

    def count(self) -> int:
        return self._session.scalar(select(func.count()).select_from(ProductORM)) or 0


class BlogRepo:
    """Dépôt des réalisations; porte aussi les mises à jour atomiques du compteur de likes."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, data: dict[str, Any]) -> BlogORM:
        row = BlogORM(**data)
        self._session.add(row)
        _flush(self._session, "Ce slug est déjà utilisé")
        return row

    def get(self, blog_id: str) -> BlogORM | None:
        return self._session.get(BlogORM, blog_id)

    def get_by_slug(self, slug: str) -> BlogORM | None:
        stmt = select(BlogORM).where(BlogORM.slug == slug)
        return self._session.execute(stmt).scalars().first()

    def exists(self, blog_id: str) -> bool:
        stmt = select(BlogORM.id).where(BlogORM.id == blog_id)
        return self._session.execute(stmt).first() is not None

    def find(
        self,
        search: str | None = None,
        tag: str | None = None,
        featured: bool = False,
    ) -> list[BlogORM]:
        """Recherche (titre, extrait, contenu, tags), filtres tag et mise en avant."""
        stmt = select(BlogORM)
        if search:
            pattern = _contains(search)
            stmt = stmt.where(
                or_(
                    BlogORM.title.ilike(pattern, escape=_LIKE_ESCAPE),
                    BlogORM.excerpt.ilike(pattern, escape=_LIKE_ESCAPE),
                    BlogORM.content.ilike(pattern, escape=_LIKE_ESCAPE),
                    cast(BlogORM.tags, String).ilike(pattern, escape=_LIKE_ESCAPE),
                )
            )
        if featured:
            stmt = stmt.where(BlogORM.featured.is_(True))
        if tag:
            stmt = stmt.where(
                cast(BlogORM.tags, String).like(
                    _contains(json.dumps(tag, ensure_ascii=False)),
                    escape=_LIKE_ESCAPE,
                )
            )
        stmt = stmt.order_by(BlogORM.created_at.desc())
        rows = self._session.execute(stmt).scalars().all()
        if tag:
            rows = [r for r in rows if tag in (r.tags or [])]
        return list(rows)

    def update(self, row: BlogORM, data: dict[str, Any]) -> BlogORM:
        for key, value in data.items():
            setattr(row, key, value)
        _flush(self._session, "Ce slug est déjà utilisé")
        return row

    def delete(self, blog_id: str) -> bool:
        """Supprime la réalisation et ses likes dans la même transaction."""
        result = self._session.execute(delete(BlogORM).where(BlogORM.id == blog_id))
        if result.rowcount == 0:
            return False
        self._session.execute(delete(LikeORM).where(LikeORM.blog_id == blog_id))
        return True

    def get_likes(self, blog_id: str) -> int:
        return self._session.scalar(select(BlogORM.likes).where(BlogORM.id == blog_id)) or 0

    def increment_likes(self, blog_id: str) -> int:
        self._session.execute(
            update(BlogORM)
            .where(BlogORM.id == blog_id)
            .values(likes=BlogORM.likes + 1)
            .execution_options(synchronize_session=False)
        )
        return self.get_likes(blog_id)

    def decrement_likes(self, blog_id: str) -> int:
        """Décrémente sans jamais passer sous zéro."""
        self._session.execute(
            update(BlogORM)
            .where(BlogORM.id == blog_id)
            .values(likes=case((BlogORM.likes > 0, BlogORM.likes - 1), else_=0))
            .execution_options(synchronize_session=False)
        )
        return self.get_likes(blog_id)

    def count(self, featured: bool | None = None) -> int:
        stmt = select(func.count()).select_from(BlogORM)
        if featured is not None:
            stmt = stmt.where(BlogORM.featured.is_(featured))
        return self._session.scalar(stmt) or 0


class ImageRepo:
    """Métadonnées des images téléversées (jamais modifiées ni supprimées)."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, data: dict[str, Any]) -> ImageORM:
        row = ImageORM(**data)
        self._session.add(row)
        self._session.flush()
        return row

    def count(self) -> int:
        return self._session.scalar(select(func.count()).select_from(ImageORM)) or 0


class LikeRepo:
    """Dépôt des likes; l'unicité (blog, IP) est garantie par la base."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def find(self, blog_id: str, ip_address: str) -> LikeORM | None:
        stmt = select(LikeORM).where(
            LikeORM.blog_id == blog_id, LikeORM.ip_address == ip_address
        )
        return self._session.execute(stmt).scalars().first()

    def create(
        self, blog_id: str, ip_address: str, user_agent: str | None = None
    ) -> LikeORM:
        """Insère un like. Lève ConflictError si le couple existe déjà (course perdue)."""
        row = LikeORM(blog_id=blog_id, ip_address=ip_address, user_agent=user_agent)
        self._session.add(row)
        _flush(self._session, "Vous avez déjà liké ce blog")
        return row

    def delete(self, blog_id: str, ip_address: str) -> bool:
        result = self._session.execute(
            delete(LikeORM).where(
                LikeORM.blog_id == blog_id, LikeORM.ip_address == ip_address
            )
        )
        return result.rowcount > 0

    def count_for_blog(self, blog_id: str) -> int:
        stmt = select(func.count()).select_from(LikeORM).where(LikeORM.blog_id == blog_id)
        return self._session.scalar(stmt) or 0
