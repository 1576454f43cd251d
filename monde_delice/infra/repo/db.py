"""Utilitaires SQLAlchemy (moteur, fabrique de sessions, portée transactionnelle).

`DATABASE_URL` vient des settings; `sqlite://` (mémoire) partage une unique
connexion entre threads pour les tests et les démonstrations.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


def _is_sqlite_memory(url: str) -> bool:
    return url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url)


def _json_dumps(value) -> str:
    # étiquettes accentuées stockées telles quelles ("Général"), filtrables par LIKE
    return json.dumps(value, ensure_ascii=False)


def get_engine(url: str) -> Engine:
    """Crée un moteur SQLAlchemy à partir de l'URL de base de données."""
    kwargs: dict = {"future": True, "echo": False, "json_serializer": _json_dumps}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_sqlite_memory(url):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def get_session_factory(engine: Engine) -> sessionmaker:
    """Crée une factory de sessions SQLAlchemy."""
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    """Contexte de session avec commit en sortie et rollback sur exception."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
