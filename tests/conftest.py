"""Configuration de test pour pytest avec gestion des chemins.

Ce module ajoute la racine du projet au sys.path et fournit une application
construite sur une base SQLite en mémoire et un répertoire d'uploads temporaire.
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from monde_delice...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fastapi.testclient import TestClient  # noqa: E402

from monde_delice.app.main import create_app  # noqa: E402
from monde_delice.core.container import Container  # noqa: E402
from monde_delice.core.settings import Settings  # noqa: E402
from tests.fakes import TEST_ADMIN_PASSWORD, TEST_JWT_SECRET  # noqa: E402


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Paramètres isolés: base en mémoire, secrets connus, uploads dans tmp_path."""
    return Settings(
        DATABASE_URL="sqlite://",
        ADMIN_PASSWORD=TEST_ADMIN_PASSWORD,
        JWT_SECRET=TEST_JWT_SECRET,
        UPLOAD_BACKEND="local",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def container(settings) -> Container:
    return Container(settings)


@pytest.fixture
def client(container) -> TestClient:
    return TestClient(create_app(container))


@pytest.fixture
def admin_token(container) -> str:
    return container.auth.validate(TEST_ADMIN_PASSWORD).token


@pytest.fixture
def admin_headers(admin_token) -> dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}
