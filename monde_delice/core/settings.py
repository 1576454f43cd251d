"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Détermination du fichier .env à utiliser avec priorité:
# 1) ENV_FILE (chemin explicite)
# 2) .env.{APP_ENV} si présent
# 3) .env (défaut)
_cwd = Path.cwd()
_env_file_from_env = os.getenv("ENV_FILE")
if _env_file_from_env:
    _ENV_FILE_PATH = _env_file_from_env
else:
    _app_env = os.getenv("APP_ENV", "dev")
    _candidate_specific = _cwd / f".env.{_app_env}"
    _candidate_default = _cwd / ".env"
    if _candidate_specific.exists():
        _ENV_FILE_PATH = _candidate_specific
    else:
        _ENV_FILE_PATH = _candidate_default

DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_JWT_SECRET = "dev-secret-change-me"


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
    )
    APP_NAME: str = "monde-delice-api"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = False
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    APP_VERSION: str = "1.0.0"

    CORS_ORIGINS: list[str] = []
    DATABASE_URL: str = "sqlite+pysqlite:///./monde_delice.db"
    DB_CREATE_ALL: bool = True

    # Admin / JWT
    ADMIN_PASSWORD: str = DEFAULT_ADMIN_PASSWORD
    ADMIN_PASSWORD_HASH: str | None = None
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALG: str = "HS256"
    JWT_EXPIRES_MIN: int = 24 * 60

    # Upload d'images
    UPLOAD_BACKEND: str = "local"  # "local" | "remote"
    UPLOAD_DIR: str = "./uploads"
    UPLOAD_PUBLIC_URL: str = "/uploads"
    UPLOAD_REMOTE_URL: str | None = None
    UPLOAD_REMOTE_TOKEN: str | None = None
    UPLOAD_TIMEOUT_S: float = 20.0
    UPLOAD_MAX_BYTES: int = 4 * 1024 * 1024
    UPLOAD_ALLOWED_TYPES: list[str] = [
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
        "image/gif",
    ]

    REQUEST_TIMEOUT_S: float = 30.0

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
