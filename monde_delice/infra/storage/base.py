"""Interface de base pour le stockage des images téléversées."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class StoredImage:
    """Résultat d'un stockage: URL publique et nom effectif du fichier."""

    url: str
    filename: str


class ImageStorage(ABC):
    """Interface abstraite d'un backend de stockage d'images."""

    name = "abstract"

    @abstractmethod
    def store(self, filename: str, data: bytes, mimetype: str) -> StoredImage:
        """Persiste les octets et retourne une URL publiquement résolvable.

        Lève `UpstreamError` si le backend échoue.
        """
        ...

    def ping(self) -> bool:
        """Indique si le backend est joignable (utilisé par /health)."""
        return True

    def close(self) -> None:
        """Libère les ressources du backend (arrêt de l'application)."""
