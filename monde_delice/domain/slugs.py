"""Dérivation canonique des slugs de réalisations.

Toute copie côté client n'est qu'un aperçu; la valeur persistée est toujours
celle calculée ici.
"""

import re
import unicodedata

SLUG_PATTERN = r"^[a-z0-9-]+$"

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify_title(title: str) -> str:
    """Transforme un titre en slug `[a-z0-9-]`.

    Les accents sont décomposés puis retirés ("Gâteau" -> "gateau"), les autres
    caractères non alphanumériques sont supprimés, les espaces deviennent des
    tirets et les tirets consécutifs sont fusionnés.

    >>> slugify_title("Mariage de Sophie & Marc")
    'mariage-de-sophie-marc'
    """
    text = unicodedata.normalize("NFKD", title)
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    text = _NON_SLUG_CHARS.sub("", text)
    text = _WHITESPACE.sub("-", text.strip())
    return _HYPHENS.sub("-", text).strip("-")
