"""Génère la valeur de `ADMIN_PASSWORD_HASH` à partir d'un mot de passe saisi.

Usage:
  python -m monde_delice.scripts.hash_admin_password

Notes:
- Le mot de passe est lu sans écho et n'est jamais affiché.
- Seul le hash (pbkdf2_sha256) est écrit sur la sortie standard.
"""

from __future__ import annotations

import argparse
import getpass
import sys

from monde_delice.domain.auth import hash_password


def main(argv: list[str] | None = None) -> int:
    """Demande le mot de passe deux fois et imprime son hash."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--env-line",
        action="store_true",
        help="Affiche la ligne prête à coller dans .env (ADMIN_PASSWORD_HASH=...)",
    )
    args = parser.parse_args(argv)

    password = getpass.getpass("Mot de passe admin: ")
    if not password:
        print("Mot de passe vide refusé", file=sys.stderr)
        return 1
    if getpass.getpass("Confirmation: ") != password:
        print("Les mots de passe ne correspondent pas", file=sys.stderr)
        return 1

    hashed = hash_password(password)
    print(f"ADMIN_PASSWORD_HASH={hashed}" if args.env_line else hashed)
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry
    sys.exit(main())
