"""Tests du script de génération de `ADMIN_PASSWORD_HASH`."""

from __future__ import annotations

from monde_delice.domain.auth import pwd_context
from monde_delice.scripts import hash_admin_password


def _answers(monkeypatch, *values: str) -> None:
    it = iter(values)
    monkeypatch.setattr(hash_admin_password.getpass, "getpass", lambda prompt="": next(it))


def test_prints_verifiable_hash(monkeypatch, capsys) -> None:
    _answers(monkeypatch, "s3cret", "s3cret")
    assert hash_admin_password.main([]) == 0
    out = capsys.readouterr().out.strip()
    assert "s3cret" not in out
    assert pwd_context.verify("s3cret", out)


def test_env_line(monkeypatch, capsys) -> None:
    _answers(monkeypatch, "s3cret", "s3cret")
    assert hash_admin_password.main(["--env-line"]) == 0
    line = capsys.readouterr().out.strip()
    assert line.startswith("ADMIN_PASSWORD_HASH=$pbkdf2-sha256$")


def test_mismatch_and_empty_are_refused(monkeypatch, capsys) -> None:
    _answers(monkeypatch, "a", "b")
    assert hash_admin_password.main([]) == 1
    _answers(monkeypatch, "")
    assert hash_admin_password.main([]) == 1
    assert capsys.readouterr().out == ""
