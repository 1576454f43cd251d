# Schémas et enveloppes de réponse exposés par l'API.

from typing import Any

from pydantic import BaseModel


class AdminLoginPayload(BaseModel):
    """Corps de `POST /admin/validate`."""

    password: str | None = None


def dump(model: BaseModel) -> dict[str, Any]:
    """Sérialise une entité en JSON camelCase."""
    return model.model_dump(by_alias=True, mode="json")


def ok(data: Any = None, message: str | None = None, **extra: Any) -> dict[str, Any]:
    """Enveloppe de succès `{success: true, data, ...}`."""
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    body.update(extra)
    if message:
        body["message"] = message
    return body


def fail(message: str, errors: list[dict[str, str]] | None = None) -> dict[str, Any]:
    """Enveloppe d'échec `{success: false, message, errors?}`."""
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body
