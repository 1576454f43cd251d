"""Tests des routes `/products` (catalogue)."""

from __future__ import annotations

from monde_delice.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_CREATED,
    HTTP_NOT_FOUND,
    HTTP_OK,
    HTTP_UNAUTHORIZED,
)
from tests.fakes import product_payload


def _create(client, admin_headers, **overrides) -> dict:
    r = client.post("/products", json=product_payload(**overrides), headers=admin_headers)
    assert r.status_code == HTTP_CREATED, r.text
    return r.json()["data"]


def test_create_then_get_roundtrip(client, admin_headers) -> None:
    r = client.post("/products", json=product_payload(), headers=admin_headers)
    assert r.status_code == HTTP_CREATED
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Produit créé avec succès"
    created = body["data"]
    assert created["id"]
    assert created["createdAt"]
    assert created["updatedAt"]

    fetched = client.get(f"/products/{created['id']}").json()["data"]
    expected = product_payload()
    for key, value in expected.items():
        assert fetched[key] == value


def test_create_backfills_defaults(client, admin_headers) -> None:
    created = _create(client, admin_headers, images=[], categories=[])
    assert created["images"] == ["/images/default-cake.jpg"]
    assert created["categories"] == ["Général"]


def test_create_requires_admin(client) -> None:
    r = client.post("/products", json=product_payload())
    assert r.status_code == HTTP_UNAUTHORIZED
    assert client.get("/products").json()["count"] == 0


def test_negative_price_rejected_and_nothing_persisted(client, admin_headers) -> None:
    r = client.post(
        "/products", json=product_payload(name="Cake", price=-1), headers=admin_headers
    )
    assert r.status_code == HTTP_BAD_REQUEST
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Données invalides"
    assert [e["field"] for e in body["errors"]] == ["price"]
    assert client.get("/products").json()["count"] == 0


def test_invalid_fields_are_all_listed(client, admin_headers) -> None:
    r = client.post(
        "/products",
        json=product_payload(name="", price=100_001, images=["pas-une-image"]),
        headers=admin_headers,
    )
    assert r.status_code == HTTP_BAD_REQUEST
    fields = {e["field"] for e in r.json()["errors"]}
    assert fields == {"name", "price", "images.0"}


def test_list_search_and_category(client, admin_headers) -> None:
    _create(client, admin_headers, name="Fraisier", categories=["Gâteaux"])
    _create(
        client,
        admin_headers,
        name="Macarons",
        description="Coques aux amandes, 100% maison.",
        categories=["Mignardises"],
    )

    r = client.get("/products")
    assert r.status_code == HTTP_OK
    body = r.json()
    assert body["count"] == 2
    # plus récent d'abord
    assert [p["name"] for p in body["data"]] == ["Macarons", "Fraisier"]

    assert [p["name"] for p in client.get("/products?search=fraIS").json()["data"]] == [
        "Fraisier"
    ]
    # recherche littérale: "%" n'est pas un joker
    assert [p["name"] for p in client.get("/products?search=100%25").json()["data"]] == [
        "Macarons"
    ]
    assert client.get("/products?search=.*").json()["count"] == 0
    assert [
        p["name"] for p in client.get("/products?category=Mignardises").json()["data"]
    ] == ["Macarons"]
    assert client.get("/products?category=mignardises").json()["count"] == 0


def test_partial_update_merges_and_revalidates(client, admin_headers) -> None:
    created = _create(client, admin_headers)
    r = client.put(
        f"/products/{created['id']}", json={"price": 52}, headers=admin_headers
    )
    assert r.status_code == HTTP_OK
    updated = r.json()["data"]
    assert updated["price"] == 52
    assert updated["name"] == created["name"]
    assert updated["categories"] == created["categories"]

    r = client.put(
        f"/products/{created['id']}", json={"price": -3}, headers=admin_headers
    )
    assert r.status_code == HTTP_BAD_REQUEST
    assert client.get(f"/products/{created['id']}").json()["data"]["price"] == 52


def test_update_clearing_lists_restores_defaults(client, admin_headers) -> None:
    created = _create(client, admin_headers)
    r = client.put(
        f"/products/{created['id']}",
        json={"categories": [], "images": []},
        headers=admin_headers,
    )
    data = r.json()["data"]
    assert data["categories"] == ["Général"]
    assert data["images"] == ["/images/default-cake.jpg"]


def test_delete_and_missing(client, admin_headers) -> None:
    created = _create(client, admin_headers)
    r = client.delete(f"/products/{created['id']}", headers=admin_headers)
    assert r.status_code == HTTP_OK
    assert r.json() == {"success": True, "message": "Produit supprimé avec succès"}

    r = client.get(f"/products/{created['id']}")
    assert r.status_code == HTTP_NOT_FOUND
    assert r.json() == {"success": False, "message": "Produit non trouvé"}
    assert (
        client.delete(f"/products/{created['id']}", headers=admin_headers).status_code
        == HTTP_NOT_FOUND
    )
    assert (
        client.put("/products/inconnu", json={"price": 1}, headers=admin_headers).status_code
        == HTTP_NOT_FOUND
    )


def test_create_and_get_payloads_are_identical(client, admin_headers) -> None:
    """Les horodatages relus sont en UTC, comme dans la réponse de création."""
    created = _create(client, admin_headers)
    fetched = client.get(f"/products/{created['id']}").json()["data"]
    assert fetched == created
    assert created["createdAt"].endswith("Z")

    listed = client.get("/products").json()["data"]
    assert listed == [created]
