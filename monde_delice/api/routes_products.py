"""
Routes du catalogue de produits ("services").

Lecture publique; création, mise à jour et suppression réservées à l'admin.
"""

from fastapi import APIRouter

from monde_delice.api.deps import admin_dep, container_dep
from monde_delice.api.schemas import dump, ok
from monde_delice.core.container import Container
from monde_delice.core.http_constants import HTTP_CREATED
from monde_delice.domain.entities import AdminClaims, ProductCreate, ProductUpdate

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
def list_products(
    search: str | None = None,
    category: str | None = None,
    container: Container = container_dep,
):
    """Liste les produits, plus récents d'abord (recherche texte et filtre de catégorie)."""
    products = container.products.find(search=search or None, category=category or None)
    return ok([dump(p) for p in products], count=len(products))


@router.get("/{product_id}")
def get_product(product_id: str, container: Container = container_dep):
    return ok(dump(container.products.get(product_id)))


@router.post("", status_code=HTTP_CREATED)
def create_product(
    payload: ProductCreate,
    _: AdminClaims = admin_dep,
    container: Container = container_dep,
):
    product = container.products.create(payload)
    return ok(dump(product), message="Produit créé avec succès")


@router.put("/{product_id}")
def update_product(
    product_id: str,
    patch: ProductUpdate,
    _: AdminClaims = admin_dep,
    container: Container = container_dep,
):
    """Mise à jour partielle: les champs fournis sont fusionnés puis l'ensemble revalidé."""
    product = container.products.update(product_id, patch)
    return ok(dump(product), message="Produit mis à jour avec succès")


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    _: AdminClaims = admin_dep,
    container: Container = container_dep,
):
    container.products.delete(product_id)
    return ok(message="Produit supprimé avec succès")
