"""
Routes des réalisations (blogs) et de leurs likes.

- CRUD: lecture publique, écriture réservée à l'admin.
- Likes: publics, l'identité du visiteur est son adresse IP (voir `client_identity`).
"""

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import HTTPException

from monde_delice.api.deps import admin_dep, client_identity, container_dep
from monde_delice.api.schemas import dump, ok
from monde_delice.core.container import Container
from monde_delice.core.http_constants import HTTP_BAD_REQUEST, HTTP_CREATED
from monde_delice.domain.entities import AdminClaims, BlogCreate, BlogUpdate
from monde_delice.domain.errors import ConflictError

router = APIRouter(prefix="/blogs", tags=["blogs"])
identity_dep = Depends(client_identity)


@router.get("")
def list_blogs(
    search: str | None = None,
    tag: str | None = None,
    featured: str | None = None,
    container: Container = container_dep,
):
    """Liste les réalisations, plus récentes d'abord.

    `featured=true` restreint aux réalisations mises en avant; toute autre
    valeur est ignorée.
    """
    blogs = container.blogs.find(
        search=search or None, tag=tag or None, featured=featured == "true"
    )
    return ok([dump(b) for b in blogs], count=len(blogs))


@router.get("/slug/{slug}")
def get_blog_by_slug(slug: str, container: Container = container_dep):
    return ok(dump(container.blogs.get_by_slug(slug)))


@router.get("/{blog_id}")
def get_blog(blog_id: str, container: Container = container_dep):
    return ok(dump(container.blogs.get(blog_id)))


@router.post("", status_code=HTTP_CREATED)
def create_blog(
    payload: BlogCreate,
    _: AdminClaims = admin_dep,
    container: Container = container_dep,
):
    blog = container.blogs.create(payload)
    return ok(dump(blog), message="Blog créé avec succès")


@router.put("/{blog_id}")
def update_blog(
    blog_id: str,
    patch: BlogUpdate,
    _: AdminClaims = admin_dep,
    container: Container = container_dep,
):
    blog = container.blogs.update(blog_id, patch)
    return ok(dump(blog), message="Blog mis à jour avec succès")


@router.delete("/{blog_id}")
def delete_blog(
    blog_id: str,
    _: AdminClaims = admin_dep,
    container: Container = container_dep,
):
    container.blogs.delete(blog_id)
    return ok(message="Blog supprimé avec succès")


# --- likes ---------------------------------------------------------------


@router.get("/{blog_id}/like-status")
def like_status(
    blog_id: str,
    identity: str = identity_dep,
    container: Container = container_dep,
):
    return ok(dump(container.likes.status(blog_id, identity)))


@router.post("/{blog_id}/like")
def like_blog(
    blog_id: str,
    request: Request,
    identity: str = identity_dep,
    container: Container = container_dep,
):
    """Ajoute un like; 400 si ce visiteur a déjà liké."""
    try:
        total = container.likes.like(
            blog_id, identity, user_agent=request.headers.get("user-agent")
        )
    except ConflictError as err:
        raise HTTPException(status_code=HTTP_BAD_REQUEST, detail=err.message) from err
    return ok({"likes": total}, message="Like ajouté avec succès")


@router.delete("/{blog_id}/like")
def unlike_blog(
    blog_id: str,
    identity: str = identity_dep,
    container: Container = container_dep,
):
    """Retire le like du visiteur; 404 s'il n'existe pas."""
    total = container.likes.unlike(blog_id, identity)
    return ok({"likes": total}, message="Like retiré avec succès")


@router.post("/{blog_id}/like/toggle")
def toggle_like(
    blog_id: str,
    request: Request,
    identity: str = identity_dep,
    container: Container = container_dep,
):
    result = container.likes.toggle(
        blog_id, identity, user_agent=request.headers.get("user-agent")
    )
    return ok(dump(result))
