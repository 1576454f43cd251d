"""Tests du client de likes: état confirmé par le serveur ou local non confirmé."""

from __future__ import annotations

import httpx
import pytest

from monde_delice.client.likes import LikeClient, LikeClientError, LocalLikeStore
from monde_delice.domain.entities import BlogCreate
from tests.fakes import blog_payload


def _offline_client(local: LocalLikeStore | None = None, status: int | None = None) -> LikeClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if status is None:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(status, text="indisponible")

    http = httpx.Client(base_url="http://api.test", transport=httpx.MockTransport(handler))
    return LikeClient("http://api.test", local=local, client=http)


def test_confirmed_state_from_server(client, container) -> None:
    blog = container.blogs.create(BlogCreate.model_validate(blog_payload()))
    likes = LikeClient("http://testserver", client=client)

    state = likes.toggle(blog.id)
    assert state.confirmed is True
    assert state.liked is True
    assert state.total_likes == 1
    assert likes.local.is_liked(blog.id)

    state = likes.status(blog.id)
    assert (state.confirmed, state.liked, state.total_likes) == (True, True, 1)

    state = likes.toggle(blog.id)
    assert (state.liked, state.total_likes) == (False, 0)
    assert not likes.local.is_liked(blog.id)


@pytest.mark.parametrize("status", [None, 503])
def test_unreachable_server_falls_back_to_local(status) -> None:
    likes = _offline_client(status=status)

    state = likes.toggle("blog1")
    assert state.confirmed is False
    assert state.liked is True
    assert state.total_likes is None

    assert likes.status("blog1").liked is True
    assert likes.toggle("blog1").liked is False


def test_confirmed_response_overrides_local_state(client, container) -> None:
    blog = container.blogs.create(BlogCreate.model_validate(blog_payload()))
    local = LocalLikeStore()
    local.set(blog.id, True)

    state = LikeClient("http://testserver", local=local, client=client).status(blog.id)
    assert state.confirmed is True
    assert state.liked is False
    assert not local.is_liked(blog.id)


def test_client_error_is_not_masked(client) -> None:
    likes = LikeClient("http://testserver", client=client)
    with pytest.raises(LikeClientError) as exc:
        likes.toggle("inconnu")
    assert exc.value.status_code == 404
    assert exc.value.message == "Blog non trouvé"
    assert not likes.local.is_liked("inconnu")


def test_local_store_persists(tmp_path) -> None:
    path = tmp_path / "likes.json"
    LocalLikeStore(path).set("blog1", True)
    assert LocalLikeStore(path).is_liked("blog1")

    path.write_text("{corrompu", encoding="utf-8")
    assert not LocalLikeStore(path).is_liked("blog1")
