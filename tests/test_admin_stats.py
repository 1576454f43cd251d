"""Tests du tableau de bord admin (`GET /admin/stats`)."""

from monde_delice.core.http_constants import HTTP_OK
from monde_delice.domain.entities import BlogCreate, ImageRegistration, ProductCreate
from tests.fakes import blog_payload, product_payload


def test_stats_empty(client, admin_headers):
    r = client.get("/admin/stats", headers=admin_headers)
    assert r.status_code == HTTP_OK
    assert r.json() == {
        "success": True,
        "data": {"totalProducts": 0, "totalBlogs": 0, "totalImages": 0, "featuredBlogs": 0},
    }


def test_stats_counts_each_collection(client, admin_headers, container):
    container.products.create(ProductCreate.model_validate(product_payload()))
    container.products.create(ProductCreate.model_validate(product_payload(name="Tarte")))
    container.blogs.create(BlogCreate.model_validate(blog_payload(featured=True)))
    container.blogs.create(BlogCreate.model_validate(blog_payload(title="Baptême de Jules")))
    container.images.register(ImageRegistration(url="https://utfs.io/f/a.jpg", filename="a.jpg"))

    data = client.get("/admin/stats", headers=admin_headers).json()["data"]
    assert data == {"totalProducts": 2, "totalBlogs": 2, "totalImages": 1, "featuredBlogs": 1}
