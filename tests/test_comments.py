"""
Nested comment endpoint tests.  Every comment URL is scoped to its article;
a comment id under the wrong article is a 404.
"""
import pytest
from httpx import AsyncClient


async def _add_comment(client: AsyncClient, article_id: int, body: str = "Nice post") -> dict:
    resp = await client.post(
        f"/articles/{article_id}/comments",
        json={"commenter": "reader", "body": body},
    )
    assert resp.status_code == 201
    return resp.json()


@pytest.mark.asyncio
async def test_create_and_show(async_client: AsyncClient, article: dict):
    comment = await _add_comment(async_client, article["id"], "Great article!")
    assert comment["article_id"] == article["id"]
    assert comment["commenter"] == "reader"

    resp = await async_client.get(f"/articles/{article['id']}/comments/{comment['id']}")
    assert resp.status_code == 200
    assert resp.json()["body"] == "Great article!"


@pytest.mark.asyncio
async def test_article_detail_embeds_comments(async_client: AsyncClient, article: dict):
    for i in range(3):
        await _add_comment(async_client, article["id"], f"Comment {i}")

    resp = await async_client.get(f"/articles/{article['id']}")
    bodies = [c["body"] for c in resp.json()["comments"]]
    assert sorted(bodies) == ["Comment 0", "Comment 1", "Comment 2"]


@pytest.mark.asyncio
async def test_index(async_client: AsyncClient, article: dict):
    for i in range(3):
        await _add_comment(async_client, article["id"], f"Comment {i}")

    resp = await async_client.get(f"/articles/{article['id']}/comments?page_size=2")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 3
    assert [c["body"] for c in data["items"]] == ["Comment 0", "Comment 1"]


@pytest.mark.asyncio
async def test_missing_body_rejected(async_client: AsyncClient, article: dict):
    resp = await async_client.post(
        f"/articles/{article['id']}/comments", json={"commenter": "reader"}
    )
    assert resp.status_code == 422
    assert resp.json()["errors"] == {"body": ["can't be blank"]}


@pytest.mark.asyncio
async def test_comment_on_missing_article(async_client: AsyncClient):
    resp = await async_client.post(
        "/articles/99999/comments", json={"commenter": "ghost", "body": "Boo"}
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_wrong_article_scope(async_client: AsyncClient, article: dict):
    other = (await async_client.post("/articles", json={"title": "Another article"})).json()
    comment = await _add_comment(async_client, article["id"])

    resp = await async_client.get(f"/articles/{other['id']}/comments/{comment['id']}")
    assert resp.status_code == 404
    resp = await async_client.delete(f"/articles/{other['id']}/comments/{comment['id']}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update(async_client: AsyncClient, article: dict):
    comment = await _add_comment(async_client, article["id"])
    resp = await async_client.patch(
        f"/articles/{article['id']}/comments/{comment['id']}", json={"body": "Edited"}
    )
    assert resp.status_code == 200
    assert resp.json()["body"] == "Edited"
    assert resp.json()["commenter"] == "reader"


@pytest.mark.asyncio
async def test_destroy(async_client: AsyncClient, article: dict):
    comment = await _add_comment(async_client, article["id"])
    url = f"/articles/{article['id']}/comments/{comment['id']}"

    assert (await async_client.delete(url)).status_code == 204
    assert (await async_client.get(url)).status_code == 404
    # The article itself is untouched.
    assert (await async_client.get(f"/articles/{article['id']}")).status_code == 200


@pytest.mark.asyncio
async def test_forms(async_client: AsyncClient, article: dict):
    resp = await async_client.get(f"/articles/{article['id']}/comments/new")
    assert resp.status_code == 200
    assert resp.json()["path"] == f"/articles/{article['id']}/comments"

    comment = await _add_comment(async_client, article["id"], "Original")
    resp = await async_client.get(f"/articles/{article['id']}/comments/{comment['id']}/edit")
    assert resp.status_code == 200
    assert resp.json()["values"] == {"commenter": "reader", "body": "Original"}
