"""User endpoint tests: CRUD, uniqueness conflicts and article detachment."""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_user(async_client: AsyncClient):
    resp = await async_client.post("/users", json={
        "username": "newuser",
        "email": "newuser@example.com",
    })
    assert resp.status_code == 201
    user = resp.json()
    assert user["username"] == "newuser"
    assert user["email"] == "newuser@example.com"
    assert "id" in user
    assert "created_at" in user


@pytest.mark.asyncio
async def test_create_user_missing_fields(async_client: AsyncClient):
    resp = await async_client.post("/users", json={"username": "noemail"})
    assert resp.status_code == 422
    assert resp.json()["errors"] == {"email": ["can't be blank"]}


@pytest.mark.asyncio
@pytest.mark.parametrize("second", [
    {"username": "dup_user", "email": "other@example.com"},
    {"username": "other_user", "email": "dup@example.com"},
])
async def test_duplicate_user_returns_409(async_client: AsyncClient, second: dict):
    first = await async_client.post("/users", json={
        "username": "dup_user", "email": "dup@example.com",
    })
    assert first.status_code == 201

    resp = await async_client.post("/users", json=second)
    assert resp.status_code == 409
    assert resp.json()["error"] == "conflict"


@pytest.mark.asyncio
async def test_index(async_client: AsyncClient):
    assert (await async_client.get("/users")).json() == []
    for name in ("alice", "bob"):
        await async_client.post("/users", json={"username": name, "email": f"{name}@example.com"})

    resp = await async_client.get("/users")
    assert resp.status_code == 200
    assert {u["username"] for u in resp.json()} == {"alice", "bob"}


@pytest.mark.asyncio
async def test_show_includes_articles(async_client: AsyncClient, user: dict, article: dict):
    resp = await async_client.get(f"/users/{user['id']}")
    assert resp.status_code == 200
    detail = resp.json()
    assert [a["id"] for a in detail["articles"]] == [article["id"]]


@pytest.mark.asyncio
async def test_show_missing_user(async_client: AsyncClient):
    resp = await async_client.get("/users/99999")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update(async_client: AsyncClient, user: dict):
    resp = await async_client.patch(f"/users/{user['id']}", json={"email": "moved@example.com"})
    assert resp.status_code == 200
    assert resp.json()["email"] == "moved@example.com"
    assert resp.json()["username"] == "author"


@pytest.mark.asyncio
async def test_update_blank_username_rejected(async_client: AsyncClient, user: dict):
    resp = await async_client.put(f"/users/{user['id']}", json={"username": ""})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_edit_form(async_client: AsyncClient, user: dict):
    resp = await async_client.get(f"/users/{user['id']}/edit")
    assert resp.status_code == 200
    assert resp.json()["values"] == {"username": "author", "email": "author@example.com"}


@pytest.mark.asyncio
async def test_destroy_keeps_articles(async_client: AsyncClient, user: dict, article: dict):
    resp = await async_client.delete(f"/users/{user['id']}")
    assert resp.status_code == 204
    assert (await async_client.get(f"/users/{user['id']}")).status_code == 404

    resp = await async_client.get(f"/articles/{article['id']}")
    assert resp.status_code == 200
    assert resp.json()["user_id"] is None
