"""
Route table tests: named aliases, the restricted sessions resource and the
404 returned for anything unmatched.

A request counts as routed unless it comes back as the router's own
``No route matches`` 404; a handler's "record not found" 404 still means the
route exists.
"""
import pytest
from httpx import AsyncClient, Response


def _routed(resp: Response) -> bool:
    if resp.status_code != 404:
        return True
    return not resp.json()["message"].startswith("No route matches")


def _seven_actions(base: str) -> list[tuple[str, str]]:
    return [
        ("GET", base),
        ("GET", f"{base}/new"),
        ("POST", base),
        ("GET", f"{base}/1"),
        ("GET", f"{base}/1/edit"),
        ("PUT", f"{base}/1"),
        ("PATCH", f"{base}/1"),
        ("DELETE", f"{base}/1"),
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("method, path", [
    *_seven_actions("/users"),
    *_seven_actions("/articles"),
    *_seven_actions("/articles/1/comments"),
])
async def test_resources_have_seven_actions(async_client: AsyncClient, method: str, path: str):
    resp = await async_client.request(method, path, json={})
    assert _routed(resp), f"{method} {path} is not routed"


@pytest.mark.asyncio
@pytest.mark.parametrize("method, path", [
    ("GET", "/sessions/new"),
    ("POST", "/sessions"),
    ("DELETE", "/sessions/1"),
])
async def test_sessions_new_create_destroy_routed(async_client: AsyncClient, method: str, path: str):
    resp = await async_client.request(method, path, json={"username": "nobody"})
    assert _routed(resp)


@pytest.mark.asyncio
@pytest.mark.parametrize("method, path", [
    ("GET", "/sessions"),
    ("GET", "/sessions/1"),
    ("GET", "/sessions/1/edit"),
    ("PUT", "/sessions/1"),
    ("PATCH", "/sessions/1"),
])
async def test_sessions_other_actions_unrouted(async_client: AsyncClient, method: str, path: str):
    resp = await async_client.request(method, path, json={})
    assert not _routed(resp)


@pytest.mark.asyncio
async def test_login_matches_new_session(async_client: AsyncClient):
    login = await async_client.get("/login")
    new_session = await async_client.get("/sessions/new")
    assert login.status_code == new_session.status_code == 200
    assert login.json() == new_session.json()


@pytest.mark.asyncio
async def test_logout_routed(async_client: AsyncClient):
    resp = await async_client.delete("/logout")
    assert resp.status_code == 204


@pytest.mark.asyncio
async def test_signup_matches_new_user(async_client: AsyncClient):
    signup = await async_client.get("/signup")
    new_user = await async_client.get("/users/new")
    assert signup.status_code == new_user.status_code == 200
    assert signup.json() == new_user.json()


@pytest.mark.asyncio
async def test_root_and_welcome_index(async_client: AsyncClient):
    root = await async_client.get("/")
    welcome = await async_client.get("/welcome/index")
    assert root.status_code == welcome.status_code == 200
    assert root.json() == welcome.json()
    assert root.json()["links"]["signup"] == "/signup"


@pytest.mark.asyncio
async def test_login_form(async_client: AsyncClient):
    resp = await async_client.get("/login")
    assert resp.status_code == 200
    assert resp.json()["fields"]["username"]["required"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize("method, path", [
    ("GET", "/sessions/5"),
    ("PUT", "/sessions/5"),
    ("GET", "/sessions"),
    ("GET", "/sessions/5/edit"),
    ("GET", "/logout"),
    ("GET", "/nowhere"),
    ("GET", "/articles/not-a-number"),
    ("POST", "/articles/1/comments/2/extra"),
])
async def test_unmatched_routes_are_not_found(async_client: AsyncClient, method: str, path: str):
    resp = await async_client.request(method, path)
    assert resp.status_code == 404
    body = resp.json()
    assert body["error"] == "not_found"
    assert path in body["message"]
