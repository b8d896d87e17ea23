from contextlib import asynccontextmanager

import pytest
from aiohttp import web, test_utils

from image_insight.client import ANONYMOUS, ApiClientError, ApiSession, ImageInsightClient

TOKEN = "token-123"
USER = {"id": "u1", "email": "test@example.com"}


def _authorized(request):
    return request.headers.get("Authorization") == f"Bearer {TOKEN}"


async def login(request):
    body = await request.json()
    if body.get("password") != "password123":
        return web.json_response({"success": False, "message": "Invalid credentials"}, status=401)
    return web.json_response({"success": True, "token": TOKEN, "user": USER})


async def analyze(request):
    if not _authorized(request):
        return web.json_response({"success": False, "message": "Invalid token"}, status=401)
    body = await request.json()
    return web.json_response({
        "success": True,
        "data": {"id": "r1", "imageUrl": "https://img/1.png", "aiResponse": {"description": body["imageBase64"], "emotions": "M", "tags": []}},
    })


async def history(request):
    if not _authorized(request):
        return web.json_response({"success": False, "message": "Invalid token"}, status=401)
    return web.json_response({"success": True, "count": 1, "data": [{"id": "r1"}]})


async def delete_item(request):
    if request.match_info["record_id"] != "r1":
        return web.json_response({"success": False, "message": "Image analysis not found"}, status=404)
    return web.json_response({"success": True, "message": "Image analysis deleted"})


async def broken(request):
    return web.Response(text="<html>502 Bad Gateway</html>", status=502)


@asynccontextmanager
async def api_client():
    app = web.Application()
    app.router.add_post("/api/auth/login", login)
    app.router.add_post("/api/analyze", analyze)
    app.router.add_get("/api/history", history)
    app.router.add_delete("/api/history/{record_id}", delete_item)
    app.router.add_get("/api/health", broken)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        async with ImageInsightClient(str(server.make_url("/api")), timeout=5) as client:
            yield client
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_login_returns_explicit_session_used_by_later_calls():
    async with api_client() as client:
        session = await client.login("test@example.com", "password123")
        assert session == ApiSession(token=TOKEN, user=USER)

        result = await client.analyze_image(session, "aGVsbG8=")
        assert result["aiResponse"]["description"] == "aGVsbG8="
        assert await client.get_history(session) == [{"id": "r1"}]
        await client.delete_history_item(session, "r1")


@pytest.mark.asyncio
async def test_server_failure_message_is_surfaced():
    async with api_client() as client:
        with pytest.raises(ApiClientError) as exc:
            await client.login("test@example.com", "nope")
        assert exc.value.message == "Invalid credentials"
        assert exc.value.status == 401

        session = await client.login("test@example.com", "password123")
        with pytest.raises(ApiClientError) as exc:
            await client.delete_history_item(session, "missing")
        assert exc.value.status == 404


@pytest.mark.asyncio
async def test_non_json_error_uses_fallback_message():
    async with api_client() as client:
        with pytest.raises(ApiClientError) as exc:
            await client.health()
        assert exc.value.status == 502
        assert exc.value.message == "Request failed"


@pytest.mark.asyncio
async def test_logout_drops_credentials():
    async with api_client() as client:
        session = await client.login("test@example.com", "password123")
        session = await client.logout(session)
        assert session is ANONYMOUS
        with pytest.raises(ApiClientError) as exc:
            await client.get_history(session)
        assert exc.value.message == "Not authenticated"


@pytest.mark.asyncio
async def test_stale_token_is_rejected_by_server():
    async with api_client() as client:
        with pytest.raises(ApiClientError) as exc:
            await client.get_history(ApiSession(token="stale"))
        assert exc.value.status == 401
