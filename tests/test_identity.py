# ABOUTME: Tests for the Supabase Auth passthrough service.
# ABOUTME: Checks GoTrue error message extraction and upstream failure handling.

import json

import httpx
import pytest
from supabase import AsyncClient

from feed_shelf.errors import IdentityRejected, UpstreamError
from feed_shelf.services.identity import IdentityService, _error_message
from feed_shelf.services.storage import FeedStore


def _service(settings, handler) -> IdentityService:
    return IdentityService(settings, transport=httpx.MockTransport(handler))


async def test_sign_in_posts_credentials(settings):
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"access_token": "at", "user": {"id": "u"}})

    user, token = await _service(settings, handler).sign_in("me@example.com", "pw")

    assert (user, token) == ({"id": "u"}, "at")
    request = captured[0]
    assert str(request.url) == "https://project.supabase.test/auth/v1/token?grant_type=password"
    assert request.headers["authorization"] == "Bearer anon-key"
    assert json.loads(request.content) == {"email": "me@example.com", "password": "pw"}


async def test_sign_in_error_field_on_success_status(settings):
    """An error object in the body is a rejection even with a 200."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": {"message": "Email not confirmed"}})

    with pytest.raises(IdentityRejected) as exc_info:
        await _service(settings, handler).sign_in("me@example.com", "pw")
    assert exc_info.value.message == "Email not confirmed"


async def test_sign_in_server_error_is_upstream(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(UpstreamError):
        await _service(settings, handler).sign_in("me@example.com", "pw")


async def test_sign_in_non_json_body_is_upstream(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>proxy error</html>")

    with pytest.raises(UpstreamError):
        await _service(settings, handler).sign_in("me@example.com", "pw")


async def test_sign_up_unwraps_session_user(settings):
    """With email confirmation off, signup answers with a session around the user."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/auth/v1/signup"
        return httpx.Response(
            200, json={"access_token": "new-user-jwt", "user": {"id": "u", "email": "a@b.c"}}
        )

    user = await _service(settings, handler).sign_up("a@b.c", "pw")

    assert user == {"id": "u", "email": "a@b.c"}


async def test_sign_up_leaves_storage_credentials_alone(settings):
    """A signup session never becomes the credential the feed store sends to PostgREST."""
    client = AsyncClient("https://project.supabase.test", "service-role-key")
    store = FeedStore(client)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"access_token": "new-user-jwt", "user": {"id": "u", "email": "a@b.c"}}
        )

    await _service(settings, handler).sign_up("a@b.c", "pw")

    assert client.postgrest.session.headers["Authorization"] == "Bearer service-role-key"
    await store.close()


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"error": {"message": "nested"}}, "nested"),
        ({"error": "invalid_grant", "error_description": "Invalid login"}, "Invalid login"),
        ({"code": 400, "msg": "Invalid login credentials"}, "Invalid login credentials"),
        ({"error": "bare"}, "bare"),
        ("not a dict", "Authentication failed (400)"),
    ],
)
def test_error_message_extraction(payload, expected):
    assert _error_message(payload, 400) == expected
