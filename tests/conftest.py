# ABOUTME: Shared test fixtures for feed-shelf.
# ABOUTME: Provides settings, token factory, an in-memory feed store, and an ASGI test client.

import time
from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import jwt
import pytest

from feed_shelf.config import Settings
from feed_shelf.errors import UpstreamError
from feed_shelf.models import FeedRecord
from feed_shelf.services.identity import IdentityService
from feed_shelf.web.app import create_app

JWT_SECRET = "test-secret-that-is-at-least-32-bytes-long"

_SAMPLE_OPML = """\
<?xml version="1.0" encoding="UTF-8"?>
<opml version="2.0">
  <head><title>My Feeds</title></head>
  <body>
    <outline text="Tech" title="Tech">
      <outline text="Simon Willison"
               type="rss"
               xmlUrl="https://simonwillison.net/atom/everything/"
               htmlUrl="https://simonwillison.net/"
               description="Weblog" />
      <outline text="Julia Evans"
               type="rss"
               xmlUrl="https://jvns.ca/atom.xml"
               htmlUrl="https://jvns.ca/" />
    </outline>
    <outline text="Empty" title="Empty" />
    <outline text="News" title="News">
      <outline text="Hacker News"
               type="rss"
               xmlUrl="https://hnrss.org/frontpage" />
    </outline>
  </body>
</opml>
"""


@pytest.fixture
def sample_opml() -> str:
    """Two categories with feeds plus one empty category."""
    return _SAMPLE_OPML


class InMemoryFeedStore:
    """Stands in for FeedStore; records calls instead of hitting Supabase."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.rows: list[dict[str, Any]] = []
        self.calls: list[str] = []

    async def insert_feeds(self, records: list[FeedRecord]) -> list[dict[str, Any]]:
        self.calls.append("insert_feeds")
        if self.fail:
            raise UpstreamError("insert failed")
        inserted = [{"id": len(self.rows) + i + 1, **r.to_row()} for i, r in enumerate(records)]
        self.rows.extend(inserted)
        return inserted

    async def list_feeds(self, user_id: str) -> list[dict[str, Any]]:
        self.calls.append("list_feeds")
        if self.fail:
            raise UpstreamError("select failed")
        return [row for row in self.rows if row["user_id"] == user_id]


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment, uploads under tmp_path."""
    return Settings(
        _env_file=None,
        supabase_url="https://project.supabase.test",
        supabase_key="anon-key",
        jwt_secret=JWT_SECRET,
        upload_dir=tmp_path / "uploads",
    )


@pytest.fixture
def jwt_secret() -> str:
    return JWT_SECRET


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Build signed access tokens; expires_in may be negative for expired ones."""

    def _make(
        sub: str | None = "user-123",
        expires_in: int = 3600,
        secret: str = JWT_SECRET,
        **claims: Any,
    ) -> str:
        payload: dict[str, Any] = {"exp": int(time.time()) + expires_in, **claims}
        if sub is not None:
            payload["sub"] = sub
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make


@pytest.fixture
def store() -> InMemoryFeedStore:
    return InMemoryFeedStore()


@pytest.fixture
def identity(settings) -> IdentityService:
    return IdentityService(settings)


@pytest.fixture
def app(settings, store, identity):
    return create_app(settings, store=store, identity=identity)


@pytest.fixture
async def client(app) -> AsyncGenerator[httpx.AsyncClient]:
    """HTTP client bound to the app without a network socket."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
