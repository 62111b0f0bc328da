# ABOUTME: Passthrough to Supabase Auth (GoTrue) for signup and password signin.
# ABOUTME: Talks to the auth endpoints with httpx; the storage client never sees auth sessions.

from typing import Any

import httpx
import structlog

from feed_shelf.config import Settings
from feed_shelf.errors import IdentityRejected, UpstreamError

log = structlog.get_logger()


def _error_message(payload: Any, status_code: int) -> str:
    """Pick the human-readable message out of a GoTrue error body."""
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        for key in ("error_description", "msg", "message"):
            if payload.get(key):
                return str(payload[key])
        if isinstance(error, str) and error:
            return error
    return f"Authentication failed ({status_code})"


class IdentityService:
    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    async def _post(
        self, action: str, path: str, body: dict[str, Any], params: dict[str, str] | None = None
    ) -> dict[str, Any]:
        """POST to the auth API and return the JSON body of an accepted request.

        Raises IdentityRejected when Supabase refuses the request and
        UpstreamError when it cannot be reached or fails.
        """
        key = self._settings.supabase_key.get_secret_value() if self._settings.supabase_key else ""
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.request_timeout,
                headers={"apikey": key, "Authorization": f"Bearer {key}"},
                transport=self._transport,
            ) as client:
                response = await client.post(
                    f"{self._settings.auth_url}{path}", params=params, json=body
                )
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            log.error(f"{action}_request_error", error=str(e))
            raise UpstreamError(f"{action} request failed: {e}") from e

        if response.is_server_error:
            log.error(f"{action}_upstream_error", status=response.status_code)
            raise UpstreamError(f"{action} failed with status {response.status_code}")
        if response.is_error or not isinstance(payload, dict) or payload.get("error"):
            message = _error_message(payload, response.status_code)
            log.warning(f"{action}_rejected", status=response.status_code, error=message)
            raise IdentityRejected(message)

        log.info(f"{action}_ok")
        return payload

    async def sign_up(self, email: str, password: str) -> dict[str, Any]:
        """Register a new user and return the Supabase user object."""
        payload = await self._post("signup", "/signup", {"email": email, "password": password})
        # With email confirmation off GoTrue answers with a session wrapping the user.
        if "access_token" in payload and isinstance(payload.get("user"), dict):
            return payload["user"]
        return payload

    async def sign_in(self, email: str, password: str) -> tuple[Any, str]:
        """Exchange email/password for an access token; returns (user, access_token)."""
        payload = await self._post(
            "signin",
            "/token",
            {"email": email, "password": password},
            params={"grant_type": "password"},
        )
        return payload.get("user"), payload.get("access_token")
