# ABOUTME: Bearer token verification against the shared Supabase JWT secret.
# ABOUTME: Separates expired tokens from every other validation failure.

from typing import Any

import jwt
import structlog

from feed_shelf.config import Settings
from feed_shelf.errors import AuthExpired, AuthInvalid, AuthMissing, ConfigurationError

log = structlog.get_logger()


def bearer_token(authorization: str | None) -> str:
    """Pull the token out of an Authorization header value.

    Raises AuthMissing when there is no header or the header carries no
    token, and AuthInvalid when the scheme is not Bearer.
    """
    if not authorization:
        raise AuthMissing("Authorization header is missing")
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if not token:
        raise AuthMissing("No token provided")
    if scheme.lower() != "bearer":
        raise AuthInvalid("Authorization scheme is not Bearer")
    return token


class TokenVerifier:
    """Validates HS-signed access tokens issued by Supabase Auth."""

    def __init__(
        self,
        secret: str,
        algorithms: list[str] | None = None,
        audience: str | None = None,
        issuer: str | None = None,
    ) -> None:
        if not secret:
            raise ConfigurationError("JWT secret is not configured")
        self._secret = secret
        self._algorithms = algorithms or ["HS256"]
        self._audience = audience
        self._issuer = issuer

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenVerifier":
        if settings.jwt_secret is None:
            raise ConfigurationError("JWT_SECRET is not configured")
        return cls(
            settings.jwt_secret.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )

    def decode(self, token: str) -> dict[str, Any]:
        """Return the verified claim set.

        Raises AuthExpired for an expired token and AuthInvalid for any
        other failure.
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=self._algorithms,
                audience=self._audience,
                issuer=self._issuer,
                options={"require": ["exp"], "verify_aud": self._audience is not None},
            )
        except jwt.ExpiredSignatureError as e:
            log.info("token_expired")
            raise AuthExpired("Token expired") from e
        except jwt.InvalidTokenError as e:
            log.warning("token_invalid", error=str(e))
            raise AuthInvalid("Invalid token") from e

    def verify(self, token: str) -> str | None:
        """Return the token's subject, or None if the token has expired."""
        try:
            claims = self.decode(token)
        except AuthExpired:
            return None
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise AuthInvalid("Token has no subject")
        return subject
