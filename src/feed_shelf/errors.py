# ABOUTME: Exception taxonomy shared by services and route handlers.
# ABOUTME: Handlers translate each family into an HTTP status at the request boundary.


class FeedShelfError(Exception):
    """Base class for all feed-shelf errors."""


class ConfigurationError(FeedShelfError):
    """Required configuration is missing or unusable."""


class AuthError(FeedShelfError):
    """The caller could not be authenticated."""


class AuthMissing(AuthError):
    """No Authorization header or bearer token was sent."""


class AuthInvalid(AuthError):
    """The token is malformed, badly signed, or lacks required claims."""


class AuthExpired(AuthError):
    """The token is well formed but past its expiry."""


class UpstreamError(FeedShelfError):
    """Supabase storage or the identity provider reported a failure."""


class IdentityRejected(FeedShelfError):
    """Supabase Auth refused the credentials. The message is relayed to the caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class OpmlError(FeedShelfError):
    """The uploaded OPML could not be turned into feed entries."""


class OpmlParseError(OpmlError):
    """The content is not well-formed XML."""


class OpmlStructureError(OpmlError):
    """The XML parsed but lacks the opml/body/outline structure."""
