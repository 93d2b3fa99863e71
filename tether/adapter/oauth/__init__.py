"""OAuth 2.0 provider adapter."""

from .client import MockOAuthClient, OAuthClientError, RealOAuthClient
from .payload import PAYLOAD_MAPPERS, facebook_assertion, google_assertion

__all__ = [
    "MockOAuthClient",
    "OAuthClientError",
    "PAYLOAD_MAPPERS",
    "RealOAuthClient",
    "facebook_assertion",
    "google_assertion",
]
