"""Domain value objects for Tether."""

from tether.domain.value.identifiers import AccountId, IdentityId
from tether.domain.value.types import AuthProvider, Email, OAuthAssertion

__all__ = [
    # Identifiers
    "AccountId",
    "IdentityId",
    # Types
    "AuthProvider",
    "Email",
    "OAuthAssertion",
]
