"""Domain services."""

from .account_resolver import AccountResolver, ResolvedAccount
from .account_service import AccountService
from .auth_service import AuthService, OAuthClient
from .base import Service
from .identity_linker import IdentityLinker, LinkedIdentity
from .identity_service import IdentityService
from .jwt_service import JWTService
from .verification_policy import (
    DEFAULT_VERIFICATION_RULES,
    VerificationPolicy,
)

__all__ = [
    "AccountResolver",
    "AccountService",
    "AuthService",
    "DEFAULT_VERIFICATION_RULES",
    "IdentityLinker",
    "IdentityService",
    "JWTService",
    "LinkedIdentity",
    "OAuthClient",
    "ResolvedAccount",
    "Service",
    "VerificationPolicy",
]
