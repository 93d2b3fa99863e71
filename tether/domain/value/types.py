"""Domain value objects for Tether.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and normalization.
"""

from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from tether.domain.value.common import RootValueObject, ValueObject


class AuthProvider(str, Enum):
    """Supported external identity providers.

    Adding a member here is not enough to enable a provider: it also needs a
    verification predicate, a payload mapper and client settings.
    """

    GOOGLE = "google"
    FACEBOOK = "facebook"


class Email(RootValueObject[str]):
    """Email address, stored stripped and lower-cased.

    Lookups by email are exact matches on the normalized value, which makes
    them case-insensitive with respect to what the provider sent.
    """

    @field_validator("root", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        """Strip whitespace and lower-case before validation."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("root")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        """Validate the address has a local part and a domain."""
        local, sep, domain = v.rpartition("@")
        if not sep or not local or not domain:
            raise ValueError("Email must contain a local part and a domain")
        if len(v) > 255:
            raise ValueError("Email must be at most 255 characters")
        return v


class OAuthAssertion(ValueObject):
    """Claim payload produced by a provider after a completed handshake.

    Constructed once per callback, consumed by the verification policy and the
    account workflow, never persisted. ``info`` holds the normalized profile
    section and ``extra`` the provider's raw user-info payload; provider
    verification flags (``verified``, ``email_verified``) are read from these
    as the provider sent them.
    """

    provider: AuthProvider
    uid: str = Field(min_length=1, max_length=255)  # Provider-scoped opaque ID
    email: Email | None = None
    name: str | None = None
    avatar_url: str | None = None
    info: dict[str, Any] = Field(default_factory=dict)
    extra: dict[str, Any] = Field(default_factory=dict)
