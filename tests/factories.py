"""Builders for domain objects used across tests."""

from typing import Any
from uuid import uuid4

from tether.domain.model import Account
from tether.domain.value import AccountId, AuthProvider, Email, OAuthAssertion
from tether.util.credential import generate_unusable_credential


def make_assertion(
    provider: AuthProvider = AuthProvider.GOOGLE,
    uid: str = "uid-1",
    email: str | None = "alice@example.com",
    verified: bool = True,
    name: str | None = "Alice",
    avatar_url: str | None = None,
    **extra: Any,
) -> OAuthAssertion:
    """Build an assertion the way the provider payload mappers would.

    ``verified`` lands where each provider's verification rule looks for it.
    """
    if provider == AuthProvider.GOOGLE:
        info: dict[str, Any] = {"email": email, "name": name}
        raw = {"sub": uid, "email_verified": verified, **extra}
    else:
        info = {"email": email, "name": name, "verified": verified}
        raw = {"id": uid, **extra}

    return OAuthAssertion(
        provider=provider,
        uid=uid,
        email=Email(email) if email else None,
        name=name,
        avatar_url=avatar_url,
        info=info,
        extra=raw,
    )


def make_account(
    email: str = "alice@example.com",
    confirmed: bool = True,
    display_name: str | None = None,
    avatar_url: str | None = None,
) -> Account:
    """Build an OAuth-only account."""
    account = Account(
        id=AccountId(uuid4()),
        email=Email(email),
        display_name=display_name,
        avatar_url=avatar_url,
        credential_hash=generate_unusable_credential(),
    )
    return account.confirm() if confirmed else account
