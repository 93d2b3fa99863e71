"""JWT token utilities.

Two kinds of token are issued with the same secret, told apart by the
``purpose`` claim: session tokens stored in the auth cookie, and short-lived
state tokens that carry the login intent across the provider redirect.
"""

import hmac
import secrets
from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from tether.config import AuthSettings

SESSION_PURPOSE = "session"
STATE_PURPOSE = "oauth_state"


class TokenPayload(BaseModel):
    """Session token payload."""

    account_id: str
    email: str
    exp: datetime


class StatePayload(BaseModel):
    """OAuth state token payload."""

    provider: str
    nonce: str
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(account_id: str, email: str, settings: AuthSettings) -> str:
    """Create a session token for an account.

    Args:
        account_id: Account ID
        email: Account email
        settings: Authentication settings

    Returns:
        Encoded JWT token
    """
    expiry = datetime.now(timezone.utc) + timedelta(days=settings.jwt_expiry_days)

    payload = {
        "account_id": account_id,
        "email": email,
        "purpose": SESSION_PURPOSE,
        "exp": expiry,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a session token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid, expired or not a session token
    """
    payload = _decode(token, settings)
    if payload.get("purpose") != SESSION_PURPOSE:
        raise JWTError("Invalid token")
    return TokenPayload(**payload)


def new_state_nonce() -> str:
    """Generate the per-login nonce that binds a state to one browser."""
    return secrets.token_urlsafe(16)


def create_state_token(provider: str, nonce: str, settings: AuthSettings) -> str:
    """Create a signed, short-lived OAuth state token.

    The same nonce is handed to the browser in a cookie; the callback only
    accepts the state alongside that cookie.

    Args:
        provider: Provider the login was started for
        nonce: Nonce from new_state_nonce()
        settings: Authentication settings

    Returns:
        Encoded JWT token to pass as the OAuth ``state`` parameter
    """
    expiry = datetime.now(timezone.utc) + timedelta(
        minutes=settings.state_expiry_minutes
    )

    payload = {
        "provider": provider,
        "nonce": nonce,
        "purpose": STATE_PURPOSE,
        "exp": expiry,
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_state_token(
    state: str, provider: str, nonce: str | None, settings: AuthSettings
) -> StatePayload:
    """Verify an OAuth state token returned on callback.

    Args:
        state: State parameter from the callback
        provider: Provider the callback arrived for
        nonce: Nonce from the browser's state cookie
        settings: Authentication settings

    Returns:
        State payload if valid

    Raises:
        JWTError: If the state is invalid, expired, issued for another
            provider or not issued to this browser
    """
    payload = _decode(state, settings)
    if payload.get("purpose") != STATE_PURPOSE:
        raise JWTError("Invalid state")
    if payload.get("provider") != provider:
        raise JWTError("State was issued for a different provider")
    expected = str(payload.get("nonce", "")).encode()
    if not nonce or not hmac.compare_digest(expected, nonce.encode()):
        raise JWTError("State was not issued to this client")
    return StatePayload(**payload)


def _decode(token: str, settings: AuthSettings) -> dict:
    try:
        return jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
