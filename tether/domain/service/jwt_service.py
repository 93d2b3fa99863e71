"""JWT token domain service."""

import logfire

from tether.config import AuthSettings
from tether.util.jwt import (
    StatePayload,
    TokenPayload,
    create_state_token,
    create_token,
    new_state_nonce,
    verify_state_token,
    verify_token,
)

from .base import Service


class JWTService(Service):
    """Domain service for session and OAuth state tokens."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(self, account_id: str, email: str) -> str:
        """Create session token for an account.

        Args:
            account_id: Account ID
            email: Account email

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_token", account_id=account_id):
            token = create_token(account_id, email, self.auth_settings)
            logfire.info("Session token created", account_id=account_id)
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify session token and extract payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
                logfire.info("Session token verified", account_id=payload.account_id)
                return payload
            except Exception as e:
                logfire.warn("Session token verification failed", error=str(e))
                raise

    def get_account_id_from_token(self, token: str | None) -> str | None:
        """Extract account ID from a session token without raising.

        Args:
            token: JWT token string (optional)

        Returns:
            Account ID if token is valid, None if missing or invalid
        """
        if not token:
            return None

        try:
            return self.verify_token(token).account_id
        except Exception as e:
            logfire.debug(
                "Session verification failed, treating as anonymous", error=str(e)
            )
            return None

    def new_state_nonce(self) -> str:
        """Generate the nonce that binds a login's state to the browser."""
        return new_state_nonce()

    def create_state(self, provider: str, nonce: str) -> str:
        """Create a signed OAuth state for a login redirect.

        Args:
            provider: Provider the login is started for
            nonce: Nonce also handed to the browser in the state cookie

        Returns:
            State token
        """
        return create_state_token(provider, nonce, self.auth_settings)

    def verify_state(self, state: str, provider: str, nonce: str | None) -> StatePayload:
        """Verify the OAuth state returned on callback.

        Args:
            state: State parameter from the callback
            provider: Provider the callback arrived for
            nonce: Nonce from the browser's state cookie, if it sent one

        Returns:
            State payload

        Raises:
            JWTError: If the state is invalid, expired, for another provider
                or not issued to this browser
        """
        with logfire.span("jwt_service.verify_state", provider=provider):
            try:
                return verify_state_token(state, provider, nonce, self.auth_settings)
            except Exception as e:
                logfire.warn("OAuth state rejected", provider=provider, error=str(e))
                raise
