"""Authentication domain service."""

from tether.domain.error import UnsupportedProviderError
from tether.domain.value import AuthProvider, OAuthAssertion

from .base import Service


class OAuthClient:
    """Generic OAuth client interface for all providers."""

    async def initiate_authorization(self, state: str) -> str:
        """Initiate OAuth authorization flow.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        raise NotImplementedError

    async def complete_authorization(self, code: str, state: str) -> OAuthAssertion:
        """Complete OAuth authorization flow.

        Args:
            code: Authorization code from OAuth callback
            state: State parameter for verification

        Returns:
            Assertion built from the provider's user info
        """
        raise NotImplementedError


class AuthService(Service):
    """Domain service for multi-provider handshakes.

    Only providers enabled in configuration have a client.
    """

    def __init__(self, oauth_clients: dict[AuthProvider, OAuthClient]) -> None:
        """Initialize auth service.

        Args:
            oauth_clients: Map of provider to OAuth client implementation
        """
        self.oauth_clients = oauth_clients

    def _client(self, provider: AuthProvider) -> OAuthClient:
        client = self.oauth_clients.get(provider)
        if not client:
            raise UnsupportedProviderError(provider.value)
        return client

    async def initiate_login(self, provider: AuthProvider, state: str) -> str:
        """Initiate OAuth login flow for a provider.

        Args:
            provider: Provider to use
            state: Signed state parameter

        Returns:
            Authorization URL to redirect user to

        Raises:
            UnsupportedProviderError: If provider is not enabled
        """
        return await self._client(provider).initiate_authorization(state)

    async def complete_login(
        self, provider: AuthProvider, code: str, state: str
    ) -> OAuthAssertion:
        """Complete OAuth login flow for a provider.

        Args:
            provider: Provider used
            code: Authorization code from OAuth callback
            state: State parameter

        Returns:
            Provider assertion

        Raises:
            UnsupportedProviderError: If provider is not enabled
        """
        return await self._client(provider).complete_authorization(code, state)
