"""OAuth infrastructure providers."""

from dishka import Scope, provide

from tether.adapter.oauth import RealOAuthClient
from tether.config import AuthSettings
from tether.domain.service.auth_service import OAuthClient
from tether.domain.value import AuthProvider
from tether.util.di.base import ProviderBase
from tether.util.error import ConfigurationError

PLACEHOLDER_CREDENTIAL = "CHANGE_ME_IN_PRODUCTION"


class OAuthProvider(ProviderBase):
    """OAuth component base."""

    __mock_component__ = "oauth"


class ProdOAuthProvider(OAuthProvider):
    """Production OAuth provider with one real client per enabled provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_oauth_clients(
        self, auth_settings: AuthSettings
    ) -> dict[AuthProvider, OAuthClient]:
        """Provide dictionary of OAuth clients for enabled providers.

        Returns:
            Dictionary mapping AuthProvider to OAuthClient

        Raises:
            ConfigurationError: If an enabled provider has no credentials
        """
        clients: dict[AuthProvider, OAuthClient] = {}
        for provider in auth_settings.enabled_providers:
            client_settings = auth_settings.client_settings(provider)
            for name in ("client_id", "client_secret"):
                value = getattr(client_settings, name)
                if not value or value == PLACEHOLDER_CREDENTIAL:
                    raise ConfigurationError(
                        f"{provider.value} OAuth {name} must be configured"
                    )
            clients[provider] = RealOAuthClient(provider, client_settings)
        return clients
