"""Mock OAuth providers for testing."""

from dishka import Scope, provide

from tether.adapter.oauth import MockOAuthClient
from tether.config import AuthSettings
from tether.domain.service.auth_service import OAuthClient
from tether.domain.value import AuthProvider
from tether.util.di.infrastructure.oauth import OAuthProvider


class MockOAuthProvider(OAuthProvider):
    """Mock OAuth provider using deterministic mock clients."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_oauth_clients(
        self, auth_settings: AuthSettings
    ) -> dict[AuthProvider, OAuthClient]:
        """Provide mock OAuth clients for enabled providers."""
        return {
            provider: MockOAuthClient(provider)
            for provider in auth_settings.enabled_providers
        }
