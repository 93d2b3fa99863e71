"""Domain layer DI providers."""

from dishka import Scope, provide

from tether.config import AuthSettings
from tether.domain.repository import AccountRepository, IdentityRepository
from tether.domain.service import (
    AccountResolver,
    AccountService,
    AuthService,
    IdentityLinker,
    IdentityService,
    JWTService,
    OAuthClient,
    VerificationPolicy,
)
from tether.domain.value import AuthProvider
from tether.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    The verification policy holds no state and lives for the whole app, so the
    startup check and every request see the same rules.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_verification_policy(self) -> VerificationPolicy:
        """Provide the per-provider verification policy."""
        return VerificationPolicy()

    @provide
    def get_auth_service(
        self, oauth_clients: dict[AuthProvider, OAuthClient]
    ) -> AuthService:
        """Provide multi-provider authentication domain service.

        Args:
            oauth_clients: Dictionary mapping enabled providers to their clients

        Returns:
            AuthService configured with all enabled OAuth clients
        """
        return AuthService(oauth_clients=oauth_clients)

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_account_service(
        self, account_repository: AccountRepository
    ) -> AccountService:
        """Provide account domain service."""
        return AccountService(account_repository=account_repository)

    @provide
    def get_identity_service(
        self, identity_repository: IdentityRepository
    ) -> IdentityService:
        """Provide identity domain service."""
        return IdentityService(identity_repository=identity_repository)

    @provide
    def get_account_resolver(
        self, account_service: AccountService, identity_service: IdentityService
    ) -> AccountResolver:
        """Provide account resolver."""
        return AccountResolver(
            account_service=account_service, identity_service=identity_service
        )

    @provide
    def get_identity_linker(
        self,
        account_service: AccountService,
        identity_service: IdentityService,
        auth_settings: AuthSettings,
    ) -> IdentityLinker:
        """Provide identity linker configured from auth settings."""
        return IdentityLinker(
            account_service=account_service,
            identity_service=identity_service,
            profile_fields=auth_settings.profile_fields,
            identity_conflict=auth_settings.identity_conflict,
        )
