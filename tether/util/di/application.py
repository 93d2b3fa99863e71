"""Application layer DI providers."""

from dishka import Scope, provide

from tether.application.usecase.auth import (
    GetCurrentAccountUseCase,
    OAuthCallbackUseCase,
    OAuthOrchestrator,
)
from tether.config import AuthSettings
from tether.domain.repository import UnitOfWork
from tether.domain.service import (
    AccountResolver,
    AccountService,
    AuthService,
    IdentityLinker,
    IdentityService,
    JWTService,
    VerificationPolicy,
)
from tether.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_oauth_orchestrator(
        self,
        verification_policy: VerificationPolicy,
        account_resolver: AccountResolver,
        identity_linker: IdentityLinker,
        account_service: AccountService,
        unit_of_work: UnitOfWork,
        auth_settings: AuthSettings,
    ) -> OAuthOrchestrator:
        """Provide sign-in/connect orchestrator."""
        return OAuthOrchestrator(
            verification_policy=verification_policy,
            account_resolver=account_resolver,
            identity_linker=identity_linker,
            account_service=account_service,
            unit_of_work=unit_of_work,
            auth_settings=auth_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_oauth_callback_use_case(
        self,
        auth_service: AuthService,
        jwt_service: JWTService,
        orchestrator: OAuthOrchestrator,
    ) -> OAuthCallbackUseCase:
        """Provide OAuth callback use case."""
        return OAuthCallbackUseCase(
            auth_service=auth_service,
            jwt_service=jwt_service,
            orchestrator=orchestrator,
        )

    @provide(scope=Scope.REQUEST)
    def get_current_account_use_case(
        self,
        jwt_service: JWTService,
        account_service: AccountService,
        identity_service: IdentityService,
    ) -> GetCurrentAccountUseCase:
        """Provide get current account use case."""
        return GetCurrentAccountUseCase(
            jwt_service=jwt_service,
            account_service=account_service,
            identity_service=identity_service,
        )
