"""OAuth callback use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from tether.application.usecase.base import BaseUseCase
from tether.domain.service import AuthService, JWTService
from tether.domain.value import AccountId, AuthProvider

from .orchestrator import OAuthFlow, OAuthFlowState, OAuthOrchestrator


class OAuthCallbackRequest(BaseModel):
    """Callback parameters plus the caller's current session, if any."""

    provider: AuthProvider
    code: str  # OAuth authorization code
    state: str  # Signed state issued when the login was initiated
    state_nonce: str | None = None  # From the state cookie set at login
    session_token: str | None = None  # Existing auth cookie (connect flow)


class OAuthCallbackResponse(BaseModel):
    """Result of a resolved callback."""

    state: OAuthFlowState
    flow: OAuthFlow
    account_id: str
    email: str
    created: bool
    token: str | None = None  # New session token (sign-in flow only)


class OAuthCallbackUseCase(
    BaseUseCase[OAuthCallbackRequest, OAuthCallbackResponse]
):
    """Use case for completing a provider login or connect.

    Steps:
    1. Verify the signed state matches the provider and this browser
    2. Complete the handshake to obtain the assertion
    3. Run the orchestrator, connecting when a valid session is present
    4. Issue a session token for sign-ins
    """

    def __init__(
        self,
        auth_service: AuthService,
        jwt_service: JWTService,
        orchestrator: OAuthOrchestrator,
    ) -> None:
        """Initialize OAuth callback use case.

        Args:
            auth_service: Authentication domain service (handles all providers)
            jwt_service: JWT token domain service
            orchestrator: Sign-in/connect orchestrator
        """
        self.auth_service = auth_service
        self.jwt_service = jwt_service
        self.orchestrator = orchestrator

    async def execute(self, request: OAuthCallbackRequest) -> OAuthCallbackResponse:
        """Execute the callback flow.

        Args:
            request: Callback parameters

        Returns:
            Callback response with the resolved account

        Raises:
            JWTError: If the state is invalid, expired or from another browser
            AuthenticationDenied: If the assertion is rejected
        """
        self.jwt_service.verify_state(
            request.state, request.provider.value, request.state_nonce
        )

        assertion = await self.auth_service.complete_login(
            request.provider, request.code, request.state
        )
        logfire.info(
            "OAuth completed",
            provider=assertion.provider.value,
            uid=assertion.uid,
        )

        account_id = self.jwt_service.get_account_id_from_token(request.session_token)
        current_account_id = AccountId(UUID(account_id)) if account_id else None

        outcome = await self.orchestrator.run(assertion, current_account_id)

        token = None
        if outcome.flow == OAuthFlow.SIGN_IN:
            token = self.jwt_service.create_token(
                account_id=str(outcome.account.id),
                email=outcome.account.email.root,
            )

        return OAuthCallbackResponse(
            state=outcome.state,
            flow=outcome.flow,
            account_id=str(outcome.account.id),
            email=outcome.account.email.root,
            created=outcome.created,
            token=token,
        )
