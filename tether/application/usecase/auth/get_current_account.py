"""Get current account use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from tether.application.usecase.base import BaseUseCase
from tether.domain.service import AccountService, IdentityService, JWTService
from tether.domain.value import AccountId, AuthProvider
from tether.util.credential import is_usable_credential


class GetCurrentAccountRequest(BaseModel):
    """Get current account request."""

    token: str  # Session token


class IdentityInfo(BaseModel):
    """Linked identity information for response."""

    provider: AuthProvider
    email: str | None
    created_at: datetime
    last_login_at: datetime | None


class GetCurrentAccountResponse(BaseModel):
    """Get current account response."""

    account_id: str
    email: str
    display_name: str | None
    avatar_url: str | None
    confirmed: bool
    has_password: bool
    created_at: datetime
    identities: list[IdentityInfo]


class GetCurrentAccountUseCase(
    BaseUseCase[GetCurrentAccountRequest, GetCurrentAccountResponse]
):
    """Use case for getting the authenticated account and its identities."""

    def __init__(
        self,
        jwt_service: JWTService,
        account_service: AccountService,
        identity_service: IdentityService,
    ) -> None:
        """Initialize get current account use case.

        Args:
            jwt_service: JWT token domain service
            account_service: Account domain service
            identity_service: Identity domain service
        """
        self.jwt_service = jwt_service
        self.account_service = account_service
        self.identity_service = identity_service

    async def execute(
        self, request: GetCurrentAccountRequest
    ) -> GetCurrentAccountResponse:
        """Execute get current account flow.

        Args:
            request: Request with session token

        Returns:
            Account information if token is valid and account exists

        Raises:
            JWTError: If token is invalid or expired
            NotFoundError: If account not found
        """
        payload = self.jwt_service.verify_token(request.token)

        account = await self.account_service.get_by_id(
            AccountId(UUID(payload.account_id))
        )

        identities = await self.identity_service.list_for_account(account.id)

        return GetCurrentAccountResponse(
            account_id=str(account.id),
            email=account.email.root,
            display_name=account.display_name,
            avatar_url=account.avatar_url,
            confirmed=account.confirmed,
            has_password=is_usable_credential(account.credential_hash),
            created_at=account.created_at,
            identities=[
                IdentityInfo(
                    provider=identity.provider,
                    email=identity.email.root if identity.email else None,
                    created_at=identity.created_at,
                    last_login_at=identity.last_login_at,
                )
                for identity in identities
            ],
        )
