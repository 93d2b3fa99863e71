"""Unit tests for GetCurrentAccountUseCase."""

from uuid import uuid4

from dishka import AsyncContainer
import pytest

from tether.application.usecase.auth import (
    GetCurrentAccountUseCase,
    OAuthOrchestrator,
)
from tether.application.usecase.auth.get_current_account import (
    GetCurrentAccountRequest,
)
from tether.domain.error import NotFoundError
from tether.domain.service import JWTService
from tether.domain.value import AuthProvider
from tether.util.jwt import JWTError
from tests.factories import make_assertion
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestGetCurrentAccount:
    """Tests for GetCurrentAccountUseCase.execute()."""

    @pytest.mark.asyncio
    async def test_returns_account_with_identities(self, unit_env: AsyncContainer):
        """Valid token returns the account and every linked identity."""
        # Arrange
        orchestrator = await unit_env.get(OAuthOrchestrator)
        jwt_service = await unit_env.get(JWTService)
        use_case = await unit_env.get(GetCurrentAccountUseCase)
        outcome = await orchestrator.run(make_assertion(uid="g-1"))
        await orchestrator.run(
            make_assertion(AuthProvider.FACEBOOK, uid="fb-1"),
            current_account_id=outcome.account.id,
        )
        token = jwt_service.create_token(
            str(outcome.account.id), outcome.account.email.root
        )

        # Act
        response = await use_case.execute(GetCurrentAccountRequest(token=token))

        # Assert
        assert response.account_id == str(outcome.account.id)
        assert response.email == "alice@example.com"
        assert response.confirmed is True
        assert response.has_password is False
        assert [i.provider for i in response.identities] == [
            AuthProvider.GOOGLE,
            AuthProvider.FACEBOOK,
        ]

    @pytest.mark.asyncio
    async def test_invalid_token(self, unit_env: AsyncContainer):
        """Invalid tokens raise JWTError."""
        use_case = await unit_env.get(GetCurrentAccountUseCase)

        with pytest.raises(JWTError):
            await use_case.execute(GetCurrentAccountRequest(token="nope"))

    @pytest.mark.asyncio
    async def test_state_token_is_not_a_session(self, unit_env: AsyncContainer):
        """OAuth state tokens cannot be used as sessions."""
        jwt_service = await unit_env.get(JWTService)
        use_case = await unit_env.get(GetCurrentAccountUseCase)

        with pytest.raises(JWTError):
            await use_case.execute(
                GetCurrentAccountRequest(
                    token=jwt_service.create_state("google", "nonce")
                )
            )

    @pytest.mark.asyncio
    async def test_unknown_account(self, unit_env: AsyncContainer):
        """A valid token for a deleted account raises NotFoundError."""
        jwt_service = await unit_env.get(JWTService)
        use_case = await unit_env.get(GetCurrentAccountUseCase)
        token = jwt_service.create_token(str(uuid4()), "ghost@example.com")

        with pytest.raises(NotFoundError):
            await use_case.execute(GetCurrentAccountRequest(token=token))
