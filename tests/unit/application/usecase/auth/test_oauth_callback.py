"""Unit tests for OAuthCallbackUseCase."""

from datetime import datetime, timedelta, timezone

from dishka import AsyncContainer
import jwt
import pytest

from tether.application.usecase.auth import OAuthCallbackUseCase, OAuthFlow
from tether.application.usecase.auth.oauth_callback import OAuthCallbackRequest
from tether.config import AuthSettings
from tether.domain.error import VerificationRejected
from tether.domain.service import JWTService
from tether.domain.value import AuthProvider
from tether.persistence.repository.inmemory import InMemoryDatabase
from tether.util.jwt import JWTError
from tests.harness import create_env_fixture

NONCE = "nonce-from-cookie"

# Unit test fixture
unit_env = create_env_fixture()


class TestOAuthCallback:
    """Tests for OAuthCallbackUseCase.execute()."""

    @pytest.mark.asyncio
    async def test_sign_in_issues_session_token(self, unit_env: AsyncContainer):
        """A fresh sign-in resolves an account and returns a session token."""
        # Arrange
        use_case = await unit_env.get(OAuthCallbackUseCase)
        jwt_service = await unit_env.get(JWTService)
        state = jwt_service.create_state("google", NONCE)

        # Act
        response = await use_case.execute(
            OAuthCallbackRequest(
                provider=AuthProvider.GOOGLE,
                code="alice",
                state=state,
                state_nonce=NONCE,
            )
        )

        # Assert
        assert response.flow == OAuthFlow.SIGN_IN
        assert response.created is True
        assert response.email == "alice@example.com"
        assert response.token is not None
        payload = jwt_service.verify_token(response.token)
        assert payload.account_id == response.account_id

    @pytest.mark.asyncio
    async def test_connect_with_session_issues_no_token(
        self, unit_env: AsyncContainer
    ):
        """With a valid session the identity is connected to that account."""
        # Arrange
        use_case = await unit_env.get(OAuthCallbackUseCase)
        jwt_service = await unit_env.get(JWTService)
        database = await unit_env.get(InMemoryDatabase)
        signed_in = await use_case.execute(
            OAuthCallbackRequest(
                provider=AuthProvider.GOOGLE,
                code="alice",
                state=jwt_service.create_state("google", NONCE),
                state_nonce=NONCE,
            )
        )

        # Act
        response = await use_case.execute(
            OAuthCallbackRequest(
                provider=AuthProvider.FACEBOOK,
                code="alice-fb",
                state=jwt_service.create_state("facebook", NONCE),
                state_nonce=NONCE,
                session_token=signed_in.token,
            )
        )

        # Assert
        assert response.flow == OAuthFlow.CONNECT
        assert response.account_id == signed_in.account_id
        assert response.token is None
        assert len(database.accounts) == 1
        assert len(database.identities) == 2

    @pytest.mark.asyncio
    async def test_invalid_session_falls_back_to_sign_in(
        self, unit_env: AsyncContainer
    ):
        """A garbage session cookie is treated as anonymous."""
        use_case = await unit_env.get(OAuthCallbackUseCase)
        jwt_service = await unit_env.get(JWTService)

        response = await use_case.execute(
            OAuthCallbackRequest(
                provider=AuthProvider.GOOGLE,
                code="alice",
                state=jwt_service.create_state("google", NONCE),
                state_nonce=NONCE,
                session_token="not-a-token",
            )
        )

        assert response.flow == OAuthFlow.SIGN_IN
        assert response.token is not None

    @pytest.mark.asyncio
    async def test_unverified_assertion_is_rejected(self, unit_env: AsyncContainer):
        """The mock client's unverified profile never resolves an account."""
        use_case = await unit_env.get(OAuthCallbackUseCase)
        jwt_service = await unit_env.get(JWTService)
        database = await unit_env.get(InMemoryDatabase)

        with pytest.raises(VerificationRejected):
            await use_case.execute(
                OAuthCallbackRequest(
                    provider=AuthProvider.FACEBOOK,
                    code="unverified-bob",
                    state=jwt_service.create_state("facebook", NONCE),
                    state_nonce=NONCE,
                )
            )

        assert database.accounts == {}

    @pytest.mark.asyncio
    async def test_rejects_tampered_state(self, unit_env: AsyncContainer):
        """A state not signed by us is rejected before the handshake."""
        use_case = await unit_env.get(OAuthCallbackUseCase)

        with pytest.raises(JWTError):
            await use_case.execute(
                OAuthCallbackRequest(
                    provider=AuthProvider.GOOGLE, code="alice", state="forged"
                )
            )

    @pytest.mark.asyncio
    async def test_rejects_state_for_other_provider(self, unit_env: AsyncContainer):
        """A state issued for Google cannot complete a Facebook callback."""
        use_case = await unit_env.get(OAuthCallbackUseCase)
        jwt_service = await unit_env.get(JWTService)

        with pytest.raises(JWTError):
            await use_case.execute(
                OAuthCallbackRequest(
                    provider=AuthProvider.FACEBOOK,
                    code="alice",
                    state=jwt_service.create_state("google", NONCE),
                    state_nonce=NONCE,
                )
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("cookie_nonce", [None, "someone-elses-nonce"])
    async def test_rejects_state_without_matching_cookie(
        self, unit_env: AsyncContainer, cookie_nonce
    ):
        """A state is only accepted from the browser holding its nonce."""
        # Arrange
        use_case = await unit_env.get(OAuthCallbackUseCase)
        jwt_service = await unit_env.get(JWTService)
        database = await unit_env.get(InMemoryDatabase)
        signed_in = await use_case.execute(
            OAuthCallbackRequest(
                provider=AuthProvider.GOOGLE,
                code="alice",
                state=jwt_service.create_state("google", NONCE),
                state_nonce=NONCE,
            )
        )

        # Act & Assert
        with pytest.raises(JWTError, match="not issued to this client"):
            await use_case.execute(
                OAuthCallbackRequest(
                    provider=AuthProvider.FACEBOOK,
                    code="mallory",
                    state=jwt_service.create_state("facebook", NONCE),
                    state_nonce=cookie_nonce,
                    session_token=signed_in.token,
                )
            )

        assert len(database.identities) == 1

    @pytest.mark.asyncio
    async def test_rejects_expired_state(self, unit_env: AsyncContainer):
        """Expired states are rejected."""
        # Arrange
        use_case = await unit_env.get(OAuthCallbackUseCase)
        auth_settings = await unit_env.get(AuthSettings)
        state = jwt.encode(
            {
                "provider": "google",
                "nonce": "n",
                "purpose": "oauth_state",
                "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            auth_settings.jwt_secret,
            algorithm=auth_settings.jwt_algorithm,
        )

        # Act & Assert
        with pytest.raises(JWTError, match="expired"):
            await use_case.execute(
                OAuthCallbackRequest(
                    provider=AuthProvider.GOOGLE, code="alice", state=state
                )
            )
