"""Integration test for OAuthOrchestrator with a real database.

This test demonstrates:
1. Using real PostgreSQL (migrated with alembic)
2. Resolving, provisioning and linking through the full persistence stack
3. Using the test harness with unmocked persistence
"""

from dishka import AsyncContainer
import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from tether.application.usecase.auth import OAuthFlow, OAuthOrchestrator
from tether.domain.error import VerificationRejected
from tether.domain.repository import AccountRepository, IdentityRepository
from tether.domain.value import AuthProvider, Email
from tests.factories import make_account, make_assertion
from tests.harness import create_env_fixture

pytestmark = pytest.mark.integration

# Integration test fixture - real PostgreSQL, mocked external services
integration_env = create_env_fixture(unmock={"persistence"})


@pytest_asyncio.fixture(autouse=True)
async def clean_database(integration_env):
    """Clean database before each test."""
    session = await integration_env.get(AsyncSession)
    await session.execute(text("TRUNCATE TABLE identities, accounts CASCADE"))
    await session.commit()

    yield


class TestOrchestratorIntegration:
    """Sign-in and connect against PostgreSQL."""

    @pytest.mark.asyncio
    async def test_sign_in_provisions_account_and_identity(
        self, integration_env: AsyncContainer
    ):
        # Arrange
        orchestrator = await integration_env.get(OAuthOrchestrator)
        identity_repo = await integration_env.get(IdentityRepository)

        # Act
        outcome = await orchestrator.run(make_assertion(uid="g-1", email="a@x.com"))
        again = await orchestrator.run(make_assertion(uid="g-1", email="a@x.com"))

        # Assert
        assert outcome.created is True
        assert again.account.id == outcome.account.id
        identities = await identity_repo.find_all_by_account_id(outcome.account.id)
        assert [i.uid for i in identities] == ["g-1"]

    @pytest.mark.asyncio
    async def test_sign_in_confirms_existing_account(
        self, integration_env: AsyncContainer
    ):
        """Verified email match confirms the stored account exactly once."""
        # Arrange
        orchestrator = await integration_env.get(OAuthOrchestrator)
        account_repo = await integration_env.get(AccountRepository)
        account = await account_repo.create(make_account(confirmed=False))

        # Act
        outcome = await orchestrator.run(make_assertion(email="alice@example.com"))

        # Assert
        assert outcome.account.id == account.id
        stored = await account_repo.find_by_id(account.id)
        assert stored is not None
        assert stored.confirmed

    @pytest.mark.asyncio
    async def test_unverified_sign_in_writes_nothing(
        self, integration_env: AsyncContainer
    ):
        orchestrator = await integration_env.get(OAuthOrchestrator)
        account_repo = await integration_env.get(AccountRepository)

        with pytest.raises(VerificationRejected):
            await orchestrator.run(make_assertion(verified=False))

        assert await account_repo.find_by_email(Email("alice@example.com")) is None

    @pytest.mark.asyncio
    async def test_connect_reassigns_identity(self, integration_env: AsyncContainer):
        """Connect moves the identity; the previous owner keeps its email."""
        # Arrange
        orchestrator = await integration_env.get(OAuthOrchestrator)
        account_repo = await integration_env.get(AccountRepository)
        identity_repo = await integration_env.get(IdentityRepository)
        current = await account_repo.create(make_account(email="x@example.com"))
        previous = await orchestrator.run(
            make_assertion(AuthProvider.FACEBOOK, uid="fb-1", email="y@example.com")
        )

        # Act
        outcome = await orchestrator.run(
            make_assertion(AuthProvider.FACEBOOK, uid="fb-1", email="y@example.com"),
            current_account_id=current.id,
        )

        # Assert
        assert outcome.flow == OAuthFlow.CONNECT
        identity = await identity_repo.find_by_provider(AuthProvider.FACEBOOK, "fb-1")
        assert identity is not None
        assert identity.account_id == current.id
        old_owner = await account_repo.find_by_id(previous.account.id)
        assert old_owner is not None
        assert old_owner.email == Email("y@example.com")
