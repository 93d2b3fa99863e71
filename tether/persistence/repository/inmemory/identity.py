"""In-memory identity repository for testing."""

from typing import Optional

from tether.domain.error import DuplicateIdentityError
from tether.domain.model.identity import Identity
from tether.domain.repository.identity import IdentityRepository
from tether.domain.value import AccountId, AuthProvider, IdentityId

from .database import InMemoryDatabase


class InMemoryIdentityRepository(IdentityRepository):
    """In-memory implementation of IdentityRepository for testing."""

    def __init__(self, database: InMemoryDatabase | None = None) -> None:
        self.database = database or InMemoryDatabase()

    async def find_by_id(self, identity_id: IdentityId) -> Optional[Identity]:
        """Find identity by ID."""
        return self.database.identities.get(identity_id)

    async def find_by_provider(
        self, provider: AuthProvider, uid: str
    ) -> Optional[Identity]:
        """Find identity by provider and uid."""
        for identity in self.database.identities.values():
            if identity.provider == provider and identity.uid == uid:
                return identity
        return None

    async def find_all_by_account_id(self, account_id: AccountId) -> list[Identity]:
        """Find all identities for an account."""
        matches = [
            identity
            for identity in self.database.identities.values()
            if identity.account_id == account_id
        ]
        matches.sort(key=lambda i: i.created_at)
        return matches

    async def create(self, identity: Identity) -> Identity:
        """Insert identity, enforcing unique (provider, uid)."""
        if await self.find_by_provider(identity.provider, identity.uid) is not None:
            raise DuplicateIdentityError(identity.provider.value, identity.uid)
        self.database.put_identity(identity)
        return identity

    async def save(self, identity: Identity) -> Identity:
        """Update identity."""
        self.database.put_identity(identity)
        return identity
