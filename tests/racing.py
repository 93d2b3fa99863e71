"""In-memory repositories that simulate a concurrent writer.

Each one misses on its first lookup and lets a "winning" row land in the
shared database in between, so the caller's following insert hits the
uniqueness constraint exactly as it would when two requests race.
"""

from tether.domain.model import Account, Identity
from tether.domain.value import AuthProvider, Email
from tether.persistence.repository.inmemory import (
    InMemoryAccountRepository,
    InMemoryDatabase,
    InMemoryIdentityRepository,
)


class RacingAccountRepository(InMemoryAccountRepository):
    """Misses the first email lookup while another request provisions it."""

    def __init__(self, database: InMemoryDatabase, winner: Account) -> None:
        super().__init__(database)
        self.winner = winner
        self.raced = False

    async def find_by_email(self, email: Email) -> Account | None:
        if not self.raced:
            self.raced = True
            self.database.accounts[self.winner.id] = self.winner
            return None
        return await super().find_by_email(email)


class RacingIdentityRepository(InMemoryIdentityRepository):
    """Misses the first identity lookup while another request links it."""

    def __init__(self, database: InMemoryDatabase, winner: Identity) -> None:
        super().__init__(database)
        self.winner = winner
        self.raced = False

    async def find_by_provider(
        self, provider: AuthProvider, uid: str
    ) -> Identity | None:
        if not self.raced:
            self.raced = True
            self.database.identities[self.winner.id] = self.winner
            return None
        return await super().find_by_provider(provider, uid)
