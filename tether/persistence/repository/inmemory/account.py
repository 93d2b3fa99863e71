"""In-memory account repository for testing."""

from typing import Optional

from tether.domain.error import DuplicateAccountError
from tether.domain.model.account import Account
from tether.domain.repository.account import AccountRepository
from tether.domain.value import AccountId, Email

from .database import InMemoryDatabase


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing."""

    def __init__(self, database: InMemoryDatabase | None = None) -> None:
        self.database = database or InMemoryDatabase()

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find account by ID."""
        return self.database.accounts.get(account_id)

    async def find_by_email(self, email: Email) -> Optional[Account]:
        """Find account by normalized email."""
        for account in self.database.accounts.values():
            if account.email == email:
                return account
        return None

    async def create(self, account: Account) -> Account:
        """Insert account, enforcing unique email."""
        if await self.find_by_email(account.email) is not None:
            raise DuplicateAccountError(account.email.root)
        self.database.put_account(account)
        return account

    async def save(self, account: Account) -> Account:
        """Update account."""
        self.database.put_account(account)
        return account
