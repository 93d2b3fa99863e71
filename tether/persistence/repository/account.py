"""Account repository implementation using PostgreSQL."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tether.domain.error import DuplicateAccountError
from tether.domain.model.account import Account
from tether.domain.repository.account import AccountRepository
from tether.domain.value import AccountId, Email
from tether.persistence.mappers import account_to_dict, row_to_account
from tether.persistence.repository.errors import violates
from tether.persistence.tables import ACCOUNT_EMAIL_CONSTRAINT, accounts_table


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL implementation of AccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Get account by ID.

        Args:
            account_id: Account ID to look up

        Returns:
            Account if found, None otherwise
        """
        stmt = select(accounts_table).where(accounts_table.c.id == account_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_account(dict(row))

    async def find_by_email(self, email: Email) -> Optional[Account]:
        """Get account by normalized email.

        Args:
            email: Email to look up

        Returns:
            Account if found, None otherwise
        """
        stmt = select(accounts_table).where(accounts_table.c.email == email.root)
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_account(dict(row))

    async def create(self, account: Account) -> Account:
        """Insert a new account.

        The insert runs in a savepoint so a unique violation leaves the
        surrounding transaction usable.

        Args:
            account: Account to insert

        Returns:
            Created account

        Raises:
            DuplicateAccountError: If the email is already taken
        """
        stmt = accounts_table.insert().values(**account_to_dict(account))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            if violates(e, ACCOUNT_EMAIL_CONSTRAINT):
                raise DuplicateAccountError(account.email.root) from e
            raise

        return account

    async def save(self, account: Account) -> Account:
        """Update an existing account.

        Args:
            account: Account to save

        Returns:
            Saved account
        """
        values = account_to_dict(account)
        values.pop("id")
        stmt = (
            accounts_table.update()
            .where(accounts_table.c.id == account.id)
            .values(**values)
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return account
