"""Account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from tether.domain.model.account import Account
from tether.domain.value import AccountId, Email


class AccountRepository(ABC):
    """Repository for the Account aggregate.

    Defines the contract for account persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID.

        Args:
            account_id: The account's unique identifier

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: Email) -> Optional[Account]:
        """Find an account by its normalized email.

        Args:
            email: The email to match exactly

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """Insert a new account.

        Args:
            account: The account to insert

        Returns:
            The created account

        Raises:
            DuplicateAccountError: If an account with the same email exists
        """
        pass

    @abstractmethod
    async def save(self, account: Account) -> Account:
        """Update an existing account.

        Args:
            account: The account to save

        Returns:
            The saved account
        """
        pass
