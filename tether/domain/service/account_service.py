"""Account domain service."""

from datetime import datetime, timezone
from uuid import uuid4

import logfire

from tether.domain.error import NotFoundError
from tether.domain.model import Account
from tether.domain.repository import AccountRepository
from tether.domain.value import AccountId, Email
from tether.util.credential import generate_unusable_credential

from .base import Service


class AccountService(Service):
    """Domain service for account operations."""

    def __init__(self, account_repository: AccountRepository) -> None:
        """Initialize account service.

        Args:
            account_repository: Account repository
        """
        self.account_repository = account_repository

    async def get_by_id(self, account_id: AccountId) -> Account:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity

        Raises:
            NotFoundError: If account not found
        """
        with logfire.span("account_service.get_by_id", account_id=str(account_id)):
            account = await self.account_repository.find_by_id(account_id)
            if not account:
                logfire.warn("Account not found", account_id=str(account_id))
                raise NotFoundError("Account", str(account_id))
            return account

    async def find_by_email(self, email: Email) -> Account | None:
        """Find account by normalized email.

        Args:
            email: Account email

        Returns:
            Account if found, None otherwise
        """
        with logfire.span("account_service.find_by_email"):
            account = await self.account_repository.find_by_email(email)
            if account:
                logfire.info("Account found by email", account_id=str(account.id))
            else:
                logfire.info("No account for email")
            return account

    async def provision(
        self,
        email: Email,
        display_name: str | None = None,
        avatar_url: str | None = None,
        confirmed: bool = True,
    ) -> Account:
        """Create a new OAuth-only account.

        The account gets a random credential that no password can match.

        Args:
            email: Account email
            display_name: Display name from the provider
            avatar_url: Avatar URL from the provider
            confirmed: Whether to mark the email as confirmed on creation

        Returns:
            Created account

        Raises:
            DuplicateAccountError: If an account with this email already exists
        """
        now = datetime.now(timezone.utc)
        account = Account(
            id=AccountId(uuid4()),
            email=email,
            display_name=display_name,
            avatar_url=avatar_url,
            confirmed_at=now if confirmed else None,
            credential_hash=generate_unusable_credential(),
            created_at=now,
            updated_at=now,
        )
        with logfire.span("account_service.provision", account_id=str(account.id)):
            created = await self.account_repository.create(account)
            logfire.info(
                "Account provisioned",
                account_id=str(created.id),
                confirmed=created.confirmed,
            )
            return created

    async def confirm(self, account: Account) -> Account:
        """Mark an account's email as confirmed.

        Confirming an already-confirmed account is a no-op and writes nothing.

        Args:
            account: Account to confirm

        Returns:
            Confirmed account
        """
        if account.confirmed:
            return account
        with logfire.span("account_service.confirm", account_id=str(account.id)):
            saved = await self.account_repository.save(account.confirm())
            logfire.info("Account confirmed", account_id=str(saved.id))
            return saved

    async def save(self, account: Account) -> Account:
        """Save account changes.

        Args:
            account: Account to save

        Returns:
            Saved account
        """
        with logfire.span("account_service.save", account_id=str(account.id)):
            saved = await self.account_repository.save(account)
            logfire.info("Account saved", account_id=str(saved.id))
            return saved
