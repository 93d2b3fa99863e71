"""Account resolution for inbound provider assertions."""

from dataclasses import dataclass

import logfire

from tether.domain.error import (
    DuplicateAccountError,
    DuplicateIdentityError,
    ValidationError,
)
from tether.domain.model import Account
from tether.domain.value import OAuthAssertion

from .account_service import AccountService
from .base import Service
from .identity_service import IdentityService


@dataclass
class ResolvedAccount:
    """Outcome of resolving an assertion to a local account."""

    account: Account
    created: bool


class AccountResolver(Service):
    """Finds or creates the single local account an assertion belongs to.

    Lookup order, first match wins:
    1. Identity by (provider, uid) -> its owning account
    2. Account by email -> link the identity and confirm the account
    3. New confirmed account (no identity; the linker creates it)

    Callers must only pass assertions that passed the verification policy,
    since steps 2 and 3 trust the claimed email.
    """

    def __init__(
        self, account_service: AccountService, identity_service: IdentityService
    ) -> None:
        """Initialize account resolver.

        Args:
            account_service: Account domain service
            identity_service: Identity domain service
        """
        self.account_service = account_service
        self.identity_service = identity_service

    async def resolve(self, assertion: OAuthAssertion) -> ResolvedAccount:
        """Resolve an assertion to exactly one account.

        Args:
            assertion: Verified provider assertion

        Returns:
            The account and whether it was created by this call

        Raises:
            ValidationError: If the assertion is unknown and carries no email
        """
        with logfire.span(
            "account_resolver.resolve",
            provider=assertion.provider.value,
            uid=assertion.uid,
        ):
            identity = await self.identity_service.find_by_provider_and_uid(
                assertion.provider, assertion.uid
            )
            if identity:
                account = await self.account_service.get_by_id(identity.account_id)
                logfire.info(
                    "Resolved by identity",
                    account_id=str(account.id),
                    provider=assertion.provider.value,
                )
                return ResolvedAccount(account=account, created=False)

            if assertion.email is None:
                raise ValidationError("Assertion carries no email to resolve by")

            account = await self.account_service.find_by_email(assertion.email)
            if account:
                account = await self._link_by_email(account, assertion)
                return ResolvedAccount(account=account, created=False)

            try:
                account = await self.account_service.provision(
                    email=assertion.email,
                    display_name=assertion.name,
                    avatar_url=assertion.avatar_url,
                    confirmed=True,
                )
            except DuplicateAccountError:
                # Another request provisioned the same email first
                logfire.warn(
                    "Account provisioned concurrently, re-reading by email",
                    provider=assertion.provider.value,
                )
                existing = await self.account_service.find_by_email(assertion.email)
                if existing is None:
                    raise
                account = await self._link_by_email(existing, assertion)
                return ResolvedAccount(account=account, created=False)

            logfire.info(
                "Resolved by provisioning",
                account_id=str(account.id),
                provider=assertion.provider.value,
            )
            return ResolvedAccount(account=account, created=True)

    async def _link_by_email(
        self, account: Account, assertion: OAuthAssertion
    ) -> Account:
        """Attach the assertion's identity to an account matched by email.

        If the identity was created concurrently, the existing row wins and
        its owner is returned instead.
        """
        try:
            await self.identity_service.create(
                assertion.provider, assertion.uid, account.id, assertion.email
            )
        except DuplicateIdentityError:
            existing = await self.identity_service.find_by_provider_and_uid(
                assertion.provider, assertion.uid
            )
            if existing is None:
                raise
            logfire.info(
                "Identity created concurrently, using existing row",
                provider=assertion.provider.value,
                account_id=str(existing.account_id),
            )
            if existing.account_id != account.id:
                return await self.account_service.get_by_id(existing.account_id)

        if assertion.email == account.email:
            account = await self.account_service.confirm(account)

        logfire.info(
            "Resolved by email",
            account_id=str(account.id),
            provider=assertion.provider.value,
        )
        return account
