"""Identity linking for authenticated accounts."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal

import logfire

from tether.domain.error import AlreadyLinkedElsewhere, DuplicateIdentityError
from tether.domain.model import Account, Identity
from tether.domain.value import OAuthAssertion

from .account_service import AccountService
from .base import Service
from .identity_service import IdentityService

# Account field -> assertion attribute it may be refreshed from
PROFILE_SOURCES: dict[str, str] = {
    "display_name": "name",
    "avatar_url": "avatar_url",
}

IdentityConflictPolicy = Literal["reassign", "reject"]


@dataclass
class LinkedIdentity:
    """Identity after linking, with the (possibly updated) owning account."""

    identity: Identity
    account: Account


class IdentityLinker(Service):
    """Attaches a provider identity to an account.

    An identity owned by a different account is moved to the given account
    under the ``reassign`` policy. Under ``reject`` the move is refused when
    the current owner is confirmed.
    """

    def __init__(
        self,
        account_service: AccountService,
        identity_service: IdentityService,
        profile_fields: Iterable[str] = tuple(PROFILE_SOURCES),
        identity_conflict: IdentityConflictPolicy = "reassign",
    ) -> None:
        """Initialize identity linker.

        Args:
            account_service: Account domain service
            identity_service: Identity domain service
            profile_fields: Account fields that may be merged from the assertion
            identity_conflict: Policy for identities owned by another account

        Raises:
            ValueError: If a profile field is not mergeable
        """
        fields = tuple(profile_fields)
        unknown = set(fields) - set(PROFILE_SOURCES)
        if unknown:
            raise ValueError(f"Profile fields cannot be merged: {sorted(unknown)}")

        self.account_service = account_service
        self.identity_service = identity_service
        self.profile_fields = fields
        self.identity_conflict = identity_conflict

    async def link(
        self,
        account: Account,
        assertion: OAuthAssertion,
        update_profile: bool = False,
    ) -> LinkedIdentity:
        """Ensure the assertion's identity belongs to ``account``.

        Args:
            account: Account to link to
            assertion: Provider assertion
            update_profile: Merge allow-listed profile fields into the account

        Returns:
            The linked identity and the owning account

        Raises:
            AlreadyLinkedElsewhere: If the identity belongs to another confirmed
                account and the conflict policy is ``reject``
        """
        with logfire.span(
            "identity_linker.link",
            account_id=str(account.id),
            provider=assertion.provider.value,
            update_profile=update_profile,
        ):
            identity = await self.identity_service.find_by_provider_and_uid(
                assertion.provider, assertion.uid
            )

            if identity is None:
                try:
                    identity = await self.identity_service.create(
                        assertion.provider, assertion.uid, account.id, assertion.email
                    )
                except DuplicateIdentityError:
                    identity = await self.identity_service.find_by_provider_and_uid(
                        assertion.provider, assertion.uid
                    )
                    if identity is None:
                        raise
                    identity = await self._claim(account, identity, assertion)
            else:
                identity = await self._claim(account, identity, assertion)

            if update_profile:
                account = await self._merge_profile(account, assertion)

            return LinkedIdentity(identity=identity, account=account)

    async def ensure_email_unclaimed(
        self, account: Account, assertion: OAuthAssertion
    ) -> None:
        """Refuse a connect whose email belongs to another linked account.

        Only enforced under the ``reject`` policy: another account that is
        confirmed and has at least one identity keeps its email.

        Args:
            account: Account the identity is being connected to
            assertion: Provider assertion

        Raises:
            AlreadyLinkedElsewhere: If the email's account is someone else's
        """
        if self.identity_conflict != "reject" or assertion.email is None:
            return

        owner = await self.account_service.find_by_email(assertion.email)
        if owner is None or owner.id == account.id or not owner.confirmed:
            return

        if await self.identity_service.list_for_account(owner.id):
            logfire.warn(
                "Email belongs to another linked account",
                provider=assertion.provider.value,
                account_id=str(account.id),
            )
            raise AlreadyLinkedElsewhere(assertion.provider.value)

    async def _claim(
        self, account: Account, identity: Identity, assertion: OAuthAssertion
    ) -> Identity:
        if identity.account_id == account.id:
            return await self.identity_service.touch_login(identity, assertion.email)

        if self.identity_conflict == "reject":
            owner = await self.account_service.get_by_id(identity.account_id)
            if owner.confirmed:
                logfire.warn(
                    "Identity belongs to another confirmed account",
                    provider=assertion.provider.value,
                    account_id=str(account.id),
                )
                raise AlreadyLinkedElsewhere(assertion.provider.value)

        return await self.identity_service.reassign_owner(identity, account.id)

    async def _merge_profile(
        self, account: Account, assertion: OAuthAssertion
    ) -> Account:
        updates = {}
        for field in self.profile_fields:
            value = getattr(assertion, PROFILE_SOURCES[field])
            if value and value != getattr(account, field):
                updates[field] = value

        if not updates:
            return account

        logfire.info(
            "Merging profile fields",
            account_id=str(account.id),
            fields=sorted(updates),
        )
        updates["updated_at"] = datetime.now(timezone.utc)
        return await self.account_service.save(account.model_copy(update=updates))
