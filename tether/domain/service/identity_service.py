"""Identity domain service."""

from datetime import datetime, timezone
from uuid import uuid4

import logfire

from tether.domain.model import Identity
from tether.domain.repository import IdentityRepository
from tether.domain.value import AccountId, AuthProvider, Email, IdentityId

from .base import Service


class IdentityService(Service):
    """Domain service for the (provider, uid) to account mapping."""

    def __init__(self, identity_repository: IdentityRepository) -> None:
        """Initialize identity service.

        Args:
            identity_repository: Identity repository
        """
        self.identity_repository = identity_repository

    async def find_by_provider_and_uid(
        self, provider: AuthProvider, uid: str
    ) -> Identity | None:
        """Get identity by provider and provider-scoped uid.

        Args:
            provider: Identity provider
            uid: Provider-scoped user ID

        Returns:
            Identity if found, None otherwise
        """
        with logfire.span(
            "identity_service.find_by_provider_and_uid",
            provider=provider.value,
            uid=uid,
        ):
            identity = await self.identity_repository.find_by_provider(provider, uid)
            if identity:
                logfire.info(
                    "Identity found",
                    provider=provider.value,
                    uid=uid,
                    account_id=str(identity.account_id),
                )
            else:
                logfire.info("Identity not found", provider=provider.value, uid=uid)
            return identity

    async def create(
        self,
        provider: AuthProvider,
        uid: str,
        account_id: AccountId,
        email: Email | None = None,
    ) -> Identity:
        """Link (provider, uid) to an account.

        Args:
            provider: Identity provider
            uid: Provider-scoped user ID
            account_id: Owning account
            email: Email claimed by the provider

        Returns:
            Created identity

        Raises:
            DuplicateIdentityError: If (provider, uid) is already linked
        """
        now = datetime.now(timezone.utc)
        identity = Identity(
            id=IdentityId(uuid4()),
            account_id=account_id,
            provider=provider,
            uid=uid,
            email=email,
            created_at=now,
            updated_at=now,
            last_login_at=now,
        )
        with logfire.span(
            "identity_service.create",
            provider=provider.value,
            uid=uid,
            account_id=str(account_id),
        ):
            created = await self.identity_repository.create(identity)
            logfire.info(
                "Identity created",
                identity_id=str(created.id),
                provider=provider.value,
                account_id=str(account_id),
            )
            return created

    async def reassign_owner(
        self, identity: Identity, new_account_id: AccountId
    ) -> Identity:
        """Move an identity to another account.

        Args:
            identity: Identity to move
            new_account_id: New owning account

        Returns:
            Updated identity
        """
        with logfire.span(
            "identity_service.reassign_owner",
            identity_id=str(identity.id),
            from_account_id=str(identity.account_id),
            to_account_id=str(new_account_id),
        ):
            now = datetime.now(timezone.utc)
            updated = identity.model_copy(
                update={
                    "account_id": new_account_id,
                    "updated_at": now,
                    "last_login_at": now,
                }
            )
            saved = await self.identity_repository.save(updated)
            logfire.info(
                "Identity reassigned",
                identity_id=str(saved.id),
                provider=saved.provider.value,
                account_id=str(new_account_id),
            )
            return saved

    async def touch_login(
        self, identity: Identity, email: Email | None = None
    ) -> Identity:
        """Record a login through an identity.

        Args:
            identity: Identity used to log in
            email: Email currently claimed by the provider, if any

        Returns:
            Updated identity
        """
        now = datetime.now(timezone.utc)
        update: dict = {"last_login_at": now, "updated_at": now}
        if email is not None:
            update["email"] = email
        return await self.identity_repository.save(identity.model_copy(update=update))

    async def list_for_account(self, account_id: AccountId) -> list[Identity]:
        """Get all identities linked to an account.

        Args:
            account_id: Account ID

        Returns:
            List of identities (may be empty)
        """
        with logfire.span(
            "identity_service.list_for_account", account_id=str(account_id)
        ):
            identities = await self.identity_repository.find_all_by_account_id(
                account_id
            )
            logfire.info(
                "Identities retrieved for account",
                account_id=str(account_id),
                count=len(identities),
            )
            return identities
