"""Identity repository implementation using PostgreSQL."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tether.domain.error import DuplicateIdentityError
from tether.domain.model.identity import Identity
from tether.domain.repository.identity import IdentityRepository
from tether.domain.value import AccountId, AuthProvider, IdentityId
from tether.persistence.mappers import identity_to_dict, row_to_identity
from tether.persistence.repository.errors import violates
from tether.persistence.tables import (
    IDENTITY_PROVIDER_UID_CONSTRAINT,
    identities_table,
)


class PostgresIdentityRepository(IdentityRepository):
    """PostgreSQL implementation of IdentityRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, identity_id: IdentityId) -> Optional[Identity]:
        """Get identity by ID.

        Args:
            identity_id: Identity ID to look up

        Returns:
            Identity if found, None otherwise
        """
        stmt = select(identities_table).where(identities_table.c.id == identity_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_identity(dict(row))

    async def find_by_provider(
        self, provider: AuthProvider, uid: str
    ) -> Optional[Identity]:
        """Get identity by provider and provider-scoped uid.

        Args:
            provider: Identity provider
            uid: Provider-specific user ID

        Returns:
            Identity if found, None otherwise
        """
        stmt = select(identities_table).where(
            identities_table.c.provider == provider.value,
            identities_table.c.uid == uid,
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()

        if not row:
            return None

        return row_to_identity(dict(row))

    async def find_all_by_account_id(self, account_id: AccountId) -> list[Identity]:
        """Find all identities for an account, oldest first.

        Args:
            account_id: Account ID to find identities for

        Returns:
            List of Identity objects (may be empty)
        """
        stmt = (
            select(identities_table)
            .where(identities_table.c.account_id == account_id)
            .order_by(identities_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        rows = result.mappings().all()

        return [row_to_identity(dict(row)) for row in rows]

    async def create(self, identity: Identity) -> Identity:
        """Insert a new identity.

        Args:
            identity: Identity to insert

        Returns:
            Created identity

        Raises:
            DuplicateIdentityError: If (provider, uid) is already linked
        """
        stmt = identities_table.insert().values(**identity_to_dict(identity))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            if violates(e, IDENTITY_PROVIDER_UID_CONSTRAINT):
                raise DuplicateIdentityError(
                    identity.provider.value, identity.uid
                ) from e
            raise

        return identity

    async def save(self, identity: Identity) -> Identity:
        """Update an existing identity.

        Args:
            identity: Identity to save

        Returns:
            Saved identity
        """
        values = identity_to_dict(identity)
        values.pop("id")
        stmt = (
            identities_table.update()
            .where(identities_table.c.id == identity.id)
            .values(**values)
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return identity
