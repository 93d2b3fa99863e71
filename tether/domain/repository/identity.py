"""Identity repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from tether.domain.model.identity import Identity
from tether.domain.value import AccountId, AuthProvider, IdentityId


class IdentityRepository(ABC):
    """Repository for the Identity entity.

    Uniqueness of (provider, uid) is a hard storage constraint, not an
    application check: two requests that both miss in ``find_by_provider``
    cannot both succeed in ``create``.
    """

    @abstractmethod
    async def find_by_id(self, identity_id: IdentityId) -> Optional[Identity]:
        """Find an identity by ID.

        Args:
            identity_id: The identity's unique identifier

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_provider(
        self, provider: AuthProvider, uid: str
    ) -> Optional[Identity]:
        """Find an identity by provider and provider-scoped uid.

        Args:
            provider: The identity provider
            uid: The account's ID on that provider

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all_by_account_id(self, account_id: AccountId) -> list[Identity]:
        """Get all identities linked to an account, oldest first.

        Args:
            account_id: The owning account

        Returns:
            List of identities (may be empty)
        """
        pass

    @abstractmethod
    async def create(self, identity: Identity) -> Identity:
        """Insert a new identity.

        Args:
            identity: The identity to insert

        Returns:
            The created identity

        Raises:
            DuplicateIdentityError: If (provider, uid) already exists
        """
        pass

    @abstractmethod
    async def save(self, identity: Identity) -> Identity:
        """Update an existing identity (owner, email, timestamps).

        Args:
            identity: The identity to save

        Returns:
            The saved identity
        """
        pass
