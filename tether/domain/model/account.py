"""Account aggregate root.

A local account can be reached through any number of linked provider
identities. Accounts are never deleted by the linking workflow.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from tether.domain.model.common import DomainModel
from tether.domain.value import AccountId, Email


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(DomainModel):
    """Local user account.

    ``confirmed_at`` is None until the email address is trusted, either
    through a verified provider assertion or a confirmation step elsewhere.
    OAuth-only accounts carry an unusable ``credential_hash``.
    """

    id: AccountId
    email: Email
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    credential_hash: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def confirmed(self) -> bool:
        """Whether the account's email has been confirmed."""
        return self.confirmed_at is not None

    def confirm(self, at: datetime | None = None) -> "Account":
        """Return a confirmed copy of this account.

        Already-confirmed accounts are returned unchanged so the original
        confirmation timestamp is kept.
        """
        if self.confirmed:
            return self
        now = at or _utcnow()
        return self.model_copy(update={"confirmed_at": now, "updated_at": now})
