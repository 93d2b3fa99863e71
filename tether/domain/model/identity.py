"""Identity entity.

Links one external provider account to one local account.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from tether.domain.model.common import DomainModel
from tether.domain.value import AccountId, AuthProvider, Email, IdentityId


class Identity(DomainModel):
    """Durable link between a provider account and a local account.

    The (provider, uid) pair is globally unique. The owning account may change
    when an identity is claimed by another account; the pair itself is never
    duplicated.
    """

    id: IdentityId
    account_id: AccountId
    provider: AuthProvider
    uid: str  # Provider-scoped opaque ID (Google "sub", Facebook user ID)
    email: Optional[Email] = None  # Email claimed by the provider when last seen
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_login_at: Optional[datetime] = None
