"""Strongly typed identifiers for Tether domain entities.

Using NewType for strong typing prevents mixing up account and identity IDs.
"""

from typing import NewType
from uuid import UUID

AccountId = NewType("AccountId", UUID)
IdentityId = NewType("IdentityId", UUID)
