"""Domain model entities for Tether."""

from tether.domain.model.account import Account
from tether.domain.model.identity import Identity

__all__ = [
    "Account",
    "Identity",
]
