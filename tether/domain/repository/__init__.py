"""Repository interfaces for Tether domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from tether.domain.repository.account import AccountRepository
from tether.domain.repository.identity import IdentityRepository
from tether.domain.repository.unit_of_work import UnitOfWork

__all__ = [
    "AccountRepository",
    "IdentityRepository",
    "UnitOfWork",
]
