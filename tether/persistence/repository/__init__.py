"""PostgreSQL repository implementations."""

from tether.persistence.repository.account import PostgresAccountRepository
from tether.persistence.repository.identity import PostgresIdentityRepository
from tether.persistence.repository.unit_of_work import PostgresUnitOfWork

__all__ = [
    "PostgresAccountRepository",
    "PostgresIdentityRepository",
    "PostgresUnitOfWork",
]
