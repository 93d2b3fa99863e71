"""In-memory repository implementations for testing."""

from .account import InMemoryAccountRepository
from .database import InMemoryDatabase
from .identity import InMemoryIdentityRepository
from .unit_of_work import InMemoryUnitOfWork

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryDatabase",
    "InMemoryIdentityRepository",
    "InMemoryUnitOfWork",
]
