"""In-memory unit of work for testing."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from tether.domain.repository.unit_of_work import UnitOfWork

from .database import InMemoryDatabase


class InMemoryUnitOfWork(UnitOfWork):
    """Undoes the rows written inside the scope if it fails."""

    def __init__(self, database: InMemoryDatabase | None = None) -> None:
        self.database = database or InMemoryDatabase()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Record the scope's writes and undo them if the block raises."""
        with self.database.undo_scope():
            yield
