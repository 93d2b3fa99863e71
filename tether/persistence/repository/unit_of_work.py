"""Unit of work implementation using PostgreSQL savepoints."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from tether.domain.repository.unit_of_work import UnitOfWork


class PostgresUnitOfWork(UnitOfWork):
    """Scopes a group of writes to a savepoint on the request session.

    The request session commits once the request succeeds; a failure inside
    the scope rolls back only the writes made within it.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize unit of work with database session.

        Args:
            session: SQLAlchemy async session shared with the repositories
        """
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Open a savepoint that is released on success and rolled back on error."""
        async with self.session.begin_nested():
            yield
