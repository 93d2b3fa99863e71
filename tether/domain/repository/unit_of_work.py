"""Transaction boundary interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class UnitOfWork(ABC):
    """Groups several repository calls into one atomic change.

    Everything written inside ``transaction()`` is kept only if the block
    exits normally; an exception discards all of it and propagates.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Open a transaction scope."""
        pass
