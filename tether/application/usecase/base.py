"""Base use case."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """One request/response step the HTTP layer can run.

    Use cases compose domain services; transactions stay inside the services
    and the orchestrator they call.
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        """Run the use case."""
