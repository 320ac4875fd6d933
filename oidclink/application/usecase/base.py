"""Base use case."""

from abc import ABC, abstractmethod
from typing import Any


class BaseUseCase(ABC):
    """One application operation, run through ``execute``.

    Use cases orchestrate domain services and own no state between calls.
    """

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        """Run the operation for one request."""
