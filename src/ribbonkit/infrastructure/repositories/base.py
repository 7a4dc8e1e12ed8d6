"""Abstract base class for read-only repositories."""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """
    Generic repository interface.

    Structure sources are read-only, so only lookup and listing are part of
    the contract.
    """

    @abstractmethod
    def get(self, id: str) -> Optional[T]:
        """Retrieve an entity by ID."""
        pass

    @abstractmethod
    def list(self) -> List[str]:
        """List the IDs of all available entities."""
        pass
