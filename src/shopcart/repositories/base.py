from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Optional, List

T = TypeVar('T')


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository.
    Implements Repository Pattern for clean separation of data access logic,
    so the in-memory stores can be replaced without touching the services.
    """

    @abstractmethod
    def get_by_id(self, entity_id: str) -> Optional[T]:
        """Get entity by ID, or None"""
        pass

    @abstractmethod
    def list_all(self) -> List[T]:
        """All entities, in storage order"""
        pass

    def exists(self, entity_id: str) -> bool:
        """Check if entity exists by ID"""
        return self.get_by_id(entity_id) is not None

    def count(self) -> int:
        return len(self.list_all())
