"""
Base Repository Interface.
Defines the standard contract for data access operations.

Implementations never commit: the calling service owns the transaction.
"""

from typing import Any, Optional, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic CRUD operations."""

    def get_by_id(self, id: int) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    def add(self, obj_in: Any) -> T:
        """Stage a new entity and flush it so it gets an ID."""
        ...

    def update(self, db_obj: T, obj_in: Any) -> T:
        """Apply field changes to an existing entity and flush them."""
        ...
