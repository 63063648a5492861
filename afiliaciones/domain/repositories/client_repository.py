"""
Client Repository Interface.
Defines specific data access operations for Clients and their phones.
"""

from typing import Optional

from afiliaciones.domain.repositories.base import BaseRepository
from afiliaciones.domain.models.client import Client


class ClientRepository(BaseRepository[Client]):
    """Interface for Client-specific operations."""

    def get_by_identification(self, identification: str) -> Optional[Client]:
        """Get a client by its national identification number."""
        ...

    def add_phone_if_missing(self, client_id: int, phone_number: str) -> bool:
        """Insert a phone for the client; False when it was already there."""
        ...

    def delete_phones(self, client_id: int) -> int:
        """Delete every phone of the client, returning how many were removed."""
        ...
