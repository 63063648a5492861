"""
Unsubscription Repository Interface.
"""

from typing import Optional

from afiliaciones.domain.repositories.base import BaseRepository
from afiliaciones.domain.models.unsubscription import ClientUnsubscription


class UnsubscriptionRepository(BaseRepository[ClientUnsubscription]):
    """Interface for unsubscription records (one per affiliation)."""

    def get_by_affiliation(self, affiliation_id: int) -> Optional[ClientUnsubscription]:
        """The unsubscription recorded against an affiliation, if any."""
        ...
