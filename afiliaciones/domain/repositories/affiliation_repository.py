"""
Affiliation Repository Interface.
Defines data access operations for monthly affiliations.
"""

from typing import List, Optional

from afiliaciones.domain.repositories.base import BaseRepository
from afiliaciones.domain.models.affiliation import MonthlyAffiliation
from afiliaciones.domain.schemas.affiliation import AffiliationRead, InactiveAffiliationRead


class AffiliationRepository(BaseRepository[MonthlyAffiliation]):
    """Interface for MonthlyAffiliation-specific operations."""

    def find_active(
        self, client_id: int, month: int, year: int, office_id: int, user_id: int
    ) -> Optional[MonthlyAffiliation]:
        """The active row for a (client, period, office, user) scope, if any."""
        ...

    def get_active(self, id: int) -> Optional[MonthlyAffiliation]:
        """Get an affiliation only if it is still active."""
        ...

    def office_has_rows(self, office_id: int, month: int, year: int) -> bool:
        """Whether the office has any row (active or not) for the period."""
        ...

    def office_has_active_rows(self, office_id: int, month: int, year: int) -> bool:
        """Whether the office has at least one active row for the period."""
        ...

    def list_active_rows(self, office_id: int, month: int, year: int) -> List[MonthlyAffiliation]:
        """Active ORM rows of an office for a period."""
        ...

    def list_for_period(self, office_id: int, month: int, year: int) -> List[AffiliationRead]:
        """Active affiliations of an office for a period, decoded for the API."""
        ...

    def list_inactive(
        self, office_id: int, user_id: int, month: Optional[int] = None, year: Optional[int] = None
    ) -> List[InactiveAffiliationRead]:
        """Soft-deleted affiliations with their unsubscription record, if any."""
        ...
