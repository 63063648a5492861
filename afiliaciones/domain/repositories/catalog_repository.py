"""
Catalog Repository Interface.
Name → id resolution over the read-only catalog tables.
"""

import enum
from typing import Dict, List, Optional, Protocol

from afiliaciones.domain.schemas.common import CatalogItem


class CatalogCategory(str, enum.Enum):
    COMPANY = "companies"
    EPS = "eps"
    ARL = "arl"
    CCF = "ccf"
    PENSION_FUND = "pensionFunds"


class CatalogRepository(Protocol):
    """Interface for catalog lookups."""

    def resolve_id(self, category: CatalogCategory, name: Optional[str]) -> Optional[int]:
        """Id for a catalog name, or None when the name is empty or unknown."""
        ...

    def exists(self, category: CatalogCategory, id: int) -> bool:
        """Whether a catalog entry with this id exists."""
        ...

    def name_map(self, category: CatalogCategory) -> Dict[str, int]:
        """Normalized name → id for the whole catalog (bulk lookups)."""
        ...

    def list_all(self, category: CatalogCategory) -> List[CatalogItem]:
        """All entries ordered by name."""
        ...
