"""
SQLAlchemy Implementation of Catalog Repository.

Names are matched trimmed and case-insensitively everywhere.
"""

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from afiliaciones.domain.models.catalog import Arl, Ccf, Company, Eps, PensionFund
from afiliaciones.domain.repositories.catalog_repository import CatalogCategory, CatalogRepository
from afiliaciones.domain.schemas.common import CatalogItem

CATALOG_MODELS = {
    CatalogCategory.COMPANY: Company,
    CatalogCategory.EPS: Eps,
    CatalogCategory.ARL: Arl,
    CatalogCategory.CCF: Ccf,
    CatalogCategory.PENSION_FUND: PensionFund,
}


def normalize_catalog_name(name: Optional[str]) -> str:
    return name.strip().lower() if name else ""


class SQLAlchemyCatalogRepository(CatalogRepository):
    """Catalog lookups using SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db

    def resolve_id(self, category: CatalogCategory, name: Optional[str]) -> Optional[int]:
        key = normalize_catalog_name(name)
        if not key:
            return None
        model = CATALOG_MODELS[category]
        row = (
            self.db.query(model.id)
            .filter(func.lower(func.trim(model.name)) == key)
            .order_by(model.id)
            .first()
        )
        return row[0] if row else None

    def exists(self, category: CatalogCategory, id: int) -> bool:
        return self.db.get(CATALOG_MODELS[category], id) is not None

    def name_map(self, category: CatalogCategory) -> Dict[str, int]:
        model = CATALOG_MODELS[category]
        names: Dict[str, int] = {}
        # Names that only differ by case or padding resolve to the oldest row
        for id, name in self.db.query(model.id, model.name).order_by(model.id).all():
            if name:
                names.setdefault(normalize_catalog_name(name), id)
        return names

    def list_all(self, category: CatalogCategory) -> List[CatalogItem]:
        model = CATALOG_MODELS[category]
        rows = self.db.query(model).order_by(model.name.asc()).all()
        return [CatalogItem.model_validate(r) for r in rows]
