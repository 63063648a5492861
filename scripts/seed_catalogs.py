"""Load catalogs and offices from a JSON file.

Usage: python scripts/seed_catalogs.py catalogs.json

The file holds name lists per catalog plus the offices, e.g.::

    {
      "companies": ["ACME S.A.S"],
      "eps": ["Sura", "Sanitas"],
      "arl": ["Positiva"],
      "ccf": ["Comfama"],
      "pensionFunds": ["Porvenir"],
      "offices": [{"name": "Principal", "representativeName": "Ana"}]
    }

Existing names (trimmed, case-insensitive) are left untouched.
"""

import json
import os
import sys

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from afiliaciones.config import get_settings
from afiliaciones.domain.models.office import Office
from afiliaciones.domain.repositories.catalog_repository import CatalogCategory
from afiliaciones.infrastructure.database import Database, transaction
from afiliaciones.infrastructure.repositories.catalog_repository import (
    CATALOG_MODELS,
    SQLAlchemyCatalogRepository,
)


def seed(db, data: dict) -> dict:
    """Insert missing catalog names and offices; returns counts per section."""
    catalogs = SQLAlchemyCatalogRepository(db)
    counts = {}
    with transaction(db):
        for category in CatalogCategory:
            model = CATALOG_MODELS[category]
            inserted = 0
            for name in data.get(category.value, []):
                name = name.strip()
                if name and catalogs.resolve_id(category, name) is None:
                    db.add(model(name=name))
                    db.flush()
                    inserted += 1
            counts[category.value] = inserted

        inserted = 0
        for office in data.get("offices", []):
            if db.query(Office.id).filter(Office.name == office["name"]).first():
                continue
            db.add(
                Office(
                    name=office["name"],
                    representative_name=office.get("representativeName"),
                    logo_url=office.get("logoUrl"),
                )
            )
            inserted += 1
        counts["offices"] = inserted
    return counts


def main(path: str):
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    settings = get_settings()
    database = Database(settings.DATABASE_URL)
    database.create_all()
    db = database.SessionLocal()
    try:
        counts = seed(db, data)
    finally:
        db.close()
        database.dispose()

    for section, inserted in counts.items():
        print(f"{section}: {inserted} inserted")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python scripts/seed_catalogs.py <catalogs.json>")
        sys.exit(1)
    main(sys.argv[1])
