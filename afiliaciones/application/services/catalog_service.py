"""Catalog service — reference lists for the frontend selectors."""

from typing import Dict, List

from afiliaciones.domain.repositories.catalog_repository import CatalogCategory, CatalogRepository
from afiliaciones.domain.schemas.common import CatalogItem


def get_lists(repo: CatalogRepository) -> Dict[str, List[CatalogItem]]:
    return {category.value: repo.list_all(category) for category in CatalogCategory}
