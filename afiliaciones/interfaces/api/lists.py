"""Catalog list routes — EPS, ARL, CCF, pension funds and companies."""

from fastapi import APIRouter, Depends

from afiliaciones.application.services.catalog_service import get_lists
from afiliaciones.domain.repositories.catalog_repository import CatalogRepository
from afiliaciones.interfaces.deps import get_catalog_repository

router = APIRouter(prefix="/api/lists", tags=["Lists"])


@router.get("")
def list_catalogs(repo: CatalogRepository = Depends(get_catalog_repository)):
    return get_lists(repo)
