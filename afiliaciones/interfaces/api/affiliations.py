"""Affiliation API routes — list, edit, payment status, soft delete and history."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from afiliaciones.application.services.affiliation_service import (
    create_client_affiliation,
    edit_affiliation,
    list_affiliations,
    list_inactive_history,
    soft_delete_affiliation,
    update_payment_status,
)
from afiliaciones.domain.repositories.affiliation_repository import AffiliationRepository
from afiliaciones.domain.repositories.catalog_repository import CatalogRepository
from afiliaciones.domain.repositories.client_repository import ClientRepository
from afiliaciones.domain.schemas.affiliation import (
    AffiliationDelete,
    AffiliationQuery,
    AffiliationRead,
    AffiliationUpdate,
    ClientAffiliationCreate,
    ClientAffiliationCreated,
    InactiveAffiliationRead,
    PaymentStatusUpdate,
)
from afiliaciones.infrastructure.database import get_db
from afiliaciones.infrastructure.repositories.affiliation_repository import to_affiliation_read
from afiliaciones.interfaces.deps import (
    get_affiliation_repository,
    get_catalog_repository,
    get_client_repository,
)

router = APIRouter(prefix="/api/affiliations", tags=["Affiliations"])
registration_router = APIRouter(prefix="/api/clients-and-affiliations", tags=["Affiliations"])


@router.post("", response_model=List[AffiliationRead])
def get_affiliations(
    body: AffiliationQuery,
    db: Session = Depends(get_db),
    repo: AffiliationRepository = Depends(get_affiliation_repository),
):
    """Active affiliations of an office for one month."""
    return list_affiliations(db, repo, body)


@router.put("")
def update_affiliation(
    body: AffiliationUpdate,
    db: Session = Depends(get_db),
    clients: ClientRepository = Depends(get_client_repository),
    repo: AffiliationRepository = Depends(get_affiliation_repository),
    catalogs: CatalogRepository = Depends(get_catalog_repository),
):
    edit_affiliation(db, clients, repo, catalogs, body)
    return {"success": True, "message": "Afiliación actualizada exitosamente."}


@router.delete("")
def delete_affiliation(
    body: AffiliationDelete,
    db: Session = Depends(get_db),
    repo: AffiliationRepository = Depends(get_affiliation_repository),
):
    soft_delete_affiliation(db, repo, body)
    return {"success": True, "message": "Afiliación eliminada exitosamente."}


@router.put("/paid")
def set_payment_status(
    body: PaymentStatusUpdate,
    db: Session = Depends(get_db),
    repo: AffiliationRepository = Depends(get_affiliation_repository),
):
    affiliation = update_payment_status(db, repo, body)
    return {
        "success": True,
        "message": "Estado de pago actualizado.",
        "affiliation": to_affiliation_read(affiliation).model_dump(mode="json", by_alias=True),
    }


@router.get("/history/inactive", response_model=List[InactiveAffiliationRead])
def inactive_history(
    office_id: int = Query(..., alias="officeId", gt=0),
    user_id: int = Query(..., alias="userId", gt=0),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    repo: AffiliationRepository = Depends(get_affiliation_repository),
):
    """Soft-deleted affiliations with their unsubscription data."""
    return list_inactive_history(repo, office_id, user_id, month, year)


@registration_router.post("", response_model=ClientAffiliationCreated, status_code=status.HTTP_201_CREATED)
def create_affiliation(
    body: ClientAffiliationCreate,
    db: Session = Depends(get_db),
    clients: ClientRepository = Depends(get_client_repository),
    repo: AffiliationRepository = Depends(get_affiliation_repository),
    catalogs: CatalogRepository = Depends(get_catalog_repository),
):
    """Find-or-create the client and open its affiliation for the current month."""
    return create_client_affiliation(db, clients, repo, catalogs, body)
