"""Unsubscription API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from afiliaciones.application.services.unsubscription_service import (
    record_unsubscription,
    update_unsubscription,
)
from afiliaciones.domain.repositories.affiliation_repository import AffiliationRepository
from afiliaciones.domain.repositories.unsubscription_repository import UnsubscriptionRepository
from afiliaciones.domain.schemas.unsubscription import (
    UnsubscriptionCreate,
    UnsubscriptionRead,
    UnsubscriptionUpdate,
    UnsubscriptionUpdated,
)
from afiliaciones.infrastructure.database import get_db
from afiliaciones.interfaces.deps import get_affiliation_repository, get_unsubscription_repository

router = APIRouter(prefix="/api/affiliations/unsubscriptions", tags=["Unsubscriptions"])


@router.post("", response_model=UnsubscriptionRead, status_code=status.HTTP_201_CREATED)
@router.post("/create", response_model=UnsubscriptionRead, status_code=status.HTTP_201_CREATED)
def create_unsubscription(
    body: UnsubscriptionCreate,
    db: Session = Depends(get_db),
    repo: UnsubscriptionRepository = Depends(get_unsubscription_repository),
    affiliations: AffiliationRepository = Depends(get_affiliation_repository),
):
    record = record_unsubscription(db, repo, affiliations, body)
    return UnsubscriptionRead.model_validate(record)


@router.put("/update", response_model=UnsubscriptionUpdated)
def patch_unsubscription(
    body: UnsubscriptionUpdate,
    db: Session = Depends(get_db),
    repo: UnsubscriptionRepository = Depends(get_unsubscription_repository),
):
    record = update_unsubscription(db, repo, body)
    return UnsubscriptionUpdated(message="Registro de retiro actualizado.", unsubscription_id=record.id)
