"""Monthly rollover route."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from afiliaciones.application.services.rollover_service import rollover_affiliations
from afiliaciones.domain.models.user import User
from afiliaciones.domain.repositories.affiliation_repository import AffiliationRepository
from afiliaciones.domain.schemas.affiliation import RolloverRequest, RolloverResult
from afiliaciones.infrastructure.database import get_db
from afiliaciones.interfaces.api.deps import get_current_user
from afiliaciones.interfaces.deps import get_affiliation_repository

router = APIRouter(prefix="/api/monthly_affiliations", tags=["Monthly Affiliations"])


@router.post("", response_model=RolloverResult)
def rollover(
    body: RolloverRequest,
    db: Session = Depends(get_db),
    repo: AffiliationRepository = Depends(get_affiliation_repository),
    user: User = Depends(get_current_user),
):
    """Copy the latest active month of the office into the current month."""
    return rollover_affiliations(db, repo, body.office_id, user)
