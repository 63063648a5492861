"""Unsubscription service — one terminal record per affiliation."""

from decimal import Decimal

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from afiliaciones.core import clock
from afiliaciones.core.exceptions import ConflictException, EntityNotFoundException, ValidationException
from afiliaciones.domain.models.unsubscription import ClientUnsubscription
from afiliaciones.domain.models.user import User
from afiliaciones.domain.repositories.affiliation_repository import AffiliationRepository
from afiliaciones.domain.repositories.unsubscription_repository import UnsubscriptionRepository
from afiliaciones.domain.schemas.unsubscription import UnsubscriptionCreate, UnsubscriptionUpdate
from afiliaciones.infrastructure.database import transaction

logger = structlog.get_logger(__name__)

DUPLICATE_MESSAGE = "Ya existe un registro de retiro para esta afiliación."


def record_unsubscription(
    db: Session,
    repo: UnsubscriptionRepository,
    affiliations: AffiliationRepository,
    body: UnsubscriptionCreate,
) -> ClientUnsubscription:
    if affiliations.get_by_id(body.affiliation_id) is None:
        raise EntityNotFoundException("Afiliación no encontrada.")
    if db.get(User, body.processed_by) is None:
        raise ValidationException("El usuario indicado no existe.", {"processedBy": body.processed_by})

    try:
        with transaction(db):
            if repo.get_by_affiliation(body.affiliation_id) is not None:
                raise ConflictException(DUPLICATE_MESSAGE)
            record = repo.add(
                ClientUnsubscription(
                    affiliation_id=body.affiliation_id,
                    reason=body.reason,
                    cost=body.cost if body.cost is not None else Decimal("0"),
                    user_id=body.processed_by,
                    observation=body.observation,
                    unsubscription_date=clock.now_local(),
                )
            )
    except IntegrityError:
        raise ConflictException(DUPLICATE_MESSAGE)

    logger.info("Unsubscription recorded", unsubscription_id=record.id, affiliation_id=body.affiliation_id)
    return record


def update_unsubscription(
    db: Session, repo: UnsubscriptionRepository, body: UnsubscriptionUpdate
) -> ClientUnsubscription:
    """Patch only the supplied fields; the update timestamp always moves."""
    changes = body.model_dump(exclude_unset=True, exclude={"unsubscription_id"})
    if "cost" in changes and changes["cost"] is None:
        changes["cost"] = Decimal("0")

    with transaction(db):
        record = repo.get_by_id(body.unsubscription_id)
        if record is None:
            raise EntityNotFoundException("Registro de retiro no encontrado.")
        changes["updated_at"] = clock.now_local()
        repo.update(record, changes)

    logger.info("Unsubscription updated", unsubscription_id=record.id, fields=sorted(changes))
    return record
