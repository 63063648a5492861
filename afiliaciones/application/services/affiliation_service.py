"""Affiliation service — lifecycle of monthly affiliations.

Creation, edits, payment-status transitions and soft deletes. Every write
runs inside one transaction; a duplicate active row for the same
(client, month, year, office, user) scope is rejected, never merged.
"""

from typing import List, Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from afiliaciones.application.services.auth_service import user_has_office_access
from afiliaciones.application.services.client_service import (
    find_or_create_client,
    replace_phones,
    upsert_phones,
)
from afiliaciones.application.services.payment_status import apply_payment_status
from afiliaciones.core import clock
from afiliaciones.core.exceptions import (
    ConflictException,
    EntityNotFoundException,
    ForbiddenException,
    ValidationException,
)
from afiliaciones.domain.models.affiliation import MonthlyAffiliation
from afiliaciones.domain.models.user import User
from afiliaciones.domain.repositories.affiliation_repository import AffiliationRepository
from afiliaciones.domain.repositories.catalog_repository import CatalogCategory, CatalogRepository
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
from afiliaciones.infrastructure.database import transaction

logger = structlog.get_logger(__name__)

DUPLICATE_AFFILIATION_MESSAGE = "El cliente ya tiene una afiliación activa para este mes, oficina y usuario."
CONCURRENT_WRITE_MESSAGE = "Otro registro modificó estos datos al mismo tiempo. Intente de nuevo."


def integrity_conflict_message(exc: IntegrityError) -> str:
    """Name the duplicate affiliation when the active-scope index fired."""
    reason = str(exc.orig)
    if "uq_active_affiliation_scope" in reason or "monthly_affiliations." in reason:
        return DUPLICATE_AFFILIATION_MESSAGE
    return CONCURRENT_WRITE_MESSAGE


def list_affiliations(db: Session, repo: AffiliationRepository, query: AffiliationQuery) -> List[AffiliationRead]:
    if not user_has_office_access(db, query.user_id, query.office_id):
        raise ForbiddenException("El usuario no tiene acceso a esta oficina.")

    rows = repo.list_for_period(query.office_id, query.month, query.year)
    if not rows:
        raise EntityNotFoundException("No se encontraron afiliaciones para los parámetros proporcionados.")
    return rows


def _check_catalog_ids(catalogs: CatalogRepository, ids: dict) -> None:
    missing = {
        field: value
        for field, (category, value) in ids.items()
        if value is not None and not catalogs.exists(category, value)
    }
    if missing:
        raise ValidationException("Referencias de catálogo inexistentes.", {"missing": missing})


def create_client_affiliation(
    db: Session,
    clients: ClientRepository,
    affiliations: AffiliationRepository,
    catalogs: CatalogRepository,
    body: ClientAffiliationCreate,
) -> ClientAffiliationCreated:
    """Find-or-create the client and open its affiliation for the current month."""
    payload = body.affiliation
    _check_catalog_ids(
        catalogs,
        {
            "companyId": (CatalogCategory.COMPANY, body.company_id),
            "epsId": (CatalogCategory.EPS, payload.eps_id),
            "arlId": (CatalogCategory.ARL, payload.arl_id),
            "ccfId": (CatalogCategory.CCF, payload.ccf_id),
            "pensionFundId": (CatalogCategory.PENSION_FUND, payload.pension_fund_id),
        },
    )
    if not user_has_office_access(db, body.user_id, body.office_id):
        raise ForbiddenException("El usuario no tiene acceso a esta oficina.")

    now = clock.now_local()
    month, year = now.month, now.year

    try:
        with transaction(db):
            client, _ = find_or_create_client(clients, body.identification, body.full_name, body.company_id)
            upsert_phones(clients, client.id, body.phones)

            if affiliations.find_active(client.id, month, year, body.office_id, body.user_id) is not None:
                raise ConflictException(DUPLICATE_AFFILIATION_MESSAGE)

            affiliation = MonthlyAffiliation(
                client_id=client.id,
                month=month,
                year=year,
                value=payload.value,
                eps_id=payload.eps_id,
                arl_id=payload.arl_id,
                ccf_id=payload.ccf_id,
                pension_fund_id=payload.pension_fund_id,
                risk=payload.risk,
                observation=payload.observation,
                office_id=body.office_id,
                user_id=body.user_id,
                company_id=body.company_id or client.company_id,
                is_active=True,
            )
            apply_payment_status(affiliation, payload.paid, now)
            affiliations.add(affiliation)
    except IntegrityError as e:
        logger.warning("Affiliation insert rejected by a constraint", reason=str(e.orig))
        raise ConflictException(integrity_conflict_message(e))

    logger.info(
        "Affiliation created",
        affiliation_id=affiliation.id,
        client_id=client.id,
        office_id=body.office_id,
        period=f"{month}/{year}",
    )
    return ClientAffiliationCreated(
        message="Cliente y afiliación creados exitosamente.",
        client_id=client.id,
        affiliation_id=affiliation.id,
    )


def edit_affiliation(
    db: Session,
    clients: ClientRepository,
    affiliations: AffiliationRepository,
    catalogs: CatalogRepository,
    body: AffiliationUpdate,
) -> None:
    """Update the affiliation, its client and the client's phones as one unit."""
    if body.company_id is not None and not catalogs.exists(CatalogCategory.COMPANY, body.company_id):
        raise ValidationException("La compañía indicada no existe.", {"companyId": body.company_id})

    now = clock.now_local()
    try:
        with transaction(db):
            affiliation = affiliations.get_active(body.affiliation_id)
            if affiliation is None:
                raise EntityNotFoundException("Afiliación no encontrada.")
            client = clients.get_by_id(body.client_id)
            if client is None:
                raise EntityNotFoundException("Cliente no encontrado.")
            if affiliation.client_id != client.id:
                raise ValidationException("La afiliación no pertenece al cliente indicado.")

            affiliations.update(
                affiliation,
                {
                    "value": body.value,
                    "eps_id": catalogs.resolve_id(CatalogCategory.EPS, body.eps),
                    "arl_id": catalogs.resolve_id(CatalogCategory.ARL, body.arl),
                    "ccf_id": catalogs.resolve_id(CatalogCategory.CCF, body.ccf),
                    "pension_fund_id": catalogs.resolve_id(CatalogCategory.PENSION_FUND, body.pension_fund),
                    "risk": body.risk,
                    "observation": body.observation,
                },
            )
            apply_payment_status(
                affiliation,
                body.paid,
                now,
                date_paid_received=body.date_paid_received,
                gov_record_completed_at=body.gov_registry_completed_at,
            )

            client_changes = {
                "full_name": body.full_name.strip(),
                "identification": body.identification.strip(),
            }
            if body.company_id is not None:
                client_changes["company_id"] = body.company_id
                affiliation.company_id = body.company_id
            clients.update(client, client_changes)
            replace_phones(clients, client.id, body.phones)
    except IntegrityError:
        raise ConflictException("La identificación proporcionada ya pertenece a otro cliente.")

    logger.info("Affiliation updated", affiliation_id=body.affiliation_id, client_id=body.client_id)


def soft_delete_affiliation(
    db: Session, affiliations: AffiliationRepository, body: AffiliationDelete
) -> None:
    if db.get(User, body.user_id) is None:
        raise ValidationException("El usuario indicado no existe.", {"userId": body.user_id})

    with transaction(db):
        affiliation = affiliations.get_active(body.affiliation_id)
        if affiliation is None:
            raise EntityNotFoundException("Afiliación no encontrada o ya eliminada.")
        affiliations.update(
            affiliation,
            {
                "is_active": False,
                "deleted_at": clock.now_local(),
                "deleted_by_user_id": body.user_id,
            },
        )

    logger.info("Affiliation soft-deleted", affiliation_id=body.affiliation_id, user_id=body.user_id)


def update_payment_status(
    db: Session, affiliations: AffiliationRepository, body: PaymentStatusUpdate
) -> MonthlyAffiliation:
    with transaction(db):
        affiliation = affiliations.get_active(body.affiliation_id)
        if affiliation is None:
            raise EntityNotFoundException("Afiliación no encontrada.")
        apply_payment_status(affiliation, body.paid, clock.now_local())
        db.flush()

    logger.info("Payment status updated", affiliation_id=affiliation.id, paid=affiliation.paid_status)
    return affiliation


def list_inactive_history(
    affiliations: AffiliationRepository,
    office_id: int,
    user_id: int,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> List[InactiveAffiliationRead]:
    rows = affiliations.list_inactive(office_id, user_id, month, year)
    if not rows:
        raise EntityNotFoundException("No se encontraron afiliaciones inactivas.")
    return rows
