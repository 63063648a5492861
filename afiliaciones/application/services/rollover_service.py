"""Rollover service — copy the latest active month of an office into the current one.

Rolled-over rows always start unpaid: status Pendiente with both payment
dates cleared. The batch is all-or-nothing; rows whose active scope already
exists in the current month are skipped, not failed.
"""

from typing import Optional, Tuple

import structlog
from sqlalchemy.orm import Session

from afiliaciones.application.services.auth_service import user_has_office_access
from afiliaciones.application.services.payment_status import apply_payment_status
from afiliaciones.core import clock
from afiliaciones.core.exceptions import EntityNotFoundException, ForbiddenException
from afiliaciones.domain.models.affiliation import MonthlyAffiliation, PaymentStatus
from afiliaciones.domain.models.user import User
from afiliaciones.domain.repositories.affiliation_repository import AffiliationRepository
from afiliaciones.domain.schemas.affiliation import RolloverResult
from afiliaciones.infrastructure.database import transaction

logger = structlog.get_logger(__name__)

MAX_LOOKBACK_MONTHS = 12


def find_source_period(
    affiliations: AffiliationRepository, office_id: int, month: int, year: int
) -> Optional[Tuple[int, int]]:
    """Nearest earlier period with active rows, looking back at most a year."""
    for _ in range(MAX_LOOKBACK_MONTHS):
        month, year = clock.previous_period(month, year)
        if affiliations.office_has_active_rows(office_id, month, year):
            return month, year
    return None


def rollover_affiliations(
    db: Session, affiliations: AffiliationRepository, office_id: int, user: User
) -> RolloverResult:
    if not user_has_office_access(db, user.id, office_id):
        raise ForbiddenException("El usuario no tiene acceso a esta oficina.")

    now = clock.now_local()
    month, year = now.month, now.year

    if affiliations.office_has_rows(office_id, month, year):
        logger.info("Rollover skipped, period already populated", office_id=office_id, period=f"{month}/{year}")
        return RolloverResult(message="Las afiliaciones del mes actual ya existen. No se copió ningún registro.")

    source = find_source_period(affiliations, office_id, month, year)
    if source is None:
        raise EntityNotFoundException("No se encontraron afiliaciones activas en los últimos 12 meses.")
    source_month, source_year = source

    copied = skipped = 0
    with transaction(db):
        for row in affiliations.list_active_rows(office_id, source_month, source_year):
            if affiliations.find_active(row.client_id, month, year, office_id, user.id) is not None:
                skipped += 1
                continue
            new_row = MonthlyAffiliation(
                client_id=row.client_id,
                month=month,
                year=year,
                value=row.value,
                eps_id=row.eps_id,
                arl_id=row.arl_id,
                ccf_id=row.ccf_id,
                pension_fund_id=row.pension_fund_id,
                risk=row.risk,
                observation=row.observation,
                office_id=office_id,
                user_id=user.id,
                company_id=row.company_id,
                is_active=True,
            )
            apply_payment_status(new_row, PaymentStatus.PENDIENTE, now)
            affiliations.add(new_row)
            copied += 1

    logger.info(
        "Rollover completed",
        office_id=office_id,
        user_id=user.id,
        source=f"{source_month}/{source_year}",
        copied=copied,
        skipped=skipped,
    )
    return RolloverResult(
        message=f"Afiliaciones de {source_month}/{source_year} copiadas al mes actual.",
        copied=copied,
        skipped=skipped,
        source_month=source_month,
        source_year=source_year,
    )
