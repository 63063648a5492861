"""
SQLAlchemy Implementation of Affiliation Repository.

Rows are decoded into API records here and only here, so the mapping between
business field names and storage columns (``paid`` ↔ ``paid_status``,
``govRegistryCompletedAt`` ↔ ``gov_record_completed_at``) lives in one place.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from afiliaciones.domain.models.affiliation import MonthlyAffiliation
from afiliaciones.domain.models.client import Client
from afiliaciones.domain.models.unsubscription import ClientUnsubscription
from afiliaciones.domain.repositories.affiliation_repository import AffiliationRepository
from afiliaciones.domain.schemas.affiliation import AffiliationRead, InactiveAffiliationRead
from afiliaciones.infrastructure.repositories.base_repository import SQLAlchemyRepository


def _catalog_name(entry) -> Optional[str]:
    return entry.name if entry is not None else None


def _affiliation_fields(row: MonthlyAffiliation) -> dict:
    client = row.client
    return {
        "client_id": client.id,
        "affiliation_id": row.id,
        "full_name": client.full_name,
        "identification": client.identification,
        "company_name": _catalog_name(client.company),
        "value": row.value,
        "risk": row.risk,
        "observation": row.observation,
        "paid": row.paid_status,
        "date_paid_received": row.date_paid_received,
        "gov_registry_completed_at": row.gov_record_completed_at,
        "eps": _catalog_name(row.eps),
        "arl": _catalog_name(row.arl),
        "ccf": _catalog_name(row.ccf),
        "pension_fund": _catalog_name(row.pension_fund),
        "phones": [p.phone_number for p in client.phones],
    }


def to_affiliation_read(row: MonthlyAffiliation) -> AffiliationRead:
    return AffiliationRead(**_affiliation_fields(row))


def to_inactive_affiliation_read(
    row: MonthlyAffiliation, unsubscription: Optional[ClientUnsubscription]
) -> InactiveAffiliationRead:
    fields = _affiliation_fields(row)
    fields.update(
        company_id=row.company_id,
        deleted_at=row.deleted_at,
        deleted_by_user_name=row.deleted_by.username if row.deleted_by is not None else None,
    )
    if unsubscription is not None:
        fields.update(
            unsubscription_record_id=unsubscription.id,
            unsubscription_date=unsubscription.unsubscription_date,
            unsubscription_reason=unsubscription.reason,
            unsubscription_cost=unsubscription.cost,
            unsubscription_observation=unsubscription.observation,
        )
    return InactiveAffiliationRead(**fields)


class SQLAlchemyAffiliationRepository(SQLAlchemyRepository[MonthlyAffiliation], AffiliationRepository):
    """MonthlyAffiliation repository implementation using SQLAlchemy."""

    def __init__(self, db: Session, model=MonthlyAffiliation):
        super().__init__(db, model)

    def find_active(
        self, client_id: int, month: int, year: int, office_id: int, user_id: int
    ) -> Optional[MonthlyAffiliation]:
        return (
            self.db.query(MonthlyAffiliation)
            .filter(
                MonthlyAffiliation.client_id == client_id,
                MonthlyAffiliation.month == month,
                MonthlyAffiliation.year == year,
                MonthlyAffiliation.office_id == office_id,
                MonthlyAffiliation.user_id == user_id,
                MonthlyAffiliation.is_active.is_(True),
            )
            .first()
        )

    def get_active(self, id: int) -> Optional[MonthlyAffiliation]:
        return (
            self.db.query(MonthlyAffiliation)
            .filter(MonthlyAffiliation.id == id, MonthlyAffiliation.is_active.is_(True))
            .first()
        )

    def office_has_rows(self, office_id: int, month: int, year: int) -> bool:
        return (
            self.db.query(MonthlyAffiliation.id)
            .filter(
                MonthlyAffiliation.office_id == office_id,
                MonthlyAffiliation.month == month,
                MonthlyAffiliation.year == year,
            )
            .first()
            is not None
        )

    def office_has_active_rows(self, office_id: int, month: int, year: int) -> bool:
        return (
            self.db.query(MonthlyAffiliation.id)
            .filter(
                MonthlyAffiliation.office_id == office_id,
                MonthlyAffiliation.month == month,
                MonthlyAffiliation.year == year,
                MonthlyAffiliation.is_active.is_(True),
            )
            .first()
            is not None
        )

    def list_active_rows(self, office_id: int, month: int, year: int) -> List[MonthlyAffiliation]:
        return (
            self.db.query(MonthlyAffiliation)
            .filter(
                MonthlyAffiliation.office_id == office_id,
                MonthlyAffiliation.month == month,
                MonthlyAffiliation.year == year,
                MonthlyAffiliation.is_active.is_(True),
            )
            .order_by(MonthlyAffiliation.id)
            .all()
        )

    def list_for_period(self, office_id: int, month: int, year: int) -> List[AffiliationRead]:
        rows = (
            self.db.query(MonthlyAffiliation)
            .join(Client, Client.id == MonthlyAffiliation.client_id)
            .filter(
                MonthlyAffiliation.office_id == office_id,
                MonthlyAffiliation.month == month,
                MonthlyAffiliation.year == year,
                MonthlyAffiliation.is_active.is_(True),
                MonthlyAffiliation.deleted_at.is_(None),
            )
            .order_by(Client.full_name.asc(), MonthlyAffiliation.id.asc())
            .all()
        )
        return [to_affiliation_read(r) for r in rows]

    def list_inactive(
        self, office_id: int, user_id: int, month: Optional[int] = None, year: Optional[int] = None
    ) -> List[InactiveAffiliationRead]:
        query = (
            self.db.query(MonthlyAffiliation, ClientUnsubscription)
            .outerjoin(ClientUnsubscription, ClientUnsubscription.affiliation_id == MonthlyAffiliation.id)
            .filter(
                MonthlyAffiliation.is_active.is_(False),
                MonthlyAffiliation.office_id == office_id,
                MonthlyAffiliation.user_id == user_id,
            )
        )
        if month:
            query = query.filter(MonthlyAffiliation.month == month)
        if year:
            query = query.filter(MonthlyAffiliation.year == year)

        rows = query.order_by(
            MonthlyAffiliation.deleted_at.desc(), MonthlyAffiliation.created_at.desc()
        ).all()
        return [to_inactive_affiliation_read(affiliation, unsub) for affiliation, unsub in rows]
