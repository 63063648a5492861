"""Report service — read-only aggregations over active affiliations."""

from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from afiliaciones.core import clock
from afiliaciones.core.exceptions import ValidationException
from afiliaciones.domain.models.affiliation import MonthlyAffiliation, PaymentStatus
from afiliaciones.domain.models.user import User
from afiliaciones.domain.schemas.report import EarningsPoint, MonthlyIncomeTrendRow, UserPerformanceRow

MONTH_NAMES = {
    1: "enero",
    2: "febrero",
    3: "marzo",
    4: "abril",
    5: "mayo",
    6: "junio",
    7: "julio",
    8: "agosto",
    9: "septiembre",
    10: "octubre",
    11: "noviembre",
    12: "diciembre",
}

EARNINGS_KEYS = ("currentMonth", "monthMinus1", "monthMinus2", "monthMinus3")

CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENTS)


def _is_paid():
    return MonthlyAffiliation.paid_status == PaymentStatus.PAGADO.value


def get_total_earnings(
    db: Session,
    office_id: int,
    user_id: int,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> Dict[str, EarningsPoint]:
    """Paid value for the reference month and the three months before it."""
    if month is None or year is None:
        month, year = clock.current_period()

    data: Dict[str, EarningsPoint] = {}
    for key in EARNINGS_KEYS:
        total = (
            db.query(func.coalesce(func.sum(MonthlyAffiliation.value), 0))
            .filter(
                MonthlyAffiliation.office_id == office_id,
                MonthlyAffiliation.user_id == user_id,
                MonthlyAffiliation.month == month,
                MonthlyAffiliation.year == year,
                MonthlyAffiliation.is_active.is_(True),
                _is_paid(),
            )
            .scalar()
        )
        data[key] = EarningsPoint(month=month, year=year, total_earnings=_money(total))
        month, year = clock.previous_period(month, year)
    return data


def get_user_performance(
    db: Session, month: int, year: int, office_id: Optional[int] = None
) -> List[UserPerformanceRow]:
    paid_value = case((_is_paid(), MonthlyAffiliation.value), else_=0)
    query = (
        db.query(
            User.id,
            User.username,
            func.count(MonthlyAffiliation.id).label("registered"),
            func.coalesce(func.sum(MonthlyAffiliation.value), 0).label("gross"),
            func.coalesce(func.sum(paid_value), 0).label("paid"),
        )
        .join(MonthlyAffiliation, MonthlyAffiliation.user_id == User.id)
        .filter(
            MonthlyAffiliation.month == month,
            MonthlyAffiliation.year == year,
            MonthlyAffiliation.is_active.is_(True),
        )
    )
    if office_id:
        query = query.filter(MonthlyAffiliation.office_id == office_id)

    rows = []
    for user_id, username, registered, gross, paid in query.group_by(User.id, User.username).all():
        gross, paid = _money(gross), _money(paid)
        # Zero gross has no meaningful ratio
        percentage = (paid * 100 / gross).quantize(CENTS) if gross else None
        rows.append(
            UserPerformanceRow(
                user_id=user_id,
                username=username,
                total_affiliations_registered=registered,
                total_value_brute=gross,
                total_value_paid=paid,
                percentage_paid=percentage,
            )
        )
    rows.sort(key=lambda r: (-r.total_value_paid, r.username))
    return rows


def get_monthly_income_trend(
    db: Session, start_year: int, end_year: int, office_id: Optional[int] = None
) -> List[MonthlyIncomeTrendRow]:
    if end_year < start_year:
        raise ValidationException("El año final debe ser mayor o igual al año inicial.")

    query = (
        db.query(
            MonthlyAffiliation.year,
            MonthlyAffiliation.month,
            func.coalesce(func.sum(case((_is_paid(), MonthlyAffiliation.value), else_=0)), 0).label("paid"),
        )
        .filter(
            MonthlyAffiliation.year >= start_year,
            MonthlyAffiliation.year <= end_year,
            MonthlyAffiliation.is_active.is_(True),
        )
    )
    if office_id:
        query = query.filter(MonthlyAffiliation.office_id == office_id)

    rows = (
        query.group_by(MonthlyAffiliation.year, MonthlyAffiliation.month)
        .order_by(MonthlyAffiliation.year, MonthlyAffiliation.month)
        .all()
    )
    return [
        MonthlyIncomeTrendRow(
            year=year,
            month=month,
            month_name=MONTH_NAMES[month],
            total_value_paid=_money(paid),
        )
        for year, month, paid in rows
    ]
