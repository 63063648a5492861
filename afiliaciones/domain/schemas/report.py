"""Pydantic schemas for report aggregations."""

from decimal import Decimal
from typing import Optional

from afiliaciones.domain.schemas.common import CamelModel


class EarningsPoint(CamelModel):
    month: int
    year: int
    total_earnings: Decimal


class TotalEarningsReport(CamelModel):
    success: bool = True
    data: dict[str, EarningsPoint]


class UserPerformanceRow(CamelModel):
    user_id: int
    username: str
    total_affiliations_registered: int
    total_value_brute: Decimal
    total_value_paid: Decimal
    percentage_paid: Optional[Decimal] = None


class MonthlyIncomeTrendRow(CamelModel):
    year: int
    month: int
    month_name: str
    total_value_paid: Decimal
