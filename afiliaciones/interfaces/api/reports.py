"""Report API routes — earnings, user performance and income trend."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from afiliaciones.application.services.report_service import (
    get_monthly_income_trend,
    get_total_earnings,
    get_user_performance,
)
from afiliaciones.domain.schemas.report import MonthlyIncomeTrendRow, TotalEarningsReport, UserPerformanceRow
from afiliaciones.infrastructure.database import get_db

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/total-earnings", response_model=TotalEarningsReport)
def total_earnings(
    office_id: int = Query(..., alias="officeId", gt=0),
    user_id: int = Query(..., alias="userId", gt=0),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    db: Session = Depends(get_db),
):
    """Paid value of the reference month and the three before it."""
    return TotalEarningsReport(data=get_total_earnings(db, office_id, user_id, month, year))


@router.get("/user-performance", response_model=List[UserPerformanceRow])
def user_performance(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000),
    office_id: Optional[int] = Query(None, alias="officeId", gt=0),
    db: Session = Depends(get_db),
):
    return get_user_performance(db, month, year, office_id)


@router.get("/monthly-income-trend", response_model=List[MonthlyIncomeTrendRow])
def monthly_income_trend(
    start_year: int = Query(..., alias="startYear", ge=2000),
    end_year: int = Query(..., alias="endYear", ge=2000),
    office_id: Optional[int] = Query(None, alias="officeId", gt=0),
    db: Session = Depends(get_db),
):
    return get_monthly_income_trend(db, start_year, end_year, office_id)
