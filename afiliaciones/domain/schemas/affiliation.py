"""Pydantic schemas for monthly affiliations."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import Field, PositiveInt

from afiliaciones.domain.models.affiliation import PaymentStatus
from afiliaciones.domain.schemas.common import CamelModel

Month = Annotated[int, Field(ge=1, le=12)]
Year = Annotated[int, Field(ge=2000, le=9999)]
Money = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


class AffiliationQuery(CamelModel):
    month: Month
    year: Year
    user_id: PositiveInt
    office_id: PositiveInt


class AffiliationRead(CamelModel):
    client_id: int
    affiliation_id: int
    full_name: str
    identification: str
    company_name: Optional[str] = None
    value: Decimal
    risk: Optional[str] = None
    observation: Optional[str] = None
    paid: PaymentStatus
    date_paid_received: Optional[datetime] = None
    gov_registry_completed_at: Optional[datetime] = None
    eps: Optional[str] = None
    arl: Optional[str] = None
    ccf: Optional[str] = None
    pension_fund: Optional[str] = None
    phones: list[str] = []


class InactiveAffiliationRead(AffiliationRead):
    company_id: Optional[int] = None
    deleted_at: Optional[datetime] = None
    deleted_by_user_name: Optional[str] = None
    unsubscription_record_id: Optional[int] = None
    unsubscription_date: Optional[datetime] = None
    unsubscription_reason: Optional[str] = None
    unsubscription_cost: Optional[Decimal] = None
    unsubscription_observation: Optional[str] = None


class AffiliationDelete(CamelModel):
    affiliation_id: PositiveInt
    user_id: PositiveInt


class PaymentStatusUpdate(CamelModel):
    affiliation_id: PositiveInt
    paid: PaymentStatus


class AffiliationUpdate(CamelModel):
    affiliation_id: PositiveInt
    client_id: PositiveInt
    full_name: str = Field(min_length=1, max_length=300)
    identification: str = Field(min_length=1, max_length=50)
    company_id: Optional[PositiveInt] = None
    phones: list[str] = []
    value: Money
    eps: Optional[str] = None
    arl: Optional[str] = None
    risk: Optional[str] = None
    ccf: Optional[str] = None
    pension_fund: Optional[str] = None
    paid: PaymentStatus = PaymentStatus.PENDIENTE
    observation: Optional[str] = None
    gov_registry_completed_at: Optional[datetime] = None
    date_paid_received: Optional[datetime] = None


class AffiliationPayload(CamelModel):
    value: Money
    eps_id: Optional[PositiveInt] = None
    arl_id: Optional[PositiveInt] = None
    ccf_id: Optional[PositiveInt] = None
    pension_fund_id: Optional[PositiveInt] = None
    risk: Optional[str] = None
    observation: Optional[str] = None
    paid: PaymentStatus = PaymentStatus.PENDIENTE


class ClientAffiliationCreate(CamelModel):
    full_name: str = Field(min_length=1, max_length=300)
    identification: str = Field(min_length=1, max_length=50)
    office_id: PositiveInt
    user_id: PositiveInt
    company_id: Optional[PositiveInt] = None
    phones: list[str] = []
    affiliation: AffiliationPayload


class ClientAffiliationCreated(CamelModel):
    success: bool = True
    message: str
    client_id: int
    affiliation_id: int


class RolloverRequest(CamelModel):
    office_id: PositiveInt


class RolloverResult(CamelModel):
    message: str
    copied: int = 0
    skipped: int = 0
    source_month: Optional[int] = None
    source_year: Optional[int] = None


class BulkUploadRowError(CamelModel):
    row: int
    data: dict[str, Any]
    error: str


class BulkUploadResult(CamelModel):
    total_rows: int = 0
    imported_rows: int = 0
    errors: list[BulkUploadRowError] = []


class BulkUploadResponse(CamelModel):
    success: bool = True
    message: str
    results: BulkUploadResult
