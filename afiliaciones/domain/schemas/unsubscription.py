"""Pydantic schemas for unsubscriptions."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import Field, PositiveInt

from afiliaciones.domain.schemas.common import CamelModel

Cost = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


class UnsubscriptionCreate(CamelModel):
    affiliation_id: PositiveInt
    processed_by: PositiveInt
    reason: Optional[str] = None
    cost: Optional[Cost] = None
    observation: Optional[str] = None


class UnsubscriptionUpdate(CamelModel):
    unsubscription_id: PositiveInt
    reason: Optional[str] = None
    cost: Optional[Cost] = None
    observation: Optional[str] = None


class UnsubscriptionRead(CamelModel):
    id: int
    affiliation_id: int
    reason: Optional[str] = None
    cost: Decimal
    user_id: int
    observation: Optional[str] = None
    unsubscription_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UnsubscriptionUpdated(CamelModel):
    success: bool = True
    message: str
    unsubscription_id: int
