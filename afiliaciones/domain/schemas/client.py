"""Pydantic schemas for Client domain."""

from datetime import datetime
from typing import Optional

from pydantic import Field, PositiveInt

from afiliaciones.domain.schemas.common import CamelModel


class ClientCreate(CamelModel):
    full_name: str = Field(min_length=1, max_length=300)
    identification: str = Field(min_length=1, max_length=50)
    company_id: PositiveInt


class ClientRead(CamelModel):
    id: int
    full_name: str
    identification: str
    company_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ClientCreated(CamelModel):
    client: ClientRead
