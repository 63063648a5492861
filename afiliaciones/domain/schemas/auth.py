"""Pydantic schemas for User and Auth."""

from datetime import datetime
from typing import Optional

from pydantic import Field, PositiveInt

from afiliaciones.domain.models.user import UserRole
from afiliaciones.domain.schemas.common import CamelModel


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class OfficeRead(CamelModel):
    office_id: int
    name: str
    representative_name: Optional[str] = None
    logo_url: Optional[str] = None


class LoginResponse(CamelModel):
    id: int
    username: str
    role: str
    offices: list[OfficeRead]
    token: str


class UserCreate(CamelModel):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)
    role: UserRole
    office_id: Optional[PositiveInt] = None


class UserRead(CamelModel):
    id: int
    username: str
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    office_id: Optional[int] = None


class UserCreated(CamelModel):
    user: UserRead
