"""User domain model — maps to the 'users' table."""

import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from afiliaciones.infrastructure.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    OFFICE_MANAGER = "office_manager"
    VIEWER = "viewer"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default=UserRole.VIEWER.value)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    offices = relationship("Office", secondary="user_offices", lazy="selectin", order_by="Office.id")

    def __repr__(self):
        return f"<User {self.username}>"
