"""Offices and the user ↔ office access table."""

from sqlalchemy import Column, Integer, String, ForeignKey

from afiliaciones.infrastructure.database import Base


class Office(Base):
    __tablename__ = "offices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    representative_name = Column(String(200), nullable=True)
    logo_url = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<Office {self.id} - {self.name}>"


class UserOffice(Base):
    __tablename__ = "user_offices"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    office_id = Column(Integer, ForeignKey("offices.id", ondelete="CASCADE"), primary_key=True)
