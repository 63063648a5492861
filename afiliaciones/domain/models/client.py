"""Client domain model — maps to the 'clients' table."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from afiliaciones.infrastructure.database import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(300), nullable=False)
    identification = Column(String(50), unique=True, nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    company = relationship("Company", lazy="joined")
    # Phones are written through the client repository, never via this collection
    phones = relationship("ClientPhone", lazy="selectin", order_by="ClientPhone.id", viewonly=True)

    def __repr__(self):
        return f"<Client {self.identification} - {self.full_name}>"
