"""Unsubscription — terminal record against one affiliation."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.sql import func

from afiliaciones.infrastructure.database import Base


class ClientUnsubscription(Base):
    __tablename__ = "clients_unsubscriptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    affiliation_id = Column(
        Integer, ForeignKey("monthly_affiliations.id"), unique=True, nullable=False, index=True
    )
    reason = Column(String(500), nullable=True)
    cost = Column(Numeric(12, 2), nullable=False, default=0)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    observation = Column(Text, nullable=True)
    unsubscription_date = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<ClientUnsubscription {self.id} affiliation={self.affiliation_id}>"
