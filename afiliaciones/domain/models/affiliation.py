"""Monthly affiliation — one client's enrollment for one month at one office."""

import enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    SmallInteger,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from afiliaciones.infrastructure.database import Base


class PaymentStatus(str, enum.Enum):
    PENDIENTE = "Pendiente"
    PAGADO = "Pagado"
    EN_PROCESO = "En Proceso"


class MonthlyAffiliation(Base):
    __tablename__ = "monthly_affiliations"
    __table_args__ = (
        # At most one active row per (client, period, office, user)
        Index(
            "uq_active_affiliation_scope",
            "client_id", "month", "year", "office_id", "user_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
        Index("ix_affiliation_office_period", "office_id", "year", "month"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    month = Column(SmallInteger, nullable=False)
    year = Column(SmallInteger, nullable=False)
    value = Column(Numeric(12, 2), nullable=False, default=0)

    eps_id = Column(Integer, ForeignKey("eps_list.id"), nullable=True)
    arl_id = Column(Integer, ForeignKey("arl_list.id"), nullable=True)
    ccf_id = Column(Integer, ForeignKey("ccf_list.id"), nullable=True)
    pension_fund_id = Column(Integer, ForeignKey("pension_fund_list.id"), nullable=True)
    risk = Column(String(50), nullable=True)
    observation = Column(Text, nullable=True)

    office_id = Column(Integer, ForeignKey("offices.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True)

    paid_status = Column(String(20), nullable=False, default=PaymentStatus.PENDIENTE.value)
    date_paid_received = Column(DateTime, nullable=True)
    gov_record_completed_at = Column(DateTime, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    deleted_at = Column(DateTime, nullable=True)
    deleted_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    client = relationship("Client", lazy="joined")
    eps = relationship("Eps", lazy="joined")
    arl = relationship("Arl", lazy="joined")
    ccf = relationship("Ccf", lazy="joined")
    pension_fund = relationship("PensionFund", lazy="joined")
    deleted_by = relationship("User", foreign_keys=[deleted_by_user_id], lazy="joined")

    def __repr__(self):
        return f"<MonthlyAffiliation {self.id} client={self.client_id} {self.month}/{self.year}>"
