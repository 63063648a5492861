"""Client phone numbers — zero or more per client."""

from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint

from afiliaciones.infrastructure.database import Base


class ClientPhone(Base):
    __tablename__ = "client_phones"
    __table_args__ = (UniqueConstraint("client_id", "phone_number", name="uq_client_phone"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    phone_number = Column(String(30), nullable=False)

    def __repr__(self):
        return f"<ClientPhone {self.client_id} - {self.phone_number}>"
