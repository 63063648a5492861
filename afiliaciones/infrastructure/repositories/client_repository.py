"""
SQLAlchemy Implementation of Client Repository.
"""

from typing import Optional

from afiliaciones.domain.models.client import Client
from afiliaciones.domain.models.client_phone import ClientPhone
from afiliaciones.domain.repositories.client_repository import ClientRepository
from afiliaciones.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyClientRepository(SQLAlchemyRepository[Client], ClientRepository):
    """Client repository implementation using SQLAlchemy."""

    def get_by_identification(self, identification: str) -> Optional[Client]:
        return self.db.query(Client).filter(Client.identification == identification).first()

    def add_phone_if_missing(self, client_id: int, phone_number: str) -> bool:
        exists = (
            self.db.query(ClientPhone.id)
            .filter(ClientPhone.client_id == client_id, ClientPhone.phone_number == phone_number)
            .first()
        )
        if exists:
            return False
        self.db.add(ClientPhone(client_id=client_id, phone_number=phone_number))
        self.db.flush()
        self._expire_phones(client_id)
        return True

    def delete_phones(self, client_id: int) -> int:
        deleted = (
            self.db.query(ClientPhone)
            .filter(ClientPhone.client_id == client_id)
            .delete(synchronize_session="fetch")
        )
        self.db.flush()
        self._expire_phones(client_id)
        return deleted

    def _expire_phones(self, client_id: int) -> None:
        client = self.db.get(Client, client_id)
        if client is not None:
            self.db.expire(client, ["phones"])
