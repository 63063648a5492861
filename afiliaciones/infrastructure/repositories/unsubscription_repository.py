"""
SQLAlchemy Implementation of Unsubscription Repository.
"""

from typing import Optional

from afiliaciones.domain.models.unsubscription import ClientUnsubscription
from afiliaciones.domain.repositories.unsubscription_repository import UnsubscriptionRepository
from afiliaciones.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUnsubscriptionRepository(SQLAlchemyRepository[ClientUnsubscription], UnsubscriptionRepository):
    """Unsubscription repository implementation using SQLAlchemy."""

    def get_by_affiliation(self, affiliation_id: int) -> Optional[ClientUnsubscription]:
        return (
            self.db.query(ClientUnsubscription)
            .filter(ClientUnsubscription.affiliation_id == affiliation_id)
            .first()
        )
