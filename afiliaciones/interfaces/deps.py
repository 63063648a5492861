"""
API Dependencies.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from afiliaciones.config import Settings
from afiliaciones.domain.models.affiliation import MonthlyAffiliation
from afiliaciones.domain.models.client import Client
from afiliaciones.domain.models.unsubscription import ClientUnsubscription
from afiliaciones.domain.repositories.affiliation_repository import AffiliationRepository
from afiliaciones.domain.repositories.catalog_repository import CatalogRepository
from afiliaciones.domain.repositories.client_repository import ClientRepository
from afiliaciones.domain.repositories.unsubscription_repository import UnsubscriptionRepository
from afiliaciones.infrastructure.database import get_db
from afiliaciones.infrastructure.repositories.affiliation_repository import SQLAlchemyAffiliationRepository
from afiliaciones.infrastructure.repositories.catalog_repository import SQLAlchemyCatalogRepository
from afiliaciones.infrastructure.repositories.client_repository import SQLAlchemyClientRepository
from afiliaciones.infrastructure.repositories.unsubscription_repository import (
    SQLAlchemyUnsubscriptionRepository,
)


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_client_repository(db: Session = Depends(get_db)) -> ClientRepository:
    """Get client repository instance."""
    return SQLAlchemyClientRepository(db, Client)


def get_affiliation_repository(db: Session = Depends(get_db)) -> AffiliationRepository:
    """Get affiliation repository instance."""
    return SQLAlchemyAffiliationRepository(db, MonthlyAffiliation)


def get_catalog_repository(db: Session = Depends(get_db)) -> CatalogRepository:
    return SQLAlchemyCatalogRepository(db)


def get_unsubscription_repository(db: Session = Depends(get_db)) -> UnsubscriptionRepository:
    return SQLAlchemyUnsubscriptionRepository(db, ClientUnsubscription)
