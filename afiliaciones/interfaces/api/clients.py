"""Client API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from afiliaciones.application.services.client_service import create_client
from afiliaciones.domain.repositories.catalog_repository import CatalogRepository
from afiliaciones.domain.repositories.client_repository import ClientRepository
from afiliaciones.domain.schemas.client import ClientCreate, ClientCreated, ClientRead
from afiliaciones.infrastructure.database import get_db
from afiliaciones.interfaces.deps import get_catalog_repository, get_client_repository

router = APIRouter(prefix="/api/clients", tags=["Clients"])


@router.post("", response_model=ClientCreated, status_code=status.HTTP_201_CREATED)
def register_client(
    body: ClientCreate,
    db: Session = Depends(get_db),
    repo: ClientRepository = Depends(get_client_repository),
    catalogs: CatalogRepository = Depends(get_catalog_repository),
):
    client = create_client(db, repo, catalogs, body)
    return ClientCreated(client=ClientRead.model_validate(client))
