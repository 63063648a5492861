"""Bulk upload route — CSV file with a month of affiliations."""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from afiliaciones.application.services.affiliation_csv_importer import AffiliationCsvImporter, read_csv
from afiliaciones.application.services.auth_service import user_has_office_access
from afiliaciones.core.exceptions import ForbiddenException, ValidationException
from afiliaciones.domain.models.user import User
from afiliaciones.domain.repositories.affiliation_repository import AffiliationRepository
from afiliaciones.domain.repositories.catalog_repository import CatalogRepository
from afiliaciones.domain.repositories.client_repository import ClientRepository
from afiliaciones.domain.schemas.affiliation import BulkUploadResponse
from afiliaciones.infrastructure.database import get_db
from afiliaciones.interfaces.api.deps import get_current_user
from afiliaciones.interfaces.deps import (
    get_affiliation_repository,
    get_catalog_repository,
    get_client_repository,
)

router = APIRouter(prefix="/api/affiliations", tags=["Bulk Upload"])


@router.post("/bulk-upload", response_model=BulkUploadResponse)
async def bulk_upload(
    file: UploadFile = File(...),
    office_id: int = Form(..., alias="officeId", gt=0),
    db: Session = Depends(get_db),
    clients: ClientRepository = Depends(get_client_repository),
    affiliations: AffiliationRepository = Depends(get_affiliation_repository),
    catalogs: CatalogRepository = Depends(get_catalog_repository),
    user: User = Depends(get_current_user),
):
    """Upload a semicolon-delimited CSV of affiliations for the current month."""
    if not file.filename:
        raise ValidationException("Archivo no proporcionado")

    ext = file.filename.rsplit(".", 1)[-1].lower() if "." in file.filename else ""
    if ext != "csv":
        raise ValidationException("Solo se aceptan archivos .csv")

    if not user_has_office_access(db, user.id, office_id):
        raise ForbiddenException("El usuario no tiene acceso a esta oficina.")

    rows = read_csv(await file.read())
    importer = AffiliationCsvImporter(db, clients, affiliations, catalogs)
    result = importer.import_rows(rows, office_id, user.id)

    return BulkUploadResponse(
        message=f"Importación completada: {result.imported_rows} de {result.total_rows} filas importadas",
        results=result,
    )
