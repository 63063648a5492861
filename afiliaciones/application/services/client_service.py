"""Client service — client registry: find-or-create and phone bookkeeping."""

from typing import Iterable, List, Optional, Tuple

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from afiliaciones.core.exceptions import ConflictException, ValidationException
from afiliaciones.domain.models.client import Client
from afiliaciones.domain.repositories.catalog_repository import CatalogCategory, CatalogRepository
from afiliaciones.domain.repositories.client_repository import ClientRepository
from afiliaciones.domain.schemas.client import ClientCreate
from afiliaciones.infrastructure.database import transaction

logger = structlog.get_logger(__name__)


def clean_phones(phones: Optional[Iterable[str]]) -> List[str]:
    """Trimmed, non-empty, de-duplicated phone numbers in their given order."""
    cleaned: List[str] = []
    for phone in phones or []:
        number = str(phone).strip() if phone is not None else ""
        if number and number not in cleaned:
            cleaned.append(number)
    return cleaned


def find_or_create_client(
    repo: ClientRepository,
    identification: str,
    full_name: str,
    company_id: Optional[int],
) -> Tuple[Client, bool]:
    """Resolve a client by identification, creating it when absent.

    An existing client moves to ``company_id`` when a different one is
    supplied, and its name is refreshed when it changed. Returns the client
    and whether it was created. Does not commit.
    """
    identification = identification.strip()
    full_name = full_name.strip()

    client = repo.get_by_identification(identification)
    if client is None:
        client = repo.add(
            {"full_name": full_name, "identification": identification, "company_id": company_id}
        )
        logger.info("Client created", client_id=client.id, identification=identification)
        return client, True

    changes = {}
    if company_id and client.company_id != company_id:
        changes["company_id"] = company_id
    if full_name and client.full_name != full_name:
        changes["full_name"] = full_name
    if changes:
        repo.update(client, changes)
        logger.info("Client updated", client_id=client.id, fields=sorted(changes))
    return client, False


def upsert_phones(repo: ClientRepository, client_id: int, phones: Optional[Iterable[str]]) -> int:
    """Add phones the client does not have yet; returns how many were inserted."""
    return sum(1 for number in clean_phones(phones) if repo.add_phone_if_missing(client_id, number))


def replace_phones(repo: ClientRepository, client_id: int, phones: Optional[Iterable[str]]) -> List[str]:
    """Replace the client's whole phone set."""
    repo.delete_phones(client_id)
    numbers = clean_phones(phones)
    for number in numbers:
        repo.add_phone_if_missing(client_id, number)
    return numbers


def create_client(
    db: Session,
    repo: ClientRepository,
    catalogs: CatalogRepository,
    body: ClientCreate,
) -> Client:
    """Register a brand-new client; the identification must not exist yet."""
    if not catalogs.exists(CatalogCategory.COMPANY, body.company_id):
        raise ValidationException("La compañía indicada no existe.", {"companyId": body.company_id})

    identification = body.identification.strip()
    try:
        with transaction(db):
            if repo.get_by_identification(identification) is not None:
                raise ConflictException("La identificación proporcionada ya existe.")
            client = repo.add(
                {
                    "full_name": body.full_name.strip(),
                    "identification": identification,
                    "company_id": body.company_id,
                }
            )
    except IntegrityError:
        raise ConflictException("La identificación proporcionada ya existe.")

    db.refresh(client)
    return client
