"""Affiliation CSV importer.

Handles:
- Reading semicolon-delimited CSV uploads (utf-8 or latin-1)
- Normalizing column names and cell values
- Parsing money (``110.000,50``) and dates (dd/mm/yyyy)
- Resolving catalog names against preloaded name → id maps
- Upserting each row into the current month inside its own savepoint

A bad row is recorded in the result and skipped; anything failing outside
the row loop rolls the whole import back.
"""

import io
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

import pandas as pd
import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from afiliaciones.application.services.client_service import find_or_create_client, upsert_phones
from afiliaciones.application.services.payment_status import apply_payment_status
from afiliaciones.core import clock
from afiliaciones.core.exceptions import ValidationException
from afiliaciones.domain.models.affiliation import MonthlyAffiliation, PaymentStatus
from afiliaciones.domain.repositories.affiliation_repository import AffiliationRepository
from afiliaciones.domain.repositories.catalog_repository import CatalogCategory, CatalogRepository
from afiliaciones.domain.repositories.client_repository import ClientRepository
from afiliaciones.domain.schemas.affiliation import BulkUploadResult, BulkUploadRowError
from afiliaciones.infrastructure.database import transaction
from afiliaciones.infrastructure.repositories.catalog_repository import normalize_catalog_name

logger = structlog.get_logger(__name__)

COL_NAME = "NOMBRE"
COL_IDENTIFICATION = "CEDULA"
COL_COMPANY = "EMPRESA"
COL_PHONE = "TELEFONO"
COL_PAID_DATE = "PAGO RECIBIDO"
COL_GOV_DATE = "Fecha Afiliacion (Plataformas Gob)"
COL_VALUE = "VALOR"
COL_EPS = "EPS"
COL_ARL = "ARL"
COL_RISK = "RIESGO"
COL_CCF = "CCF"
COL_PENSION = "F. PENSION"
COL_OBSERVATION = "NOVEDAD"

EXPECTED_COLUMNS = (
    COL_NAME,
    COL_IDENTIFICATION,
    COL_COMPANY,
    COL_PHONE,
    COL_PAID_DATE,
    COL_GOV_DATE,
    COL_VALUE,
    COL_EPS,
    COL_ARL,
    COL_RISK,
    COL_CCF,
    COL_PENSION,
    COL_OBSERVATION,
)
REQUIRED_COLUMNS = (COL_NAME, COL_IDENTIFICATION, COL_COMPANY, COL_VALUE)

EMPTY_MARKERS = ("", "#REF!", "#N/A", "-", "NAN", "NULL")

# Numeric(12, 2) column
MAX_VALUE = Decimal("9999999999.99")


def _decode(content: bytes) -> str:
    """Decode upload bytes trying common spreadsheet encodings."""
    for enc in ("utf-8-sig", "cp1252"):
        try:
            return content.decode(enc)
        except UnicodeDecodeError:
            continue
    return content.decode("latin-1")


def _rename_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Map header cells to the canonical column names, ignoring case and padding."""
    canonical = {c.upper(): c for c in EXPECTED_COLUMNS}
    rename_map = {}
    for df_col in df.columns:
        cleaned = re.sub(r"\s+", " ", str(df_col)).strip().upper()
        if cleaned in canonical:
            rename_map[df_col] = canonical[cleaned]
    return df.rename(columns=rename_map)


def read_csv(content: bytes) -> List[Dict[str, Optional[str]]]:
    """Parse a semicolon-delimited upload into cleaned row dicts."""
    try:
        df = pd.read_csv(
            io.StringIO(_decode(content)),
            sep=";",
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError:
        raise ValidationException("El archivo CSV está vacío.")
    except pd.errors.ParserError as e:
        raise ValidationException("No se pudo leer el archivo CSV.", {"reason": str(e)})

    df = _rename_columns(df)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValidationException("Faltan columnas obligatorias en el archivo.", {"missing": missing})

    records = []
    for raw in df.to_dict("records"):
        row = {col: _clean_cell(raw.get(col)) for col in EXPECTED_COLUMNS}
        if any(v is not None for v in row.values()):
            records.append(row)
    return records


def _clean_cell(value) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return None if s.upper() in EMPTY_MARKERS else s


def parse_money(value: Optional[str]) -> Decimal:
    """``110.000`` → 110000, ``110.000,50`` → 110000.50."""
    if not value:
        raise ValueError("Valor vacío.")
    s = value.replace("$", "").replace(" ", "").replace(".", "").replace(",", ".")
    try:
        amount = Decimal(s)
        if not amount.is_finite():
            raise ValueError(f"Valor '{value}' no es un número válido.")
        amount = amount.quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValueError(f"Valor '{value}' no es un número válido.")
    if amount < 0:
        raise ValueError(f"Valor '{value}' no puede ser negativo.")
    if amount > MAX_VALUE:
        raise ValueError(f"Valor '{value}' excede el máximo permitido.")
    return amount


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """dd/mm/yyyy dates; anything unparseable is treated as absent."""
    if not value:
        return None
    for fmt in ("%d/%m/%Y", "%d-%m-%Y", "%Y-%m-%d"):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    logger.warning("Unparseable date in upload", value=value)
    return None


class AffiliationCsvImporter:
    """Upserts uploaded rows as current-month affiliations for one office and user."""

    def __init__(
        self,
        db: Session,
        clients: ClientRepository,
        affiliations: AffiliationRepository,
        catalogs: CatalogRepository,
    ):
        self.db = db
        self.clients = clients
        self.affiliations = affiliations
        self.catalogs = catalogs
        self.name_maps: Dict[CatalogCategory, Dict[str, int]] = {}

    def _lookup(self, category: CatalogCategory, name: Optional[str]) -> Optional[int]:
        return self.name_maps[category].get(normalize_catalog_name(name))

    def import_rows(
        self, rows: List[Dict[str, Optional[str]]], office_id: int, user_id: int
    ) -> BulkUploadResult:
        result = BulkUploadResult(total_rows=len(rows))
        now = clock.now_local()

        with transaction(self.db):
            self.name_maps = {category: self.catalogs.name_map(category) for category in CatalogCategory}

            for index, row in enumerate(rows, start=1):
                try:
                    with self.db.begin_nested():
                        self._import_row(row, office_id, user_id, now)
                    result.imported_rows += 1
                except (ValueError, SQLAlchemyError) as e:
                    message = str(e) if isinstance(e, ValueError) else "Error al guardar la fila."
                    logger.warning("Upload row rejected", row=index, error=str(e))
                    result.errors.append(BulkUploadRowError(row=index, data=row, error=message))

        logger.info(
            "Affiliation upload processed",
            office_id=office_id,
            user_id=user_id,
            total_rows=result.total_rows,
            imported_rows=result.imported_rows,
            failed_rows=len(result.errors),
        )
        return result

    def _import_row(self, row: Dict[str, Optional[str]], office_id: int, user_id: int, now: datetime) -> None:
        full_name = row[COL_NAME]
        identification = row[COL_IDENTIFICATION]
        company_name = row[COL_COMPANY]
        if not full_name or not identification or not company_name or not row[COL_VALUE]:
            raise ValueError("Campos NOMBRE, CEDULA, EMPRESA o VALOR faltantes o vacíos.")

        company_id = self._lookup(CatalogCategory.COMPANY, company_name)
        if company_id is None:
            raise ValueError(f"Empresa '{company_name}' no encontrada en el catálogo.")

        value = parse_money(row[COL_VALUE])
        paid_date = parse_date(row[COL_PAID_DATE])
        gov_date = parse_date(row[COL_GOV_DATE])
        status = PaymentStatus.PAGADO if paid_date else PaymentStatus.PENDIENTE

        client, _ = find_or_create_client(self.clients, identification, full_name, company_id)
        upsert_phones(self.clients, client.id, [row[COL_PHONE]])

        fields = {
            "value": value,
            "eps_id": self._lookup(CatalogCategory.EPS, row[COL_EPS]),
            "arl_id": self._lookup(CatalogCategory.ARL, row[COL_ARL]),
            "ccf_id": self._lookup(CatalogCategory.CCF, row[COL_CCF]),
            "pension_fund_id": self._lookup(CatalogCategory.PENSION_FUND, row[COL_PENSION]),
            "risk": row[COL_RISK],
            "observation": row[COL_OBSERVATION],
            "company_id": company_id,
        }

        affiliation = self.affiliations.find_active(client.id, now.month, now.year, office_id, user_id)
        if affiliation is None:
            affiliation = MonthlyAffiliation(
                client_id=client.id,
                month=now.month,
                year=now.year,
                office_id=office_id,
                user_id=user_id,
                is_active=True,
                **fields,
            )
            apply_payment_status(affiliation, status, now, paid_date, gov_date or paid_date)
            self.affiliations.add(affiliation)
        else:
            apply_payment_status(affiliation, status, now, paid_date, gov_date or paid_date)
            self.affiliations.update(affiliation, fields)
