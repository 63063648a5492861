from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from afiliaciones.application.services.affiliation_csv_importer import AffiliationCsvImporter, read_csv
from afiliaciones.domain.models.affiliation import MonthlyAffiliation
from afiliaciones.domain.models.client import Client
from afiliaciones.infrastructure.repositories.affiliation_repository import SQLAlchemyAffiliationRepository
from afiliaciones.infrastructure.repositories.catalog_repository import SQLAlchemyCatalogRepository
from afiliaciones.infrastructure.repositories.client_repository import SQLAlchemyClientRepository

from conftest import VIEWER

HEADER = (
    "NOMBRE;CEDULA;EMPRESA;TELEFONO;PAGO RECIBIDO;Fecha Afiliacion (Plataformas Gob);"
    "VALOR;EPS;ARL;RIESGO;CCF;F. PENSION;NOVEDAD"
)
ROWS = [
    "Ana Pérez;1001;ACME S.A.S;3001112233;05/06/2024;;110.000;SURA;Positiva;I;Comfama;Porvenir;",
    "Beto Ruiz;1002;Empresa Fantasma;3002223344;;;95.000;Sura;;;;;",
    "Carla Díaz;1003; acme s.a.s ;;;;1.250.000,50;;;;;;Ingreso nuevo",
]


def _csv(rows=ROWS) -> bytes:
    return ("\n".join([HEADER, *rows]) + "\n").encode("utf-8")


def _upload(client, seed, headers, content=None, filename="afiliaciones.csv"):
    return client.post(
        "/api/affiliations/bulk-upload",
        data={"officeId": str(seed["office_id"])},
        files={"file": (filename, content if content is not None else _csv(), "text/csv")},
        headers=headers,
    )


def test_bad_row_is_reported_and_the_rest_commits(client, seed, session_scope, auth_headers):
    response = _upload(client, seed, auth_headers())
    assert response.status_code == 200, response.text
    results = response.json()["results"]

    assert results["totalRows"] == 3
    assert results["importedRows"] == 2
    assert len(results["errors"]) == 1
    error = results["errors"][0]
    assert error["row"] == 2
    assert "Empresa Fantasma" in error["error"]
    assert "no encontrada" in error["error"]
    assert error["data"]["CEDULA"] == "1002"

    with session_scope() as db:
        identifications = {c.identification for c in db.query(Client).all()}
        assert identifications == {"1001", "1003"}

        rows = {
            r.client.identification: r
            for r in db.query(MonthlyAffiliation).filter(MonthlyAffiliation.is_active.is_(True)).all()
        }
        paid = rows["1001"]
        assert (paid.month, paid.year, paid.user_id) == (6, 2024, seed["operator_id"])
        assert paid.paid_status == "Pagado"
        assert paid.date_paid_received == datetime(2024, 6, 5)
        assert paid.gov_record_completed_at == datetime(2024, 6, 5)
        assert paid.value == Decimal("110000.00")
        assert paid.eps_id == seed["eps_id"]
        assert paid.pension_fund_id == seed["pension_fund_id"]

        pending = rows["1003"]
        assert pending.paid_status == "Pendiente"
        assert pending.date_paid_received is None
        assert pending.value == Decimal("1250000.50")
        assert pending.company_id == seed["company_id"]
        assert pending.observation == "Ingreso nuevo"


def test_reupload_updates_in_place(client, seed, session_scope, auth_headers):
    headers = auth_headers()
    _upload(client, seed, headers)
    changed = [ROWS[0].replace("110.000", "120.000"), ROWS[2]]
    results = _upload(client, seed, headers, content=_csv(changed)).json()["results"]
    assert results["importedRows"] == 2

    with session_scope() as db:
        active = db.query(MonthlyAffiliation).filter(MonthlyAffiliation.is_active.is_(True)).all()
        assert len(active) == 2
        values = sorted(r.value for r in active)
        assert values == [Decimal("120000.00"), Decimal("1250000.50")]


def test_upload_rejections(client, seed, auth_headers):
    assert _upload(client, seed, {}).status_code == 401
    assert _upload(client, seed, auth_headers(VIEWER)).status_code == 403
    assert _upload(client, seed, auth_headers(), filename="datos.xlsx").status_code == 400
    assert _upload(client, seed, auth_headers(), content=b"").status_code == 400

    missing_columns = b"NOMBRE;TELEFONO\nAna;300\n"
    response = _upload(client, seed, auth_headers(), content=missing_columns)
    assert response.status_code == 400
    assert "CEDULA" in response.json()["error"]["details"]["missing"]


def test_rows_without_a_usable_value_are_rejected(client, seed, session_scope, auth_headers):
    rows = [
        "Dora Gil;2001;ACME S.A.S;;;;NaN;;;;;;",
        "Eva Sol;2002;ACME S.A.S;;;;Infinity;;;;;;",
        "Fabio Paz;2003;ACME S.A.S;;;;;;;;;;",
        "Gina Roa;2004;ACME S.A.S;;;;" + "1" * 40 + ";;;;;;",
        "Hugo Leal;2005;ACME S.A.S;;;;80.000;;;;;;",
    ]
    response = _upload(client, seed, auth_headers(), content=_csv(rows))
    assert response.status_code == 200, response.text
    results = response.json()["results"]

    assert results["totalRows"] == 5
    assert results["importedRows"] == 1
    errors = {e["row"]: e["error"] for e in results["errors"]}
    assert sorted(errors) == [1, 2, 3, 4]
    assert "VALOR" in errors[1]
    assert "Infinity" in errors[2]
    assert "VALOR" in errors[3]
    assert "no es un número válido" in errors[4]

    with session_scope() as db:
        assert {c.identification for c in db.query(Client).all()} == {"2005"}
        (row,) = db.query(MonthlyAffiliation).all()
        assert row.value == Decimal("80000.00")


def test_failure_outside_a_row_rolls_back_the_whole_import(seed, session_scope, monkeypatch):
    original = AffiliationCsvImporter._import_row
    calls = []

    def _fail_on_third_row(self, *args, **kwargs):
        calls.append(1)
        if len(calls) == 3:
            raise RuntimeError("conexión perdida")
        return original(self, *args, **kwargs)

    monkeypatch.setattr(AffiliationCsvImporter, "_import_row", _fail_on_third_row)
    rows = read_csv(_csv([ROWS[0], ROWS[2], "Iván Mora;1004;Globex;;;;50.000;;;;;;"]))

    with pytest.raises(RuntimeError):
        with session_scope() as db:
            importer = AffiliationCsvImporter(
                db,
                SQLAlchemyClientRepository(db, Client),
                SQLAlchemyAffiliationRepository(db, MonthlyAffiliation),
                SQLAlchemyCatalogRepository(db),
            )
            importer.import_rows(rows, seed["office_id"], seed["operator_id"])

    assert len(calls) == 3
    with session_scope() as db:
        assert db.query(Client).count() == 0
        assert db.query(MonthlyAffiliation).count() == 0
