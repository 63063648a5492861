from __future__ import annotations

from decimal import Decimal

from afiliaciones.domain.models.affiliation import MonthlyAffiliation
from afiliaciones.domain.models.catalog import Eps
from afiliaciones.domain.models.client import Client
from afiliaciones.domain.repositories.catalog_repository import CatalogCategory
from afiliaciones.infrastructure.repositories.catalog_repository import SQLAlchemyCatalogRepository

from conftest import FIXED_NOW


def _edit_body(created, seed, **overrides):
    body = {
        "affiliationId": created["affiliationId"],
        "clientId": created["clientId"],
        "fullName": "Jane Marie Doe",
        "identification": "123",
        "companyId": seed["other_company_id"],
        "phones": ["3115550000", "3001234567"],
        "value": 150000,
        "eps": "  sura ",
        "arl": "POSITIVA",
        "risk": "II",
        "ccf": "No existe",
        "pensionFund": None,
        "paid": "En Proceso",
        "observation": "Cambio de empresa",
    }
    body.update(overrides)
    return body


def test_edit_updates_affiliation_client_and_phones(client, seed, session_scope, create_affiliation):
    created = create_affiliation()
    response = client.put("/api/affiliations", json=_edit_body(created, seed))
    assert response.status_code == 200, response.text

    with session_scope() as db:
        row = db.get(MonthlyAffiliation, created["affiliationId"])
        assert row.value == Decimal("150000.00")
        assert row.eps_id == seed["eps_id"]
        assert row.arl_id == seed["arl_id"]
        assert row.ccf_id is None
        assert row.risk == "II"
        assert row.paid_status == "En Proceso"
        assert row.date_paid_received == FIXED_NOW
        assert row.gov_record_completed_at is None
        assert row.company_id == seed["other_company_id"]

        person = db.get(Client, created["clientId"])
        assert person.full_name == "Jane Marie Doe"
        assert person.company_id == seed["other_company_id"]
        assert [p.phone_number for p in person.phones] == ["3115550000", "3001234567"]


def test_edit_honours_supplied_dates(client, seed, session_scope, create_affiliation):
    created = create_affiliation()
    body = _edit_body(
        created,
        seed,
        paid="Pagado",
        datePaidReceived="2024-06-02T09:00:00",
        govRegistryCompletedAt="2024-06-03T11:00:00",
    )
    assert client.put("/api/affiliations", json=body).status_code == 200

    with session_scope() as db:
        row = db.get(MonthlyAffiliation, created["affiliationId"])
        assert row.date_paid_received.isoformat() == "2024-06-02T09:00:00"
        assert row.gov_record_completed_at.isoformat() == "2024-06-03T11:00:00"


def test_edit_with_unknown_ids_changes_nothing(client, seed, session_scope, create_affiliation):
    created = create_affiliation()

    missing_affiliation = client.put("/api/affiliations", json=_edit_body(created, seed, affiliationId=9999))
    assert missing_affiliation.status_code == 404
    missing_client = client.put("/api/affiliations", json=_edit_body(created, seed, clientId=9999))
    assert missing_client.status_code == 404

    with session_scope() as db:
        row = db.get(MonthlyAffiliation, created["affiliationId"])
        assert row.value == Decimal("100000.00")
        assert row.paid_status == "Pendiente"
        assert db.get(Client, created["clientId"]).full_name == "Jane Doe"


def test_edit_into_taken_identification_conflicts(client, seed, session_scope, create_affiliation):
    created = create_affiliation()
    create_affiliation(identification="777", full_name="Otro Cliente")

    response = client.put("/api/affiliations", json=_edit_body(created, seed, identification="777"))
    assert response.status_code == 409

    with session_scope() as db:
        person = db.get(Client, created["clientId"])
        assert person.identification == "123"
        assert [p.phone_number for p in person.phones] == ["3001234567"]


def test_catalog_names_differing_only_by_case_resolve_to_the_oldest(
    client, seed, session_scope, create_affiliation
):
    with session_scope() as db:
        db.add(Eps(name="SURA "))
    created = create_affiliation()

    response = client.put("/api/affiliations", json=_edit_body(created, seed, eps="sura"))
    assert response.status_code == 200, response.text

    with session_scope() as db:
        assert db.get(MonthlyAffiliation, created["affiliationId"]).eps_id == seed["eps_id"]
        catalogs = SQLAlchemyCatalogRepository(db)
        assert catalogs.name_map(CatalogCategory.EPS) == {"sura": seed["eps_id"]}
