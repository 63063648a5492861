from __future__ import annotations

from datetime import datetime

import pytest

from afiliaciones.application.services.rollover_service import rollover_affiliations
from afiliaciones.domain.models.affiliation import MonthlyAffiliation
from afiliaciones.domain.models.user import User
from afiliaciones.infrastructure.repositories.affiliation_repository import SQLAlchemyAffiliationRepository

from conftest import VIEWER


def _seed_previous_month(frozen_now, create_affiliation, seed, when=datetime(2024, 5, 10, 9, 0, 0)):
    frozen_now["now"] = when
    first = create_affiliation(identification="1", full_name="Ana", affiliation={"paid": "Pagado", "risk": "I"})
    second = create_affiliation(identification="2", full_name="Beto", userId=seed["admin_id"])
    frozen_now["now"] = datetime(2024, 6, 15, 10, 0, 0)
    return first, second


def _current_rows(db, seed):
    return (
        db.query(MonthlyAffiliation)
        .filter(
            MonthlyAffiliation.office_id == seed["office_id"],
            MonthlyAffiliation.month == 6,
            MonthlyAffiliation.year == 2024,
        )
        .order_by(MonthlyAffiliation.client_id)
        .all()
    )


def test_rollover_copies_latest_month_as_unpaid(
    client, seed, frozen_now, session_scope, create_affiliation, auth_headers
):
    first, _ = _seed_previous_month(frozen_now, create_affiliation, seed)

    response = client.post(
        "/api/monthly_affiliations", json={"office_id": seed["office_id"]}, headers=auth_headers()
    )
    assert response.status_code == 200, response.text
    result = response.json()
    assert result["copied"] == 2
    assert result["skipped"] == 0
    assert (result["sourceMonth"], result["sourceYear"]) == (5, 2024)

    with session_scope() as db:
        rows = _current_rows(db, seed)
        assert len(rows) == 2
        for row in rows:
            assert row.user_id == seed["operator_id"]
            assert row.is_active is True
            assert row.paid_status == "Pendiente"
            assert row.date_paid_received is None
            assert row.gov_record_completed_at is None
        assert rows[0].client_id == first["clientId"]
        assert rows[0].risk == "I"
        assert rows[0].company_id == seed["company_id"]


def test_rollover_twice_is_a_noop(client, seed, frozen_now, session_scope, create_affiliation, auth_headers):
    _seed_previous_month(frozen_now, create_affiliation, seed)
    headers = auth_headers()

    client.post("/api/monthly_affiliations", json={"office_id": seed["office_id"]}, headers=headers)
    again = client.post("/api/monthly_affiliations", json={"office_id": seed["office_id"]}, headers=headers)

    assert again.status_code == 200
    assert again.json()["copied"] == 0
    with session_scope() as db:
        assert len(_current_rows(db, seed)) == 2


def test_rollover_skips_deleted_source_rows(
    client, seed, frozen_now, session_scope, create_affiliation, auth_headers
):
    _, second = _seed_previous_month(frozen_now, create_affiliation, seed)
    client.request(
        "DELETE",
        "/api/affiliations",
        json={"affiliationId": second["affiliationId"], "userId": seed["admin_id"]},
    )

    result = client.post(
        "/api/monthly_affiliations", json={"office_id": seed["office_id"]}, headers=auth_headers()
    ).json()
    assert result["copied"] == 1


def test_rollover_skips_clients_already_in_scope(
    client, seed, frozen_now, session_scope, create_affiliation, auth_headers
):
    frozen_now["now"] = datetime(2024, 5, 10, 9, 0, 0)
    create_affiliation(identification="1", full_name="Ana")
    # Same client twice in the source month under different users
    create_affiliation(identification="1", full_name="Ana", userId=seed["admin_id"])
    frozen_now["now"] = datetime(2024, 6, 15, 10, 0, 0)

    result = client.post(
        "/api/monthly_affiliations", json={"office_id": seed["office_id"]}, headers=auth_headers()
    ).json()
    assert result["copied"] == 1
    assert result["skipped"] == 1


def test_rollover_looks_back_twelve_months(client, seed, frozen_now, create_affiliation, auth_headers):
    _seed_previous_month(frozen_now, create_affiliation, seed, when=datetime(2023, 6, 1, 9, 0, 0))

    result = client.post(
        "/api/monthly_affiliations", json={"office_id": seed["office_id"]}, headers=auth_headers()
    ).json()
    assert (result["sourceMonth"], result["sourceYear"]) == (6, 2023)


def test_rollover_gives_up_after_twelve_months(
    client, seed, frozen_now, session_scope, create_affiliation, auth_headers
):
    _seed_previous_month(frozen_now, create_affiliation, seed, when=datetime(2023, 5, 31, 9, 0, 0))

    response = client.post(
        "/api/monthly_affiliations", json={"office_id": seed["office_id"]}, headers=auth_headers()
    )
    assert response.status_code == 404
    with session_scope() as db:
        assert _current_rows(db, seed) == []


def test_rollover_requires_token_and_office_access(client, seed, auth_headers):
    body = {"office_id": seed["office_id"]}
    assert client.post("/api/monthly_affiliations", json=body).status_code == 401
    bad_token = {"Authorization": "Bearer not-a-token"}
    assert client.post("/api/monthly_affiliations", json=body, headers=bad_token).status_code == 401
    assert client.post("/api/monthly_affiliations", json=body, headers=auth_headers(VIEWER)).status_code == 403


class _FailingSecondInsert(SQLAlchemyAffiliationRepository):
    def __init__(self, db):
        super().__init__(db, MonthlyAffiliation)
        self.inserted = 0

    def add(self, obj_in):
        if self.inserted == 1:
            raise RuntimeError("disco lleno")
        self.inserted += 1
        return super().add(obj_in)


def test_rollover_failure_mid_batch_copies_nothing(client, seed, frozen_now, session_scope, create_affiliation):
    _seed_previous_month(frozen_now, create_affiliation, seed)

    with pytest.raises(RuntimeError):
        with session_scope() as db:
            repo = _FailingSecondInsert(db)
            rollover_affiliations(db, repo, seed["office_id"], db.get(User, seed["operator_id"]))

    assert repo.inserted == 1
    with session_scope() as db:
        assert _current_rows(db, seed) == []
