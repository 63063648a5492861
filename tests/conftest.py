from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from afiliaciones.application.services.auth_service import hash_password
from afiliaciones.config import Settings
from afiliaciones.core import clock
from afiliaciones.domain.models.catalog import Arl, Ccf, Company, Eps, PensionFund
from afiliaciones.domain.models.office import Office, UserOffice
from afiliaciones.domain.models.user import User, UserRole
from afiliaciones.main import create_app

FIXED_NOW = datetime(2024, 6, 15, 10, 0, 0)

OPERATOR = {"username": "operador", "password": "operador123"}
VIEWER = {"username": "visor", "password": "visor123"}


def make_settings(**overrides) -> Settings:
    values = dict(
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret",
        ENVIRONMENT="test",
        LOG_LEVEL="WARNING",
        DEFAULT_ADMIN_USERNAME="admin",
        DEFAULT_ADMIN_PASSWORD="admin123",
    )
    values.update(overrides)
    return Settings(**values)


def seed_reference_data(db) -> dict:
    main_office = Office(name="Principal", representative_name="Ana Gómez")
    north_office = Office(name="Norte")
    operator = User(
        username=OPERATOR["username"],
        password_hash=hash_password(OPERATOR["password"]),
        role=UserRole.OFFICE_MANAGER.value,
    )
    viewer = User(
        username=VIEWER["username"],
        password_hash=hash_password(VIEWER["password"]),
        role=UserRole.VIEWER.value,
    )
    acme = Company(name="ACME S.A.S")
    globex = Company(name="Globex")
    sura = Eps(name="Sura")
    positiva = Arl(name="Positiva")
    comfama = Ccf(name="Comfama")
    porvenir = PensionFund(name="Porvenir")
    db.add_all([main_office, north_office, operator, viewer, acme, globex, sura, positiva, comfama, porvenir])
    db.flush()

    admin = db.query(User).filter(User.username == "admin").one()
    db.add_all(
        [
            UserOffice(user_id=operator.id, office_id=main_office.id),
            UserOffice(user_id=admin.id, office_id=main_office.id),
            UserOffice(user_id=admin.id, office_id=north_office.id),
        ]
    )
    db.commit()

    return {
        "office_id": main_office.id,
        "other_office_id": north_office.id,
        "admin_id": admin.id,
        "operator_id": operator.id,
        "viewer_id": viewer.id,
        "company_id": acme.id,
        "other_company_id": globex.id,
        "eps_id": sura.id,
        "arl_id": positiva.id,
        "ccf_id": comfama.id,
        "pension_fund_id": porvenir.id,
    }


@pytest.fixture
def frozen_now(monkeypatch):
    """Pin the business clock; tests move it by assigning ``frozen_now["now"]``."""
    state = {"now": FIXED_NOW}
    monkeypatch.setattr(clock, "now_local", lambda: state["now"])
    return state


@pytest.fixture
def app(frozen_now):
    return create_app(make_settings())


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session_scope(app):
    """Short-lived session; close it before the next request."""

    @contextmanager
    def _scope():
        db = app.state.database.SessionLocal()
        try:
            yield db
            db.commit()
        finally:
            db.close()

    return _scope


@pytest.fixture
def seed(client, session_scope):
    with session_scope() as db:
        return seed_reference_data(db)


@pytest.fixture
def auth_headers(client):
    def _headers(credentials=None):
        credentials = credentials or OPERATOR
        response = client.post("/api/auth/login", json=credentials)
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _headers


@pytest.fixture
def create_affiliation(client, seed):
    """POST a client + affiliation for the current (frozen) month."""

    def _create(identification="123", full_name="Jane Doe", expected_status=201, **overrides):
        affiliation = {"value": 100000, "paid": "Pendiente"}
        affiliation.update(overrides.pop("affiliation", {}))
        body = {
            "fullName": full_name,
            "identification": identification,
            "officeId": seed["office_id"],
            "userId": seed["operator_id"],
            "companyId": seed["company_id"],
            "phones": ["3001234567"],
            "affiliation": affiliation,
        }
        body.update(overrides)
        response = client.post("/api/clients-and-affiliations", json=body)
        assert response.status_code == expected_status, response.text
        return response.json()

    return _create
