import os

# Configure before the app (and its settings/engine) is imported
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-signing-key-0123456789abcdef0123456789abcdef"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from inventory_pro import models  # noqa: F401
from inventory_pro.core.context import TenantContext
from inventory_pro.core.database import SessionLocal, engine
from inventory_pro.main import app
from inventory_pro.models.tenant import Base
from inventory_pro.services.tenant_service import register_company


PASSWORD = "secret123"


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(schema):
    return TestClient(app)


@pytest.fixture()
def db_session(schema):
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_context(db_session):
    """Register a company directly through the service and return its admin context."""

    def _make(company_name="Acme", email="admin@acme.com", name="Ada Admin"):
        tenant, admin = register_company(db_session, company_name, email, PASSWORD, name)
        return TenantContext(tenant_id=tenant.id, user_id=admin.id, user_name=admin.name, role=admin.role)

    return _make


@pytest.fixture()
def register(client):
    def _register(company_name, email, name="Admin", password=PASSWORD):
        r = client.post("/api/companies/register", json={
            "companyName": company_name,
            "adminEmail": email,
            "adminPassword": password,
            "adminName": name,
        })
        assert r.status_code == 201, r.text
        body = r.json()
        body["headers"] = auth_headers(body["token"])
        return body

    return _register


@pytest.fixture()
def tenant_a(register):
    return register("Acme Corp", "admin@acme.com", name="Alice")


@pytest.fixture()
def tenant_b(register):
    return register("Beta Inc", "admin@beta.com", name="Bob")
