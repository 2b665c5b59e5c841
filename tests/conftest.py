import os

# Settings are read at import time, so the environment comes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "pytest-secret"
os.environ["EMAIL_NOTIFICATIONS"] = "0"
os.environ["ALLOW_SETUP"] = "0"
os.environ["LOG_LEVEL"] = "WARNING"

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from database import SessionLocal, engine
from main import app
from models import Base, Customer, Employee, Tenant, Unit
from services.auth_service import create_token, customer_identity, employee_identity, hash_password
from services.seed_service import seed_complaint_categories

PASSWORD = "Secret@123"


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def seed():
    """
    Fresh schema per test with:
    units 9, 101, 102, 103 (101/102 occupied), owners of 101 and 102,
    a tenant in 101, an admin, a sub_admin and two employees
    (emp1 reports to the sub_admin, emp2 has no reporting manager).
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        password_hash = hash_password(PASSWORD)

        units = {no: Unit(unit_no=no, particulars=p) for no, p in (
            ("9", "Vacant"), ("101", "Occupied"), ("102", "Occupied"), ("103", "Vacant"),
        )}
        db.add_all(units.values())
        db.flush()

        admin = Employee(name="Asha Admin", email="admin@test.in", role="admin", password_hash=password_hash)
        sub_admin = Employee(name="Sunil Sub", email="sub@test.in", role="sub_admin", password_hash=password_hash)
        db.add_all([admin, sub_admin])
        db.flush()
        emp1 = Employee(
            name="Esha Emp", email="emp1@test.in", role="employee", department="Plumbing",
            reporting_manager_id=sub_admin.id, password_hash=password_hash,
        )
        emp2 = Employee(name="Eknath Emp", email="emp2@test.in", role="employee", password_hash=password_hash)
        db.add_all([emp1, emp2])

        cust1 = Customer(unit_id=units["101"].id, name="Ravi Owner", email="ravi@test.in", mobile1="9000000001", password_hash=password_hash)
        cust2 = Customer(unit_id=units["102"].id, name="Meena Owner", email="meena@test.in", mobile1="9000000002", password_hash=password_hash)
        db.add_all([cust1, cust2])
        db.flush()

        tenant1 = Tenant(unit_id=units["101"].id, customer_id=cust1.id, name="Tara Tenant", mobile1="9100000001")
        db.add(tenant1)

        seed_complaint_categories(db)
        db.commit()

        ns = SimpleNamespace(
            units={no: u.id for no, u in units.items()},
            admin_id=admin.id,
            sub_admin_id=sub_admin.id,
            emp1_id=emp1.id,
            emp2_id=emp2.id,
            cust1_id=cust1.id,
            cust2_id=cust2.id,
            tenant1_id=tenant1.id,
            admin=auth(create_token(employee_identity(admin))),
            sub_admin=auth(create_token(employee_identity(sub_admin))),
            emp1=auth(create_token(employee_identity(emp1))),
            emp2=auth(create_token(employee_identity(emp2))),
            cust1=auth(create_token(customer_identity(cust1, units["101"]))),
            cust2=auth(create_token(customer_identity(cust2, units["102"]))),
        )
    finally:
        db.close()
    return ns


@pytest.fixture()
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def category_id(client, seed):
    res = client.get("/api/complaints/categories/list")
    return res.json()["categories"][0]["id"]


@pytest.fixture()
def raise_complaint(client, seed, category_id):
    def _raise(headers=None, unit_no="101", **body):
        payload = {"unit_id": seed.units[unit_no], "category_id": category_id, "description": "Tap leaking"}
        payload.update(body)
        res = client.post("/api/complaints", json=payload, headers=headers or seed.cust1)
        assert res.status_code == 201, res.text
        return res.json()["complaint"]

    return _raise
