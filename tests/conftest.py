import os

# Set testing environment before the application is imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite://"
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_REQUESTS", "1000")

from datetime import time
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hospital.main import app
from hospital.core.database import get_db, get_redis, Base, enable_sqlite_foreign_keys
from hospital.core.security import UserRole
from hospital.models import User, Doctor, Patient, DoctorSchedule, DayOfWeek

# Dates used across the suite
MONDAY = "2030-01-07"
TUESDAY = "2030-01-08"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

@pytest.fixture(scope="function")
def test_db():
    Base.metadata.create_all(bind=engine)
    get_redis().flushdb()
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

@pytest.fixture
def db(test_db):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


# API helpers
def register(client, username, role, password="Secret123", **profile):
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "password": password,
        "role": role,
        **profile,
    }
    response = client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()

def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}

def profile_id(client, headers):
    response = client.get("/api/v1/auth/me", headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["profile"]["id"]

@pytest.fixture
def clinic(client):
    """Admin, receptionist, Dr. A (Mondays 09:00-17:00) and patients P1 and P2."""
    admin = register(client, "admin", "admin")
    receptionist = register(client, "frontdesk", "receptionist", first_name="Rita", last_name="Desk")
    doctor = register(
        client, "dr_a", "doctor",
        first_name="Alice", last_name="A", specialization="Cardiology"
    )
    p1 = register(client, "paul", "patient", first_name="Paul", last_name="One")
    p2 = register(client, "petra", "patient", first_name="Petra", last_name="Two")

    ns = SimpleNamespace(
        admin=auth_headers(admin["token"]),
        receptionist=auth_headers(receptionist["token"]),
        doctor=auth_headers(doctor["token"]),
        p1=auth_headers(p1["token"]),
        p2=auth_headers(p2["token"]),
    )
    ns.doctor_id = profile_id(client, ns.doctor)
    ns.p1_id = profile_id(client, ns.p1)
    ns.p2_id = profile_id(client, ns.p2)
    ns.doctor_user_id = doctor["user"]["id"]
    ns.p1_user_id = p1["user"]["id"]

    response = client.put(
        f"/api/v1/doctors/{ns.doctor_id}/schedule",
        json={"entries": [{"day_of_week": "monday", "start_time": "09:00", "end_time": "17:00"}]},
        headers=ns.admin,
    )
    assert response.status_code == 200, response.text
    return ns


# Service-level helpers
def make_doctor(db, username="dr_a", schedule=None):
    user = User(username=username, email=f"{username}@example.com", password_hash="x", role=UserRole.DOCTOR)
    user.doctor = Doctor(first_name="Alice", last_name="A", specialization="Cardiology")
    for day, (start, end) in (schedule or {}).items():
        user.doctor.schedules.append(DoctorSchedule(day_of_week=day, start_time=start, end_time=end))
    db.add(user)
    db.commit()
    return user.doctor

def make_patient(db, username="paul"):
    user = User(username=username, email=f"{username}@example.com", password_hash="x", role=UserRole.PATIENT)
    user.patient = Patient(first_name="Paul", last_name="One")
    db.add(user)
    db.commit()
    return user.patient

@pytest.fixture
def dr_a(db):
    return make_doctor(db, schedule={DayOfWeek.MONDAY: (time(9, 0), time(17, 0))})

@pytest.fixture
def p1(db):
    return make_patient(db)
