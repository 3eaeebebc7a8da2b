import json

import pytest

from hospital.client import ApiError, HospitalClient, SessionStore
from tests.conftest import MONDAY

@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "session.json"

@pytest.fixture
def api(client, clinic, store_path):
    return HospitalClient(store=SessionStore(store_path), http=client)

class TestSessionStore:

    def test_empty_store(self, store_path):
        store = SessionStore(store_path).load()
        assert not store.is_authenticated
        assert store.appointments == []

    def test_save_and_load_round_trip(self, store_path):
        store = SessionStore(store_path)
        store.start("token-123", {"id": 1, "username": "paul"})
        store.appointments = [{"id": 7}]
        store.save()

        restored = SessionStore(store_path).load()
        assert restored.token == "token-123"
        assert restored.user["username"] == "paul"
        assert restored.appointments == [{"id": 7}]

    def test_clear_removes_file(self, store_path):
        store = SessionStore(store_path)
        store.start("token-123", {"id": 1})
        assert store_path.exists()

        store.clear()
        assert not store.is_authenticated
        assert not store_path.exists()

    def test_memory_only_store(self):
        store = SessionStore()
        store.start("token-123", {"id": 1})
        store.clear()
        assert store.token is None


class TestHospitalClient:

    def test_login_populates_store(self, api, store_path):
        user = api.login("paul", "Secret123")

        assert user["username"] == "paul"
        assert api.store.is_authenticated
        assert json.loads(store_path.read_text())["user"]["role"] == "patient"

    def test_bad_login_raises(self, api):
        with pytest.raises(ApiError) as excinfo:
            api.login("paul", "wrong-password")

        assert excinfo.value.status_code == 401
        assert not api.store.is_authenticated

    def test_book_list_and_cancel(self, api, clinic):
        api.login("paul", "Secret123")
        patient_id = api.me()["profile"]["id"]
        doctor_id = api.list_doctors()[0]["id"]

        created = api.book_appointment(patient_id, doctor_id, MONDAY, "10:00", "Checkup")
        assert created["status"] == "scheduled"

        appointments = api.list_appointments()
        assert [a["id"] for a in appointments] == [created["id"]]
        assert api.store.appointments == appointments

        api.update_status(created["id"], "cancelled")
        assert api.store.appointments[0]["status"] == "cancelled"

    def test_booking_error_carries_code(self, api, clinic):
        api.login("paul", "Secret123")

        with pytest.raises(ApiError) as excinfo:
            api.book_appointment(clinic.p1_id, clinic.doctor_id, MONDAY, "07:00")

        assert excinfo.value.status_code == 400
        assert excinfo.value.code == "OutsideWorkingHours"

    def test_auth_errors_carry_code(self, api):
        api.store.start("not-a-token", {"id": 1, "username": "paul"})

        with pytest.raises(ApiError) as excinfo:
            api.me()

        assert excinfo.value.status_code == 401
        assert excinfo.value.code == "AuthenticationError"

    def test_forbidden_errors_carry_code(self, api, clinic):
        api.login("paul", "Secret123")

        with pytest.raises(ApiError) as excinfo:
            api.book_appointment(clinic.p2_id, clinic.doctor_id, MONDAY, "10:00")

        assert excinfo.value.status_code == 403
        assert excinfo.value.code == "AuthorizationError"

    def test_schedule_lookup(self, api, clinic):
        api.login("paul", "Secret123")

        schedule = api.get_schedule(clinic.doctor_id)
        assert schedule[0]["day_of_week"] == "monday"

    def test_logout_clears_session(self, api, store_path):
        api.login("paul", "Secret123")
        api.logout()

        assert not api.store.is_authenticated
        assert not store_path.exists()

        with pytest.raises(ApiError) as excinfo:
            api.list_appointments()
        assert excinfo.value.status_code in (401, 403)

    def test_register_starts_session(self, client, store_path):
        api = HospitalClient(store=SessionStore(store_path), http=client)

        user = api.register("newpatient", "new@example.com", "Secret123", "patient", first_name="Nia")

        assert user["role"] == "patient"
        assert api.me()["profile"]["first_name"] == "Nia"
