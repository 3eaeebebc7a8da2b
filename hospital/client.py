"""
Python client for the hospital API.

``SessionStore`` holds the state a front end keeps for one signed-in user:
the bearer token, the user record and the most recently fetched
appointments. It is loaded and saved explicitly, optionally to a JSON file,
and cleared on logout.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
API_PREFIX = "/api/v1"


class ApiError(Exception):
    def __init__(self, status_code: int, detail: Any, code: Optional[str] = None):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        super().__init__(f"{status_code}: {detail}")


class SessionStore:
    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.appointments: List[Dict[str, Any]] = []

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def start(self, token: str, user: Dict[str, Any]) -> None:
        self.token = token
        self.user = user
        self.appointments = []
        self.save()

    def load(self) -> "SessionStore":
        """Restore a saved session; a missing file leaves the store empty."""
        if self.path is None or not self.path.exists():
            return self

        data = json.loads(self.path.read_text())
        self.token = data.get("token")
        self.user = data.get("user")
        self.appointments = data.get("appointments", [])
        return self

    def save(self) -> None:
        if self.path is None:
            return
        self.path.write_text(json.dumps({
            "token": self.token,
            "user": self.user,
            "appointments": self.appointments,
        }))

    def clear(self) -> None:
        self.token = None
        self.user = None
        self.appointments = []
        if self.path is not None and self.path.exists():
            self.path.unlink()


class HospitalClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        store: Optional[SessionStore] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.store = store or SessionStore()
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    # Auth
    def register(self, username: str, email: str, password: str, role: str, **profile) -> Dict[str, Any]:
        body = {"username": username, "email": email, "password": password, "role": role, **profile}
        data = self._request("POST", "/auth/register", json=body, auth=False)
        self.store.start(data["token"], data["user"])
        return data["user"]

    def login(self, username: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"username": username, "password": password}, auth=False)
        self.store.start(data["token"], data["user"])
        logger.info(f"Signed in as {data['user']['username']}")
        return data["user"]

    def logout(self) -> None:
        self.store.clear()

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/me")

    # Appointments
    def list_appointments(self, **filters) -> List[Dict[str, Any]]:
        params = {key: value for key, value in filters.items() if value is not None}
        appointments = self._request("GET", "/appointments", params=params)
        self.store.appointments = appointments
        self.store.save()
        return appointments

    def book_appointment(
        self,
        patient_id: int,
        doctor_id: int,
        appointment_date: str,
        appointment_time: str,
        reason: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self._request("POST", "/appointments", json={
            "patient_id": patient_id,
            "doctor_id": doctor_id,
            "appointment_date": str(appointment_date),
            "appointment_time": str(appointment_time),
            "reason": reason,
        })

    def update_status(self, appointment_id: int, status: str, notes: Optional[str] = None) -> Dict[str, Any]:
        updated = self._request(
            "PATCH", f"/appointments/{appointment_id}/status", json={"status": status, "notes": notes}
        )
        # Keep the cached copy in step with the server
        self.store.appointments = [
            updated if cached.get("id") == updated["id"] else cached
            for cached in self.store.appointments
        ]
        self.store.save()
        return updated

    # Doctors
    def list_doctors(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/doctors")

    def get_schedule(self, doctor_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/doctors/{doctor_id}/schedule")

    def _request(self, method: str, path: str, auth: bool = True, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if auth and self.store.token:
            headers["Authorization"] = f"Bearer {self.store.token}"

        response = self.http.request(method, f"{API_PREFIX}{path}", headers=headers, **kwargs)

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = {"detail": response.text}
            raise ApiError(response.status_code, body.get("detail"), body.get("error"))

        return response.json()
