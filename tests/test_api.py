"""Tests for the HTTP routes."""

import pytest
from sqlalchemy import delete

from app.api.deps import get_session
from app.main import app
from app.models.clinic_config import ClinicConfig

from tests.conftest import BOOKING_DATE

AVAILABLE_URL = "/api/v1/slots/available"
APPOINTMENTS_URL = "/api/v1/appointments"


def _payload(**overrides) -> dict:
    body = {
        "dateISO": BOOKING_DATE,
        "startTime": "09:15",
        "patientName": "Jane Roe",
        "phone": "+1 555-0100",
        "reason": "Follow-up",
    }
    body.update(overrides)
    return body


def _error_code(response) -> str:
    return response.json()["error"]["code"]


class TestAvailabilityRoute:
    def test_returns_slots_for_date(self, client):
        response = client.get(AVAILABLE_URL, params={"date": BOOKING_DATE})

        assert response.status_code == 200
        data = response.json()
        assert data["dateISO"] == BOOKING_DATE
        assert data["slotMinutes"] == 15
        assert data["slots"][0] == {
            "key": "2024-01-10_09:00",
            "startTime": "09:00",
            "endTime": "09:15",
            "available": True,
        }
        assert len(data["slots"]) == 4

    @pytest.mark.parametrize("value", ["2024-1-10", "tomorrow", "2024-02-30"])
    def test_invalid_date(self, client, value):
        response = client.get(AVAILABLE_URL, params={"date": value})

        assert response.status_code == 400
        assert _error_code(response) == "INVALID_DATE"

    def test_missing_date(self, client):
        response = client.get(AVAILABLE_URL)

        assert response.status_code == 400
        assert _error_code(response) == "INVALID_DATE"

    @pytest.mark.parametrize("value", ["2023-12-31", "2024-02-01"])
    def test_date_out_of_range(self, client, value):
        response = client.get(AVAILABLE_URL, params={"date": value})

        assert response.status_code == 400
        assert _error_code(response) == "DATE_OUT_OF_RANGE"


class TestBookingRoute:
    def test_books_slot(self, client):
        response = client.post(APPOINTMENTS_URL, json=_payload())

        assert response.status_code == 201
        data = response.json()
        assert data["slotKey"] == "2024-01-10_09:15"
        assert data["appointmentId"]

        availability = client.get(AVAILABLE_URL, params={"date": BOOKING_DATE}).json()
        flags = {s["startTime"]: s["available"] for s in availability["slots"]}
        assert flags == {"09:00": True, "09:15": False, "09:30": True, "09:45": True}

    def test_double_booking_is_rejected(self, client):
        assert client.post(APPOINTMENTS_URL, json=_payload()).status_code == 201

        response = client.post(APPOINTMENTS_URL, json=_payload(patientName="John Doe"))

        assert response.status_code == 409
        assert _error_code(response) == "SLOT_TAKEN"

    def test_off_grid_time_is_invalid_slot(self, client):
        response = client.post(APPOINTMENTS_URL, json=_payload(startTime="09:05"))

        assert response.status_code == 400
        assert _error_code(response) == "INVALID_SLOT"

    def test_reason_is_optional(self, client):
        body = _payload()
        del body["reason"]

        assert client.post(APPOINTMENTS_URL, json=body).status_code == 201

    @pytest.mark.parametrize(
        "overrides, code",
        [
            ({"dateISO": "10/01/2024"}, "INVALID_DATE"),
            ({"dateISO": None}, "INVALID_DATE"),
            ({"startTime": "9:15"}, "INVALID_TIME"),
            ({"startTime": 915}, "INVALID_TIME"),
            ({"startTime": "09:15\n"}, "INVALID_TIME"),
            ({"startTime": "٠٩:١٥"}, "INVALID_TIME"),
            ({"dateISO": "2024-01-10\n"}, "INVALID_DATE"),
            ({"patientName": " J "}, "INVALID_NAME"),
            ({"patientName": ""}, "INVALID_NAME"),
            ({"phone": "call me"}, "INVALID_PHONE"),
            ({"phone": "12345"}, "INVALID_PHONE"),
            ({"reason": 42}, "INVALID_REASON"),
            ({"dateISO": "2024-03-01"}, "DATE_OUT_OF_RANGE"),
        ],
    )
    def test_rejects_bad_input(self, client, overrides, code):
        response = client.post(APPOINTMENTS_URL, json=_payload(**overrides))

        assert response.status_code == 400
        assert _error_code(response) == code

    def test_malformed_body(self, client):
        response = client.post(APPOINTMENTS_URL, content="not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert _error_code(response) == "INVALID_REQUEST"


class TestScheduleRoutes:
    def test_lists_day_and_updates_status(self, client):
        later = client.post(APPOINTMENTS_URL, json=_payload(startTime="09:45")).json()
        earlier = client.post(APPOINTMENTS_URL, json=_payload(startTime="09:00")).json()

        schedule = client.get(APPOINTMENTS_URL, params={"date": BOOKING_DATE})
        assert schedule.status_code == 200
        rows = schedule.json()
        assert [r["id"] for r in rows] == [earlier["appointmentId"], later["appointmentId"]]
        assert rows[0]["status"] == "booked"
        assert rows[0]["slotKey"] == "2024-01-10_09:00"
        assert rows[0]["patientName"] == "Jane Roe"

        response = client.patch(f"{APPOINTMENTS_URL}/{earlier['appointmentId']}/status", json={"status": "no_show"})
        assert response.status_code == 200
        assert response.json()["status"] == "no_show"

        booked = client.get(APPOINTMENTS_URL, params={"date": BOOKING_DATE, "status": "booked"}).json()
        assert [r["id"] for r in booked] == [later["appointmentId"]]

        # The marker stays, so the no-show slot is still unavailable
        availability = client.get(AVAILABLE_URL, params={"date": BOOKING_DATE}).json()
        assert availability["slots"][0]["available"] is False

    def test_unknown_appointment(self, client):
        response = client.patch(f"{APPOINTMENTS_URL}/nope/status", json={"status": "cancelled"})

        assert response.status_code == 404
        assert _error_code(response) == "NOT_FOUND"

    def test_unknown_status(self, client):
        created = client.post(APPOINTMENTS_URL, json=_payload()).json()

        response = client.patch(f"{APPOINTMENTS_URL}/{created['appointmentId']}/status", json={"status": "lost"})

        assert response.status_code == 400
        assert _error_code(response) == "INVALID_STATUS"


class TestServerErrors:
    def test_missing_clinic_config_is_generic_server_error(self, client):
        async def _drop_config():
            override = app.dependency_overrides[get_session]
            async for session in override():
                await session.execute(delete(ClinicConfig))

        client.portal.call(_drop_config)

        response = client.get(AVAILABLE_URL, params={"date": BOOKING_DATE})

        assert response.status_code == 500
        assert response.json() == {"error": {"code": "SERVER_ERROR", "message": "Request failed."}}

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
