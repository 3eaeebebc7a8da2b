from datetime import date, time

import pytest

from hospital.core.exceptions import AppointmentNotFound, InvalidStatus, InvalidTransition
from hospital.models import AppointmentStatus
from hospital.services.appointment_service import AppointmentService, ALLOWED_TRANSITIONS, can_transition
from hospital.services.booking_service import BookingService

MONDAY = date(2030, 1, 7)


@pytest.fixture
def appointment(db, dr_a, p1):
    return BookingService(db).validate_and_create_booking(p1.id, dr_a.id, MONDAY, time(10, 0), "Checkup")


class TestTransitionTable:

    def test_every_status_has_an_entry(self):
        assert set(ALLOWED_TRANSITIONS) == set(AppointmentStatus)

    @pytest.mark.parametrize("target", ["completed", "cancelled", "no-show"])
    def test_scheduled_can_move_on(self, target):
        assert can_transition(AppointmentStatus.SCHEDULED, AppointmentStatus(target))

    @pytest.mark.parametrize("terminal", ["completed", "cancelled", "no-show"])
    def test_terminal_states_are_final(self, terminal):
        assert ALLOWED_TRANSITIONS[AppointmentStatus(terminal)] == frozenset()


class TestUpdateStatus:

    @pytest.mark.parametrize("target", ["completed", "cancelled", "no-show"])
    def test_scheduled_transitions(self, db, appointment, target):
        updated = AppointmentService(db).update_status(appointment.id, target)
        assert updated.status == AppointmentStatus(target)

    def test_invalid_status_leaves_row_unchanged(self, db, appointment):
        with pytest.raises(InvalidStatus):
            AppointmentService(db).update_status(appointment.id, "postponed", notes="ignored")

        db.refresh(appointment)
        assert appointment.status == AppointmentStatus.SCHEDULED
        assert appointment.notes is None

    def test_invalid_status_reported_before_missing_appointment(self, db):
        with pytest.raises(InvalidStatus):
            AppointmentService(db).update_status(999, "postponed")

    def test_missing_appointment(self, db):
        with pytest.raises(AppointmentNotFound):
            AppointmentService(db).update_status(999, "completed")

    @pytest.mark.parametrize("terminal", ["completed", "cancelled", "no-show"])
    @pytest.mark.parametrize("target", ["scheduled", "completed", "cancelled", "no-show"])
    def test_terminal_appointment_cannot_change(self, db, appointment, terminal, target):
        service = AppointmentService(db)
        service.update_status(appointment.id, terminal)

        with pytest.raises(InvalidTransition):
            service.update_status(appointment.id, target)

        db.refresh(appointment)
        assert appointment.status == AppointmentStatus(terminal)

    def test_notes_overwrite_previous_notes(self, db, appointment):
        appointment.notes = "Bring previous results"
        db.commit()

        updated = AppointmentService(db).update_status(appointment.id, "completed", notes="Follow up in two weeks")
        assert updated.notes == "Follow up in two weeks"

        db.expire_all()
        assert AppointmentService(db).get_appointment(appointment.id).notes == "Follow up in two weeks"

    def test_missing_notes_keep_stored_notes(self, db, appointment):
        appointment.notes = "Bring previous results"
        db.commit()

        updated = AppointmentService(db).update_status(appointment.id, "completed")
        assert updated.notes == "Bring previous results"


class TestListAppointments:

    def test_filters_and_ordering(self, db, dr_a, p1):
        booking = BookingService(db)
        late = booking.validate_and_create_booking(p1.id, dr_a.id, MONDAY, time(15, 0))
        early = booking.validate_and_create_booking(p1.id, dr_a.id, MONDAY, time(9, 30))
        AppointmentService(db).update_status(late.id, "cancelled")

        service = AppointmentService(db)
        assert [a.id for a in service.list_appointments(doctor_id=dr_a.id)] == [early.id, late.id]
        assert [a.id for a in service.list_appointments(status="cancelled")] == [late.id]
        assert service.list_appointments(appointment_date=date(2030, 1, 14)) == []
        assert service.list_appointments(patient_id=999) == []

    def test_unknown_status_filter(self, db):
        with pytest.raises(InvalidStatus):
            AppointmentService(db).list_appointments(status="postponed")
