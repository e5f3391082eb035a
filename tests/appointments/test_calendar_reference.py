from emr_scheduling.models.category import CalendarCategory
from emr_scheduling.services.appointments import AppointmentService
from emr_scheduling.services.calendar_defaults import (
    DEFAULT_APPOINTMENT_STATUSES,
    DEFAULT_CATEGORIES,
    ensure_default_categories,
    ensure_default_statuses,
)


def test_default_seeding_is_idempotent(db_session):
    assert ensure_default_statuses(db_session) == len(DEFAULT_APPOINTMENT_STATUSES)
    assert ensure_default_statuses(db_session) == 0
    assert ensure_default_categories(db_session) == len(DEFAULT_CATEGORIES)
    assert ensure_default_categories(db_session) == 0


def test_status_kinds(db_session, statuses):
    service = AppointmentService(db_session)
    assert service.is_check_in_status("@")
    assert service.is_check_in_status("~")
    assert not service.is_check_in_status(">")
    assert service.is_check_out_status(">")
    assert service.is_check_out_status("!")
    assert not service.is_check_out_status("-")
    assert service.is_pending_status("^")
    assert not service.is_pending_status("-")
    assert service.is_valid_appointment_status("x")
    assert not service.is_valid_appointment_status("unknown")


def test_statuses_endpoint(api_client, statuses):
    res = api_client.get("/appointments/statuses")
    assert res.status_code == 200, res.text
    by_option = {item["option_id"]: item for item in res.json()}
    assert len(by_option) == len(DEFAULT_APPOINTMENT_STATUSES)
    assert by_option["@"]["kind"] == "check_in"
    assert by_option[">"]["kind"] == "check_out"
    assert by_option["^"]["kind"] == "pending"
    assert by_option["-"]["kind"] == "other"
    assert [item["seq"] for item in res.json()] == sorted(item["seq"] for item in res.json())


def test_categories_endpoint_lists_active_categories(api_client, db_session):
    ensure_default_categories(db_session)
    lunch = db_session.query(CalendarCategory).filter_by(constant_id="lunch").one()
    lunch.active = False
    db_session.commit()

    res = api_client.get("/appointments/categories")
    assert res.status_code == 200, res.text
    names = [item["constant_id"] for item in res.json()]
    assert names[0] == "no_show"
    assert "office_visit" in names
    assert "lunch" not in names

    office = next(item for item in res.json() if item["constant_id"] == "office_visit")
    res = api_client.get(f"/appointments/categories/{office['catid']}")
    assert res.status_code == 200
    assert res.json()["duration"] == 900
    assert api_client.get("/appointments/categories/9999").status_code == 404


def test_status_update(api_client, db_session, make_event, statuses):
    event = make_event()
    res = api_client.put(f"/appointments/{event.uuid}/status", json={"status": "@"})
    assert res.status_code == 200, res.text
    assert res.json()["pc_apptstatus"] == "@"

    res = api_client.get(f"/appointments/{event.uuid}/audit")
    assert res.json()[0]["action"] == "appointment.status: - -> @"


def test_status_update_rejects_unknown_status(api_client, make_event, statuses):
    event = make_event()
    res = api_client.put(f"/appointments/{event.uuid}/status", json={"status": "zz"})
    assert res.status_code == 400
    assert "status" in res.json()["detail"]["validation_errors"]
