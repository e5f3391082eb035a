from datetime import date

from sqlalchemy import select

from emr_scheduling.core.settings import settings
from emr_scheduling.models.appointment import CalendarEvent, CalendarEventExclusion, RecurrenceUnit
from emr_scheduling.models.audit_log import AuditLog
from emr_scheduling.services.appointments import AppointmentService


def _weekly(make_event, **overrides):
    values = {"event_date": date(2026, 3, 2), "recurrence_unit": RecurrenceUnit.week}
    values.update(overrides)
    return make_event(**values)


def _remaining_eids(db_session):
    db_session.expire_all()
    return set(db_session.scalars(select(CalendarEvent.eid)))


def test_current_appends_to_existing_exclusions(db_session, make_event):
    event = _weekly(make_event)
    event.exclusions.append(CalendarEventExclusion(excluded_on=date(2026, 3, 9)))
    db_session.commit()

    service = AppointmentService(db_session)
    assert service.delete_appointment(event.eid, "current", date(2026, 3, 16))
    db_session.commit()

    db_session.expire_all()
    assert event.excluded_dates == [date(2026, 3, 9), date(2026, 3, 16)]


def test_current_does_not_duplicate_an_excluded_date(db_session, make_event):
    event = _weekly(make_event)
    service = AppointmentService(db_session)
    service.delete_appointment(event.eid, "current", date(2026, 3, 16))
    service.delete_appointment(event.eid, "current", date(2026, 3, 16))
    db_session.commit()

    db_session.expire_all()
    assert event.excluded_dates == [date(2026, 3, 16)]


def test_future_truncates_series_before_selected_date(db_session, make_event):
    event = _weekly(make_event, end_date=date(2026, 12, 28))
    service = AppointmentService(db_session)
    assert service.delete_appointment(event.eid, "future", date(2026, 4, 13))
    db_session.commit()

    db_session.expire_all()
    assert event.end_date == date(2026, 4, 12)
    assert event.event_date == date(2026, 3, 2)


def test_future_from_first_occurrence_deletes_series(db_session, make_event):
    event = _weekly(make_event)
    service = AppointmentService(db_session)
    assert service.delete_appointment(event.eid, "future", date(2026, 3, 2))
    db_session.commit()
    assert _remaining_eids(db_session) == set()


def test_all_deletes_series(db_session, make_event):
    event = _weekly(make_event)
    keep = make_event()
    service = AppointmentService(db_session)
    assert service.delete_appointment(event.eid, "all", date(2026, 5, 4))
    db_session.commit()
    assert _remaining_eids(db_session) == {keep.eid}


def test_missing_event_reports_false(db_session):
    assert AppointmentService(db_session).delete_appointment(404, "all", date(2026, 1, 1)) is False
    assert AppointmentService(db_session).delete_appointment_record(404) is False


def test_multi_provider_series_are_deleted_together(db_session, make_event):
    first = _weekly(make_event, multiple=7)
    second = _weekly(make_event, multiple=7)
    unrelated = _weekly(make_event, multiple=8)

    service = AppointmentService(db_session, multi_providers=True)
    service.delete_appointment(first.eid, "all", date(2026, 3, 9))
    db_session.commit()
    assert _remaining_eids(db_session) == {unrelated.eid}
    assert second.eid not in _remaining_eids(db_session)


def test_multi_provider_current_excludes_on_every_row(db_session, make_event):
    first = _weekly(make_event, multiple=7)
    second = _weekly(make_event, multiple=7)

    service = AppointmentService(db_session, multi_providers=True)
    service.delete_appointment(second.eid, "current", date(2026, 3, 9))
    db_session.commit()

    db_session.expire_all()
    assert first.excluded_dates == [date(2026, 3, 9)]
    assert second.excluded_dates == [date(2026, 3, 9)]


def test_multiple_key_is_ignored_without_multi_provider_mode(db_session, make_event):
    first = _weekly(make_event, multiple=7)
    second = _weekly(make_event, multiple=7)

    service = AppointmentService(db_session)
    service.delete_appointment(first.eid, "all", date(2026, 3, 9))
    db_session.commit()
    assert _remaining_eids(db_session) == {second.eid}


def test_delete_hooks_run_around_each_row(db_session, make_event):
    first = _weekly(make_event, multiple=3)
    second = _weekly(make_event, multiple=3)
    calls = []

    service = AppointmentService(db_session, multi_providers=True)
    service.pre_delete_hooks.append(lambda event: calls.append(("pre", event.eid)))
    service.post_delete_hooks.append(lambda event: calls.append(("post", event.eid)))
    service.delete_appointment(first.eid, "all", date(2026, 3, 2))

    assert calls == [
        ("pre", first.eid),
        ("post", first.eid),
        ("pre", second.eid),
        ("post", second.eid),
    ]


def test_hooks_do_not_run_for_exclusions(db_session, make_event):
    event = _weekly(make_event)
    calls = []
    service = AppointmentService(db_session)
    service.pre_delete_hooks.append(calls.append)
    service.delete_appointment(event.eid, "current", date(2026, 3, 9))
    assert calls == []


def test_delete_endpoint_with_current_scope(api_client, db_session, make_event):
    event = _weekly(make_event)
    res = api_client.delete(
        f"/appointments/events/{event.eid}",
        params={"recurr_affect": "current", "selected_date": "2026-03-09"},
    )
    assert res.status_code == 200, res.text
    assert res.json() == {"message": "record deleted"}

    db_session.expire_all()
    assert event.excluded_dates == [date(2026, 3, 9)]


def test_delete_endpoint_without_scope_removes_record(api_client, db_session, make_event):
    event = make_event()
    event_uuid = str(event.uuid)
    res = api_client.delete(f"/appointments/events/{event.eid}")
    assert res.status_code == 200, res.text
    assert _remaining_eids(db_session) == set()

    audit = db_session.scalars(select(AuditLog).where(AuditLog.entity_id == event_uuid)).all()
    assert [entry.action for entry in audit] == ["appointment.deleted"]
    assert audit[0].before_json["title"] == "Follow up"


def test_delete_endpoint_requires_selected_date(api_client, make_event):
    event = _weekly(make_event)
    res = api_client.delete(f"/appointments/events/{event.eid}", params={"recurr_affect": "future"})
    assert res.status_code == 400
    assert "selected_date" in res.json()["detail"]["validation_errors"]


def test_delete_endpoint_rejects_unknown_scope(api_client, make_event):
    event = _weekly(make_event)
    res = api_client.delete(
        f"/appointments/events/{event.eid}",
        params={"recurr_affect": "everything", "selected_date": "2026-03-09"},
    )
    assert res.status_code == 422


def test_delete_endpoint_unknown_event(api_client):
    res = api_client.delete("/appointments/events/999", params={"recurr_affect": "all"})
    assert res.status_code == 404


def test_delete_endpoint_failure_rolls_back(api_client, db_session, make_event, monkeypatch):
    event = _weekly(make_event)

    def _boom(self, eid, recurr_affect, selected_date):
        raise RuntimeError("database went away")

    monkeypatch.setattr(AppointmentService, "delete_appointment", _boom)
    res = api_client.delete(
        f"/appointments/events/{event.eid}",
        params={"recurr_affect": "all", "selected_date": "2026-03-02"},
    )
    assert res.status_code == 500
    assert res.json() == {"message": "Failed to delete appointment"}
    assert _remaining_eids(db_session) == {event.eid}


def test_delete_endpoint_honours_multi_provider_setting(api_client, db_session, make_event, monkeypatch):
    first = _weekly(make_event, multiple=11)
    _weekly(make_event, multiple=11)
    monkeypatch.setattr(settings, "select_multi_providers", True)

    res = api_client.delete(
        f"/appointments/events/{first.eid}",
        params={"recurr_affect": "all", "selected_date": "2026-03-02"},
    )
    assert res.status_code == 200, res.text
    assert _remaining_eids(db_session) == set()


def test_future_delete_before_series_start_is_rejected(api_client, db_session, make_event):
    event = _weekly(make_event)
    res = api_client.delete(
        f"/appointments/events/{event.eid}",
        params={"recurr_affect": "future", "selected_date": "2026-02-23"},
    )
    assert res.status_code == 400, res.text
    assert "selected_date" in res.json()["detail"]["validation_errors"]

    db_session.expire_all()
    assert event.end_date is None
    assert _remaining_eids(db_session) == {event.eid}
