from datetime import date

from emr_scheduling.models.appointment import CalendarEvent, CalendarEventExclusion, RecurrenceUnit
from emr_scheduling.services.recurrence import add_months, expand_occurrences, is_series_start


def _event(**overrides) -> CalendarEvent:
    values = {"title": "Series", "event_date": date(2026, 1, 31), "recurrence_freq": 1}
    values.update(overrides)
    return CalendarEvent(**values)


def test_add_months_clamps_to_month_end():
    assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
    assert add_months(date(2028, 1, 31), 1) == date(2028, 2, 29)
    assert add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)


def test_single_event_occurs_once():
    event = _event()
    assert expand_occurrences(event, date(2026, 1, 1), date(2026, 12, 31)) == [date(2026, 1, 31)]
    assert expand_occurrences(event, date(2026, 2, 1), date(2026, 12, 31)) == []


def test_monthly_series_keeps_anchor_day():
    event = _event(recurrence_unit=RecurrenceUnit.month)
    assert expand_occurrences(event, date(2026, 1, 1), date(2026, 4, 30)) == [
        date(2026, 1, 31),
        date(2026, 2, 28),
        date(2026, 3, 31),
        date(2026, 4, 30),
    ]


def test_weekly_series_with_frequency_and_window():
    event = _event(event_date=date(2026, 3, 2), recurrence_unit=RecurrenceUnit.week, recurrence_freq=2)
    assert expand_occurrences(event, date(2026, 3, 10), date(2026, 4, 13)) == [
        date(2026, 3, 16),
        date(2026, 3, 30),
        date(2026, 4, 13),
    ]


def test_excluded_dates_and_end_date_are_honoured():
    event = _event(
        event_date=date(2026, 3, 2),
        end_date=date(2026, 3, 6),
        recurrence_unit=RecurrenceUnit.day,
        exclusions=[CalendarEventExclusion(excluded_on=date(2026, 3, 4))],
    )
    assert expand_occurrences(event, date(2026, 3, 1), date(2026, 3, 31)) == [
        date(2026, 3, 2),
        date(2026, 3, 3),
        date(2026, 3, 5),
        date(2026, 3, 6),
    ]


def test_zero_frequency_is_treated_as_one():
    event = _event(event_date=date(2026, 1, 1), recurrence_unit=RecurrenceUnit.year, recurrence_freq=0)
    assert expand_occurrences(event, date(2026, 1, 1), date(2028, 1, 1)) == [
        date(2026, 1, 1),
        date(2027, 1, 1),
        date(2028, 1, 1),
    ]


def test_inverted_window_is_empty():
    assert expand_occurrences(_event(), date(2026, 2, 1), date(2026, 1, 1)) == []


def test_series_start_is_the_first_occurrence():
    event = _event(event_date=date(2026, 3, 2), recurrence_unit=RecurrenceUnit.week)
    assert is_series_start(event, date(2026, 3, 2))
    assert not is_series_start(event, date(2026, 3, 9))


def test_occurrences_endpoint(api_client, make_event):
    event = make_event(
        event_date=date(2026, 3, 2),
        recurrence_unit=RecurrenceUnit.week,
        end_date=date(2026, 3, 23),
    )
    res = api_client.get(
        f"/appointments/events/{event.eid}/occurrences",
        params={"start": "2026-03-01", "end": "2026-03-31"},
    )
    assert res.status_code == 200, res.text
    assert res.json()["dates"] == ["2026-03-02", "2026-03-09", "2026-03-16", "2026-03-23"]

    res = api_client.get(
        f"/appointments/events/{event.eid}/occurrences",
        params={"start": "2026-03-31", "end": "2026-03-01"},
    )
    assert res.status_code == 400
    assert api_client.get("/appointments/events/999/occurrences").status_code == 404
