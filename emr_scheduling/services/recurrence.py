from __future__ import annotations

from calendar import monthrange
from datetime import date, timedelta

from emr_scheduling.models.appointment import CalendarEvent, RecurrenceUnit


def add_months(base_date: date, months: int) -> date:
    month_index = base_date.month - 1 + months
    year = base_date.year + month_index // 12
    month = month_index % 12 + 1
    day = min(base_date.day, monthrange(year, month)[1])
    return date(year, month, day)


def _nth_occurrence(start: date, unit: RecurrenceUnit, steps: int) -> date:
    if unit == RecurrenceUnit.day:
        return start + timedelta(days=steps)
    if unit == RecurrenceUnit.week:
        return start + timedelta(weeks=steps)
    if unit == RecurrenceUnit.month:
        return add_months(start, steps)
    return add_months(start, steps * 12)


def is_series_start(event: CalendarEvent, selected_date: date) -> bool:
    return selected_date == event.event_date


def expand_occurrences(event: CalendarEvent, start: date, end: date) -> list[date]:
    """Dates within [start, end] on which the event occurs.

    Excluded dates are skipped and a series never runs past its end_date.
    """
    if end < start:
        return []
    excluded = set(event.excluded_dates)
    if not event.is_recurring:
        if start <= event.event_date <= end and event.event_date not in excluded:
            return [event.event_date]
        return []

    last = min(end, event.end_date) if event.end_date else end
    freq = max(event.recurrence_freq or 1, 1)
    occurrences: list[date] = []
    index = 0
    current = event.event_date
    while current <= last:
        if current >= start and current not in excluded:
            occurrences.append(current)
        index += 1
        current = _nth_occurrence(event.event_date, event.recurrence_unit, index * freq)
    return occurrences
