from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from emr_scheduling.models.appointment import CalendarEvent, CalendarEventExclusion
from emr_scheduling.models.category import CalendarCategory
from emr_scheduling.models.list_option import APPOINTMENT_STATUS_LIST, ListOption
from emr_scheduling.schemas.appointment import AppointmentCreate
from emr_scheduling.services.recurrence import is_series_start
from emr_scheduling.services.search import ClauseBuilder, is_empty
from emr_scheduling.services.uuids import decode_uuid, resolve_patient
from emr_scheduling.services.validation import ProcessingResult

logger = logging.getLogger("emr_scheduling.appointments")

DeleteHook = Callable[[CalendarEvent], None]

# Highest priority first; only the first key present is applied.
SUPPORTED_FILTER_TYPES = ("puuid", "pc_title", "pc_eventDate", "pc_apptstatus", "date_range")

RECURR_AFFECT_CURRENT = "current"
RECURR_AFFECT_FUTURE = "future"
RECURR_AFFECT_ALL = "all"

PENDING_STATUS = "^"


class FilterValueError(ValueError):
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


# request key -> column attribute
UPDATABLE_FIELDS = {
    "pc_catid": "catid",
    "pc_title": "title",
    "pc_duration": "duration",
    "pc_hometext": "hometext",
    "pc_eventDate": "event_date",
    "pc_apptstatus": "apptstatus",
    "pc_startTime": "start_time",
    "pc_endTime": "end_time",
    "pc_facility": "facility_id",
    "pc_billing_location": "billing_location_id",
    "pc_aid": "aid",
    "pc_room": "room",
}


def select_filter(filters: Mapping[str, Any]) -> tuple[str | None, Any]:
    for key in SUPPORTED_FILTER_TYPES:
        value = filters.get(key)
        if not is_empty(value):
            return key, value
    return None, None


def parse_date_range(value: str) -> tuple[date, date]:
    cleaned = value.replace(" ", "")
    parts = cleaned.split(":")
    if len(parts) != 2:
        raise FilterValueError("date_range", "must be formatted as YYYY-MM-DD:YYYY-MM-DD")
    try:
        start, end = date.fromisoformat(parts[0]), date.fromisoformat(parts[1])
    except ValueError as exc:
        raise FilterValueError("date_range", "must be formatted as YYYY-MM-DD:YYYY-MM-DD") from exc
    return start, end


class AppointmentService:
    def __init__(self, db: Session, *, multi_providers: bool = False):
        self.db = db
        self.multi_providers = multi_providers
        self.pre_delete_hooks: list[DeleteHook] = []
        self.post_delete_hooks: list[DeleteHook] = []

    # ---- retrieval -------------------------------------------------------

    def _ordered(self, stmt):
        return stmt.order_by(CalendarEvent.last_modified.desc(), CalendarEvent.eid.desc())

    def get_appointment(self, euuid: Any) -> CalendarEvent | None:
        decoded = decode_uuid(euuid)
        if decoded is None:
            return None
        return self.db.scalar(select(CalendarEvent).where(CalendarEvent.uuid == decoded))

    def get_appointments_for_patient(self, pid: int | None) -> list[CalendarEvent]:
        builder = ClauseBuilder().equals(CalendarEvent.pid, pid)
        stmt = builder.apply(select(CalendarEvent)).order_by(
            CalendarEvent.event_date.asc(), CalendarEvent.start_time.asc()
        )
        return list(self.db.scalars(stmt))

    def get_appointments_for_patient_uuid(self, puuid: Any) -> list[CalendarEvent]:
        patient = resolve_patient(self.db, puuid)
        if patient is None:
            return []
        return self.get_appointments_for_patient(patient.pid)

    def get_one_for_patient(self, puuid: Any, auuid: Any) -> CalendarEvent | None:
        patient = resolve_patient(self.db, puuid)
        event = self.get_appointment(auuid)
        if patient is None or event is None or event.pid != patient.pid:
            return None
        return event

    def _filter_by_patient_uuid(self, builder: ClauseBuilder, value: Any) -> bool:
        patient = resolve_patient(self.db, value)
        if patient is None:
            return False
        builder.equals(CalendarEvent.pid, patient.pid)
        return True

    def _filter_by_title(self, builder: ClauseBuilder, value: Any) -> bool:
        builder.contains(CalendarEvent.title, str(value))
        return True

    def _filter_by_date(self, builder: ClauseBuilder, value: Any) -> bool:
        try:
            event_date = date.fromisoformat(str(value).strip())
        except ValueError as exc:
            raise FilterValueError("pc_eventDate", "must be a date formatted as YYYY-MM-DD") from exc
        builder.equals(CalendarEvent.event_date, event_date)
        return True

    def _filter_by_status(self, builder: ClauseBuilder, value: Any) -> bool:
        builder.contains(CalendarEvent.apptstatus, str(value))
        return True

    def _filter_by_date_range(self, builder: ClauseBuilder, value: Any) -> bool:
        start, end = parse_date_range(str(value))
        builder.between(CalendarEvent.event_date, start, end)
        return True

    _FILTER_HANDLERS = {
        "puuid": _filter_by_patient_uuid,
        "pc_title": _filter_by_title,
        "pc_eventDate": _filter_by_date,
        "pc_apptstatus": _filter_by_status,
        "date_range": _filter_by_date_range,
    }

    def get_appointments(self, filters: Mapping[str, Any]) -> ProcessingResult:
        result = ProcessingResult()
        filter_type, value = select_filter(filters)
        builder = ClauseBuilder()
        if filter_type is not None:
            handler = self._FILTER_HANDLERS[filter_type]
            try:
                matched = handler(self, builder, value)
            except FilterValueError as exc:
                result.validation_errors[exc.field] = [exc.message]
                return result
            if not matched:
                return result
        stmt = self._ordered(builder.apply(select(CalendarEvent)))
        result.data = list(self.db.scalars(stmt))
        return result

    # ---- mutation --------------------------------------------------------

    def insert(self, puuid: Any, payload: AppointmentCreate) -> CalendarEvent | None:
        patient = resolve_patient(self.db, puuid)
        if patient is None:
            logger.info("Appointment not created: patient %s not found", puuid)
            return None
        event = CalendarEvent(
            uuid=uuid.uuid4(),
            pid=patient.pid,
            catid=payload.pc_catid,
            title=payload.pc_title,
            duration=payload.pc_duration,
            hometext=payload.pc_hometext,
            event_date=payload.pc_eventDate,
            apptstatus=payload.pc_apptstatus,
            start_time=payload.pc_startTime,
            end_time=payload.pc_endTime,
            facility_id=payload.pc_facility,
            billing_location_id=payload.pc_billing_location,
            informant=1,
            eventstatus=1,
            sharing=1,
            aid=payload.pc_aid,
            room=payload.pc_room,
            time=datetime.now(timezone.utc),
        )
        self.db.add(event)
        self.db.flush()
        return event

    def update_appointment(self, euuid: Any, changes: Mapping[str, Any]) -> CalendarEvent | None:
        event = self.get_appointment(euuid)
        if event is None:
            return None
        for key, attribute in UPDATABLE_FIELDS.items():
            if changes.get(key) is not None:
                setattr(event, attribute, changes[key])
        self.db.add(event)
        self.db.flush()
        return event

    def update_appointment_status(self, euuid: Any, status: str) -> CalendarEvent | None:
        event = self.get_appointment(euuid)
        if event is None:
            return None
        if event.pid is None:
            logger.error(
                "Appointment status updated without a patient; tracker not updated",
                extra={"pc_eid": event.eid, "status": status},
            )
        event.apptstatus = status
        self.db.add(event)
        self.db.flush()
        return event

    # ---- deletion --------------------------------------------------------

    def delete_appointment_by_uuid(self, euuid: Any) -> str | None:
        event = self.get_appointment(euuid)
        if event is None:
            return None
        self._delete_event(event)
        return "ok"

    def _delete_event(self, event: CalendarEvent) -> None:
        for hook in self.pre_delete_hooks:
            hook(event)
        self.db.delete(event)
        self.db.flush()
        for hook in self.post_delete_hooks:
            hook(event)

    def delete_appointment_record(self, eid: int) -> bool:
        event = self.db.get(CalendarEvent, eid)
        if event is None:
            return False
        self._delete_event(event)
        return True

    def _series(self, event: CalendarEvent) -> list[CalendarEvent]:
        if self.multi_providers and event.multiple:
            stmt = (
                select(CalendarEvent)
                .where(CalendarEvent.multiple == event.multiple)
                .order_by(CalendarEvent.eid.asc())
            )
            return list(self.db.scalars(stmt))
        return [event]

    def add_exclusion(self, event: CalendarEvent, excluded_on: date) -> None:
        if excluded_on in event.excluded_dates:
            return
        event.exclusions.append(CalendarEventExclusion(excluded_on=excluded_on))

    def delete_appointment(self, eid: int, recurr_affect: str | None, selected_date: date) -> bool:
        """Delete a calendar event, or part of a repeating series.

        ``current`` suppresses only ``selected_date``; ``future`` ends the
        series the day before ``selected_date`` (or removes it entirely when
        that is the first occurrence); anything else removes the series.
        """
        event = self.db.get(CalendarEvent, eid)
        if event is None:
            return False
        series = self._series(event)

        if recurr_affect == RECURR_AFFECT_CURRENT:
            for row in series:
                self.add_exclusion(row, selected_date)
            self.db.flush()
        elif recurr_affect == RECURR_AFFECT_FUTURE:
            if is_series_start(event, selected_date):
                for row in series:
                    self._delete_event(row)
            else:
                new_end = selected_date - timedelta(days=1)
                for row in series:
                    row.end_date = new_end
                self.db.flush()
        else:
            for row in series:
                self._delete_event(row)
        logger.info(
            "Deleted appointment %s (affect=%s, date=%s, rows=%s)",
            eid,
            recurr_affect or RECURR_AFFECT_ALL,
            selected_date.isoformat(),
            len(series),
        )
        return True

    # ---- reference data --------------------------------------------------

    def get_calendar_categories(self) -> list[CalendarCategory]:
        stmt = (
            select(CalendarCategory)
            .where(CalendarCategory.active.is_(True))
            .order_by(CalendarCategory.seq.asc())
        )
        return list(self.db.scalars(stmt))

    def get_calendar_category(self, catid: int) -> CalendarCategory | None:
        return self.db.get(CalendarCategory, catid)

    def _status_option(self, option: str) -> ListOption | None:
        return self.db.scalar(
            select(ListOption).where(
                ListOption.list_id == APPOINTMENT_STATUS_LIST,
                ListOption.option_id == option,
                ListOption.activity.is_(True),
            )
        )

    def get_appointment_statuses(self) -> list[ListOption]:
        stmt = (
            select(ListOption)
            .where(ListOption.list_id == APPOINTMENT_STATUS_LIST, ListOption.activity.is_(True))
            .order_by(ListOption.seq.asc())
        )
        return list(self.db.scalars(stmt))

    def is_check_in_status(self, option: str) -> bool:
        row = self._status_option(option)
        return bool(row and row.toggle_setting_1)

    def is_check_out_status(self, option: str) -> bool:
        row = self._status_option(option)
        return bool(row and row.toggle_setting_2)

    @staticmethod
    def is_pending_status(option: str) -> bool:
        return option == PENDING_STATUS

    def is_valid_appointment_status(self, option: str) -> bool:
        return self._status_option(option) is not None
