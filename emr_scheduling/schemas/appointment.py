from datetime import date, datetime, time
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints

from emr_scheduling.models.appointment import CalendarEvent

# HH:MM, 24-hour
ClockTime = Annotated[
    str,
    StringConstraints(pattern=r"^([01]\d|2[0-3]):[0-5]\d$"),
    AfterValidator(time.fromisoformat),
]
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=150)]
NonEmptyText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
# fits an INTEGER column
ColumnInt = Annotated[int, Field(ge=0, le=2_147_483_647)]


class AppointmentCreate(BaseModel):
    pc_catid: ColumnInt
    pc_title: Title
    pc_duration: ColumnInt
    pc_room: NonEmptyText
    pc_hometext: NonEmptyText
    pc_apptstatus: NonEmptyText
    pc_eventDate: date
    pc_startTime: ClockTime
    pc_endTime: ClockTime
    pc_facility: ColumnInt
    pc_billing_location: ColumnInt
    pc_aid: Optional[ColumnInt] = None
    patient_uuid: Optional[str] = None


class AppointmentUpdate(BaseModel):
    pc_catid: Optional[ColumnInt] = None
    pc_title: Optional[Title] = None
    pc_duration: Optional[ColumnInt] = None
    pc_room: Optional[NonEmptyText] = None
    pc_hometext: Optional[NonEmptyText] = None
    pc_apptstatus: Optional[NonEmptyText] = None
    pc_eventDate: Optional[date] = None
    pc_startTime: Optional[ClockTime] = None
    pc_endTime: Optional[ClockTime] = None
    pc_facility: Optional[ColumnInt] = None
    pc_billing_location: Optional[ColumnInt] = None
    pc_aid: Optional[ColumnInt] = None


def _clock(value: time | None) -> Optional[str]:
    return value.strftime("%H:%M:%S") if value else None


class AppointmentOut(BaseModel):
    pc_eid: int
    pc_uuid: str
    puuid: Optional[str] = None
    pid: Optional[int] = None
    fname: Optional[str] = None
    lname: Optional[str] = None
    DOB: Optional[date] = None
    email: Optional[str] = None
    drivers_license: Optional[str] = None
    pc_aid: Optional[int] = None
    pce_aid_uuid: Optional[str] = None
    pce_aid_npi: Optional[str] = None
    pc_catid: Optional[int] = None
    pc_title: str
    pc_hometext: Optional[str] = None
    pc_room: Optional[str] = None
    pc_duration: int
    pc_apptstatus: str
    pc_eventDate: date
    pc_endDate: Optional[date] = None
    pc_startTime: Optional[str] = None
    pc_endTime: Optional[str] = None
    pc_time: Optional[datetime] = None
    pc_facility: Optional[int] = None
    facility_name: Optional[str] = None
    facility_uuid: Optional[str] = None
    pc_billing_location: Optional[int] = None
    billing_location_name: Optional[str] = None
    billing_location_uuid: Optional[str] = None
    pc_multiple: Optional[int] = None
    recurrence_unit: Optional[str] = None
    recurrence_freq: int = 1
    excluded_dates: list[date] = []

    @classmethod
    def from_event(cls, event: CalendarEvent) -> "AppointmentOut":
        patient = event.patient
        provider = event.provider
        facility = event.facility
        billing = event.billing_location
        return cls(
            pc_eid=event.eid,
            pc_uuid=str(event.uuid),
            puuid=str(patient.uuid) if patient else None,
            pid=event.pid,
            fname=patient.fname if patient else None,
            lname=patient.lname if patient else None,
            DOB=patient.dob if patient else None,
            email=patient.email if patient else None,
            drivers_license=patient.drivers_license if patient else None,
            pc_aid=event.aid,
            pce_aid_uuid=str(provider.uuid) if provider else None,
            pce_aid_npi=provider.npi if provider else None,
            pc_catid=event.catid,
            pc_title=event.title,
            pc_hometext=event.hometext,
            pc_room=event.room,
            pc_duration=event.duration,
            pc_apptstatus=event.apptstatus,
            pc_eventDate=event.event_date,
            pc_endDate=event.end_date,
            pc_startTime=_clock(event.start_time),
            pc_endTime=_clock(event.end_time),
            pc_time=event.time,
            pc_facility=event.facility_id,
            facility_name=facility.name if facility else None,
            facility_uuid=str(facility.uuid) if facility else None,
            pc_billing_location=event.billing_location_id,
            billing_location_name=billing.name if billing else None,
            billing_location_uuid=str(billing.uuid) if billing else None,
            pc_multiple=event.multiple,
            recurrence_unit=event.recurrence_unit.value if event.recurrence_unit else None,
            recurrence_freq=event.recurrence_freq,
            excluded_dates=event.excluded_dates,
        )


class AppointmentListOut(BaseModel):
    validation_errors: dict[str, list[str]] = {}
    internal_errors: list[str] = []
    data: list[AppointmentOut] = []


class AppointmentCreatedOut(BaseModel):
    id: Optional[int] = None
    uuid: Optional[str] = None


class AppointmentStatusUpdate(BaseModel):
    status: str


class AppointmentDeleteOut(BaseModel):
    message: str


class OccurrencesOut(BaseModel):
    pc_eid: int
    start: date
    end: date
    dates: list[date]


class CalendarCategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    catid: int
    constant_id: str
    catname: str
    cattype: int
    duration: int
    aco_spec: str


class AppointmentStatusOut(BaseModel):
    option_id: str
    title: str
    seq: int
    kind: Literal["check_in", "check_out", "pending", "other"]
