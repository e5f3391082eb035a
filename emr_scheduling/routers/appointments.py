import logging
from datetime import date, timedelta
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from emr_scheduling.db.session import get_db
from emr_scheduling.deps import get_appointment_service, get_appointment_validator, request_context
from emr_scheduling.models.appointment import CalendarEvent
from emr_scheduling.models.audit_log import AuditLog
from emr_scheduling.schemas.appointment import (
    AppointmentDeleteOut,
    AppointmentListOut,
    AppointmentOut,
    AppointmentStatusOut,
    AppointmentStatusUpdate,
    AppointmentUpdate,
    CalendarCategoryOut,
    OccurrencesOut,
)
from emr_scheduling.schemas.audit_log import AuditLogOut
from emr_scheduling.services.appointment_validator import AppointmentValidator
from emr_scheduling.services.appointments import RECURR_AFFECT_ALL, RECURR_AFFECT_FUTURE, AppointmentService
from emr_scheduling.services.audit import log_event, snapshot_model
from emr_scheduling.services.recurrence import expand_occurrences
from emr_scheduling.services.uuids import decode_uuid

router = APIRouter(prefix="/appointments", tags=["appointments"])
logger = logging.getLogger("emr_scheduling.appointments")


def _validation_failed(errors: dict[str, list[str]]) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"validation_errors": errors},
    )


@router.get("", response_model=AppointmentListOut)
def list_appointments(
    service: AppointmentService = Depends(get_appointment_service),
    puuid: str | None = Query(default=None),
    pc_title: str | None = Query(default=None),
    pc_eventDate: str | None = Query(default=None),
    pc_apptstatus: str | None = Query(default=None),
    date_range: str | None = Query(default=None),
):
    filters = {
        "puuid": puuid,
        "pc_title": pc_title,
        "pc_eventDate": pc_eventDate,
        "pc_apptstatus": pc_apptstatus,
        "date_range": date_range,
    }
    result = service.get_appointments(filters)
    payload = AppointmentListOut(
        validation_errors=result.validation_errors,
        internal_errors=result.internal_errors,
        data=[AppointmentOut.from_event(event) for event in result.data],
    )
    if not result.is_valid:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=payload.model_dump(mode="json"),
        )
    return payload


@router.get("/categories", response_model=list[CalendarCategoryOut])
def list_categories(service: AppointmentService = Depends(get_appointment_service)):
    return service.get_calendar_categories()


@router.get("/categories/{catid}", response_model=CalendarCategoryOut)
def get_category(catid: int, service: AppointmentService = Depends(get_appointment_service)):
    category = service.get_calendar_category(catid)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return category


@router.get("/statuses", response_model=list[AppointmentStatusOut])
def list_statuses(service: AppointmentService = Depends(get_appointment_service)):
    items = []
    for option in service.get_appointment_statuses():
        if service.is_pending_status(option.option_id):
            kind = "pending"
        elif option.toggle_setting_1:
            kind = "check_in"
        elif option.toggle_setting_2:
            kind = "check_out"
        else:
            kind = "other"
        items.append(
            AppointmentStatusOut(option_id=option.option_id, title=option.title, seq=option.seq, kind=kind)
        )
    return items


@router.delete("/events/{eid}", response_model=AppointmentDeleteOut)
def delete_event(
    eid: int,
    recurr_affect: Literal["current", "future", "all"] | None = Query(default=None),
    selected_date: date | None = Query(default=None),
    db: Session = Depends(get_db),
    service: AppointmentService = Depends(get_appointment_service),
):
    if recurr_affect not in (None, RECURR_AFFECT_ALL) and selected_date is None:
        raise _validation_failed({"selected_date": ["is required for current and future deletes"]})
    event = db.get(CalendarEvent, eid)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    if recurr_affect == RECURR_AFFECT_FUTURE and selected_date < event.event_date:
        raise _validation_failed({"selected_date": ["must not be before the first occurrence"]})
    try:
        if recurr_affect is None:
            service.delete_appointment_record(eid)
        else:
            service.delete_appointment(eid, recurr_affect, selected_date or date.today())
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(
            "Failed to delete appointment",
            extra={"eid": eid, "recurr_affect": recurr_affect},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Failed to delete appointment"},
        )
    return AppointmentDeleteOut(message="record deleted")


@router.get("/events/{eid}/occurrences", response_model=OccurrencesOut)
def event_occurrences(
    eid: int,
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    db: Session = Depends(get_db),
):
    event = db.get(CalendarEvent, eid)
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    range_start = start or event.event_date
    range_end = end or range_start + timedelta(days=365)
    if range_end < range_start:
        raise _validation_failed({"end": ["must not be before start"]})
    return OccurrencesOut(
        pc_eid=event.eid,
        start=range_start,
        end=range_end,
        dates=expand_occurrences(event, range_start, range_end),
    )


@router.get("/{euuid}", response_model=AppointmentOut)
def get_appointment(euuid: str, service: AppointmentService = Depends(get_appointment_service)):
    event = service.get_appointment(euuid)
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    return AppointmentOut.from_event(event)


@router.put("/{euuid}", response_model=AppointmentOut)
def update_appointment(
    euuid: str,
    payload: AppointmentUpdate,
    context: dict = Depends(request_context),
    db: Session = Depends(get_db),
    service: AppointmentService = Depends(get_appointment_service),
    validator: AppointmentValidator = Depends(get_appointment_validator),
):
    validation = validator.validate(payload)
    if not validation.is_valid:
        raise _validation_failed(validation.errors)

    existing = service.get_appointment(euuid)
    if not existing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    before_data = snapshot_model(existing)
    event = service.update_appointment(euuid, payload.model_dump(exclude_none=True))
    log_event(
        db,
        action="appointment.updated",
        entity_type="appointment",
        entity_id=str(event.uuid),
        before_data=before_data,
        after_obj=event,
        **context,
    )
    db.commit()
    db.refresh(event)
    return AppointmentOut.from_event(event)


@router.put("/{euuid}/status", response_model=AppointmentOut)
def update_appointment_status(
    euuid: str,
    payload: AppointmentStatusUpdate,
    context: dict = Depends(request_context),
    db: Session = Depends(get_db),
    service: AppointmentService = Depends(get_appointment_service),
):
    if not service.is_valid_appointment_status(payload.status):
        raise _validation_failed({"status": ["must be a valid appointment status"]})
    existing = service.get_appointment(euuid)
    if not existing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    before_status = existing.apptstatus
    event = service.update_appointment_status(euuid, payload.status)
    log_event(
        db,
        action=f"appointment.status: {before_status} -> {payload.status}",
        entity_type="appointment",
        entity_id=str(event.uuid),
        before_data={"pc_apptstatus": before_status},
        after_data={"pc_apptstatus": payload.status},
        **context,
    )
    db.commit()
    db.refresh(event)
    return AppointmentOut.from_event(event)


@router.delete("/{euuid}", response_model=str)
def delete_appointment(
    euuid: str,
    db: Session = Depends(get_db),
    service: AppointmentService = Depends(get_appointment_service),
):
    result = service.delete_appointment_by_uuid(euuid)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    db.commit()
    return result


@router.get("/{euuid}/audit", response_model=list[AuditLogOut])
def appointment_audit(
    euuid: str,
    db: Session = Depends(get_db),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
):
    decoded = decode_uuid(euuid)
    entity_id = str(decoded) if decoded else euuid
    stmt = (
        select(AuditLog)
        .where(AuditLog.entity_type == "appointment", AuditLog.entity_id == entity_id)
        .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(db.scalars(stmt))
