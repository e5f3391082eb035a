from fastapi import Depends, Request
from sqlalchemy.orm import Session

from emr_scheduling.core.settings import settings
from emr_scheduling.db.session import get_db
from emr_scheduling.models.appointment import CalendarEvent
from emr_scheduling.services.appointment_validator import AppointmentValidator
from emr_scheduling.services.appointments import AppointmentService
from emr_scheduling.services.audit import log_event


def request_context(request: Request) -> dict[str, str | None]:
    return {
        "request_id": request.headers.get("x-request-id"),
        "ip_address": request.client.host if request.client else None,
    }


def get_appointment_service(request: Request, db: Session = Depends(get_db)) -> AppointmentService:
    service = AppointmentService(db, multi_providers=settings.select_multi_providers)
    context = request_context(request)

    def audit_deleted(event: CalendarEvent) -> None:
        log_event(
            db,
            action="appointment.deleted",
            entity_type="appointment",
            entity_id=str(event.uuid),
            before_obj=event,
            **context,
        )

    service.post_delete_hooks.append(audit_deleted)
    return service


def get_appointment_validator(db: Session = Depends(get_db)) -> AppointmentValidator:
    return AppointmentValidator(db)
