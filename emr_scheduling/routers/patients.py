from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from emr_scheduling.db.session import get_db
from emr_scheduling.deps import get_appointment_service, get_appointment_validator, request_context
from emr_scheduling.schemas.appointment import AppointmentCreate, AppointmentCreatedOut, AppointmentOut
from emr_scheduling.services.appointment_validator import AppointmentValidator
from emr_scheduling.services.appointments import AppointmentService
from emr_scheduling.services.audit import log_event

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get("/{puuid}/appointments", response_model=list[AppointmentOut])
def list_patient_appointments(
    puuid: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    return [AppointmentOut.from_event(event) for event in service.get_appointments_for_patient_uuid(puuid)]


@router.get("/{puuid}/appointments/{auuid}", response_model=AppointmentOut)
def get_patient_appointment(
    puuid: str,
    auuid: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    event = service.get_one_for_patient(puuid, auuid)
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    return AppointmentOut.from_event(event)


@router.post(
    "/{puuid}/appointments",
    response_model=AppointmentCreatedOut,
    status_code=status.HTTP_201_CREATED,
)
def create_patient_appointment(
    puuid: str,
    payload: AppointmentCreate,
    response: Response,
    context: dict = Depends(request_context),
    db: Session = Depends(get_db),
    service: AppointmentService = Depends(get_appointment_service),
    validator: AppointmentValidator = Depends(get_appointment_validator),
):
    validation = validator.validate(payload)
    if not validation.is_valid:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"validation_errors": validation.errors},
        )

    event = service.insert(puuid, payload)
    if event is None:
        response.status_code = status.HTTP_200_OK
        return AppointmentCreatedOut()

    log_event(
        db,
        action="appointment.created",
        entity_type="appointment",
        entity_id=str(event.uuid),
        after_obj=event,
        **context,
    )
    db.commit()
    return AppointmentCreatedOut(id=event.eid, uuid=str(event.uuid))
