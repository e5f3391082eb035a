from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from emr_scheduling.models.category import CalendarCategory
from emr_scheduling.models.facility import Facility
from emr_scheduling.models.provider import Provider
from emr_scheduling.services.uuids import resolve_patient
from emr_scheduling.services.validation import LookupRule, ValidationResult, apply_lookups


class AppointmentValidator:
    """Checks the references in an already-parsed appointment payload.

    Field shapes are enforced by ``AppointmentCreate``/``AppointmentUpdate``;
    this layer only asks the database whether referenced rows exist.
    """

    def __init__(self, db: Session):
        self.db = db

    def provider_exists(self, provider_id: Any) -> bool:
        return self.db.scalar(select(Provider.id).where(Provider.id == provider_id)) is not None

    def facility_exists(self, facility_id: Any) -> bool:
        return self.db.scalar(select(Facility.id).where(Facility.id == facility_id)) is not None

    def category_exists(self, catid: Any) -> bool:
        return self.db.scalar(select(CalendarCategory.catid).where(CalendarCategory.catid == catid)) is not None

    def patient_exists(self, puuid: Any) -> bool:
        return resolve_patient(self.db, puuid) is not None

    def lookup_rules(self) -> list[LookupRule]:
        return [
            LookupRule("pc_catid", self.category_exists, "pc_catid must be for a valid category"),
            LookupRule("pc_facility", self.facility_exists, "pc_facility must be for a valid facility"),
            LookupRule(
                "pc_billing_location",
                self.facility_exists,
                "pc_billing_location must be for a valid facility",
            ),
            LookupRule("pc_aid", self.provider_exists, "pc_aid must be for a valid user"),
            LookupRule("patient_uuid", self.patient_exists, "uuid must be for a valid patient"),
        ]

    def validate(self, payload: BaseModel) -> ValidationResult:
        return apply_lookups(self.lookup_rules(), payload.model_dump(exclude_none=True))
