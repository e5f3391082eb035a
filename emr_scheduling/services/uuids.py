from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from emr_scheduling.models.patient import Patient


def decode_uuid(value: Any) -> uuid.UUID | None:
    """Parse an external UUID string; anything undecodable is treated as not found."""
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        return None


def resolve_patient(db: Session, puuid: Any) -> Patient | None:
    decoded = decode_uuid(puuid)
    if decoded is None:
        return None
    return db.scalar(select(Patient).where(Patient.uuid == decoded))
