from __future__ import annotations

from datetime import date

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from emr_scheduling.models.base import Base, ExternalUuidMixin


class Patient(Base, ExternalUuidMixin):
    __tablename__ = "patient_data"

    pid: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    fname: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    lname: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    dob: Mapped[date | None] = mapped_column(Date, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    drivers_license: Mapped[str | None] = mapped_column(String(255), nullable=True)

    appointments = relationship("CalendarEvent", back_populates="patient")
