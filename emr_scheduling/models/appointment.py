from __future__ import annotations

import enum
from datetime import date, time

from sqlalchemy import Date, Enum, ForeignKey, Integer, String, Text, Time, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from emr_scheduling.models.base import Base, ExternalUuidMixin, TimestampMixin


class RecurrenceUnit(str, enum.Enum):
    day = "day"
    week = "week"
    month = "month"
    year = "year"


class CalendarEvent(Base, ExternalUuidMixin, TimestampMixin):
    __tablename__ = "calendar_events"

    eid: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    catid: Mapped[int | None] = mapped_column(ForeignKey("calendar_categories.catid"), nullable=True)
    pid: Mapped[int | None] = mapped_column(ForeignKey("patient_data.pid"), nullable=True, index=True)
    aid: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    facility_id: Mapped[int | None] = mapped_column(ForeignKey("facility.id"), nullable=True)
    billing_location_id: Mapped[int | None] = mapped_column(ForeignKey("facility.id"), nullable=True)
    title: Mapped[str] = mapped_column(String(150), default="", nullable=False)
    hometext: Mapped[str | None] = mapped_column(Text, nullable=True)
    room: Mapped[str | None] = mapped_column(String(20), nullable=True)
    duration: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    event_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    apptstatus: Mapped[str] = mapped_column(String(15), default="-", nullable=False)
    recurrence_unit: Mapped[RecurrenceUnit | None] = mapped_column(
        Enum(RecurrenceUnit, name="recurrence_unit"), nullable=True
    )
    recurrence_freq: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    multiple: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    informant: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    eventstatus: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    sharing: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    patient = relationship("Patient", back_populates="appointments", lazy="joined")
    provider = relationship("Provider", lazy="joined")
    facility = relationship("Facility", foreign_keys=[facility_id], lazy="joined")
    billing_location = relationship("Facility", foreign_keys=[billing_location_id], lazy="joined")
    exclusions = relationship(
        "CalendarEventExclusion",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="CalendarEventExclusion.excluded_on",
    )

    @property
    def is_recurring(self) -> bool:
        return self.recurrence_unit is not None

    @property
    def excluded_dates(self) -> list[date]:
        return [item.excluded_on for item in self.exclusions]


class CalendarEventExclusion(Base):
    __tablename__ = "calendar_event_exclusions"
    __table_args__ = (UniqueConstraint("event_id", "excluded_on", name="uq_event_exclusion_date"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(
        ForeignKey("calendar_events.eid", ondelete="CASCADE"), nullable=False, index=True
    )
    excluded_on: Mapped[date] = mapped_column(Date, nullable=False)

    event = relationship("CalendarEvent", back_populates="exclusions")
