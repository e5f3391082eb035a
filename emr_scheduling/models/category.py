from __future__ import annotations

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from emr_scheduling.models.base import Base


class CalendarCategory(Base):
    __tablename__ = "calendar_categories"

    catid: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    constant_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    catname: Mapped[str] = mapped_column(String(100), nullable=False)
    # 0 = patient, 1 = provider, 2 = clinic, 3 = therapy group
    cattype: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, default=900, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    seq: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    aco_spec: Mapped[str] = mapped_column(String(63), default="encounters|notes", nullable=False)
