from __future__ import annotations

from sqlalchemy import Boolean, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from emr_scheduling.models.base import Base

APPOINTMENT_STATUS_LIST = "apptstat"


class ListOption(Base):
    __tablename__ = "list_options"
    __table_args__ = (UniqueConstraint("list_id", "option_id", name="uq_list_options_list_option"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    list_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    option_id: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    seq: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    activity: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # apptstat: toggle_setting_1 marks check-in, toggle_setting_2 marks check-out
    toggle_setting_1: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    toggle_setting_2: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
