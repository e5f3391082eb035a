from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from emr_scheduling.models.base import Base


class Pharmacy(Base):
    __tablename__ = "pharmacies"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    ncpdp: Mapped[str] = mapped_column(String(16), unique=True, index=True, nullable=False)
    business_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    address_line_1: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    state: Mapped[str | None] = mapped_column(String(2), nullable=True)
    zipcode: Mapped[str | None] = mapped_column(String(10), nullable=True)
    state_wide_mail_order: Mapped[str | None] = mapped_column(String(20), nullable=True)
    full_day: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    on_weno: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    test_pharmacy: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
