from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from emr_scheduling.models.base import Base, ExternalUuidMixin


class Provider(Base, ExternalUuidMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    fname: Mapped[str | None] = mapped_column(String(255), nullable=True)
    lname: Mapped[str | None] = mapped_column(String(255), nullable=True)
    npi: Mapped[str | None] = mapped_column(String(15), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
