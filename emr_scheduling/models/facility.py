from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from emr_scheduling.models.base import Base, ExternalUuidMixin


class Facility(Base, ExternalUuidMixin):
    __tablename__ = "facility"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
