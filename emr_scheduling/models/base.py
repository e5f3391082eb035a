import uuid
from datetime import datetime

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    pass


class ExternalUuidMixin:
    @declared_attr
    def uuid(cls) -> Mapped[uuid.UUID]:
        return mapped_column(Uuid, default=uuid.uuid4, unique=True, index=True, nullable=False)


class TimestampMixin:
    @declared_attr
    def time(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @declared_attr
    def last_modified(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
        )
