"""Event ORM model. One row per eventId; replaced in place by newer payloads."""

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from factory_events.core.constants import MAX_DURATION_MS
from factory_events.infrastructure.persistence.database import Base
from factory_events.infrastructure.persistence.models.mixins import TimestampMixin


class Event(TimestampMixin, Base):
    """Machine telemetry event. Table: event.

    defect_count -1 means unknown; aggregations skip negative values.
    """

    __tablename__ = "event"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    event_id: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    event_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    received_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    machine_id: Mapped[str] = mapped_column(String, nullable=False)
    line_id: Mapped[str | None] = mapped_column(String, nullable=True)
    factory_id: Mapped[str | None] = mapped_column(String, nullable=True)
    duration_ms: Mapped[int] = mapped_column(BigInteger, nullable=False)
    defect_count: Mapped[int] = mapped_column(BigInteger, nullable=False)
    payload_hash: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        Index("ix_event_machine_time", "machine_id", "event_time"),
        Index("ix_event_factory_line_time", "factory_id", "line_id", "event_time"),
        CheckConstraint(
            f"duration_ms >= 0 AND duration_ms <= {MAX_DURATION_MS}",
            name="ck_event_duration_range",
        ),
    )
