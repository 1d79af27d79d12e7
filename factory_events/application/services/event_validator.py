"""Business-rule validation of raw telemetry events.

Pure: the result depends only on the raw record, the supplied 'now' and the
configured future horizon. Rules run in a fixed order and the first failure
wins; there is no multi-error reporting.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from factory_events.application.dtos.event import NormalizedEvent
from factory_events.core.constants import MAX_DURATION_MS, MAX_STORED_INT, MIN_STORED_INT
from factory_events.domain.enums import RejectionReason
from factory_events.shared.utils.datetime import ensure_utc, parse_instant


def _as_integer(value: Any) -> int | None:
    """Return value as int when it is a storable integer or integral float; bool is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and math.isfinite(value) and value.is_integer():
        number = int(value)
    else:
        return None
    if number < MIN_STORED_INT or number > MAX_STORED_INT:
        return None
    return number


def _optional_id(value: Any) -> str | None:
    """Optional ids: empty or non-string values normalize to None."""
    if isinstance(value, str) and value:
        return value
    return None


@dataclass(frozen=True)
class ValidatedEvent:
    """Fields of a raw event that passed validation, parsed to their domain types."""

    event_id: str
    event_time: datetime
    machine_id: str
    line_id: str | None
    factory_id: str | None
    duration_ms: int
    defect_count: int

    def normalize(self, received_time: datetime) -> NormalizedEvent:
        """Stamp the server receive time."""
        return NormalizedEvent(
            event_id=self.event_id,
            event_time=self.event_time,
            received_time=received_time,
            machine_id=self.machine_id,
            line_id=self.line_id,
            factory_id=self.factory_id,
            duration_ms=self.duration_ms,
            defect_count=self.defect_count,
        )


@dataclass(frozen=True)
class ValidationResult:
    """Either a rejection reason or the validated event, never both."""

    reason: RejectionReason | None = None
    event: ValidatedEvent | None = None

    @property
    def is_valid(self) -> bool:
        return self.reason is None


class EventValidator:
    """Validates raw events (IEventValidator).

    The future horizon is explicit: production typically uses 15 minutes,
    staging or replay environments configure something longer.
    """

    def __init__(self, future_horizon: timedelta) -> None:
        if future_horizon < timedelta(0):
            raise ValueError("future_horizon must not be negative")
        self.future_horizon = future_horizon

    def validate(self, raw: Any, now: datetime) -> ValidationResult:
        """Check one raw event against the ingestion rules.

        Args:
            raw: Decoded JSON value for one event (normally a dict).
            now: Current server time; events later than now + horizon are rejected.

        Returns:
            ValidationResult with the first failing reason, or the parsed event.
        """
        if not isinstance(raw, dict):
            return ValidationResult(RejectionReason.MISSING_EVENT_ID)

        event_id = raw.get("eventId")
        if not isinstance(event_id, str) or not event_id:
            return ValidationResult(RejectionReason.MISSING_EVENT_ID)

        raw_event_time = raw.get("eventTime")
        if raw_event_time is None or raw_event_time == "":
            return ValidationResult(RejectionReason.MISSING_EVENT_TIME)

        machine_id = raw.get("machineId")
        if not isinstance(machine_id, str) or not machine_id:
            return ValidationResult(RejectionReason.MISSING_MACHINE_ID)

        duration_ms = _as_integer(raw.get("durationMs"))
        if duration_ms is None:
            return ValidationResult(RejectionReason.MISSING_DURATION)

        defect_count = _as_integer(raw.get("defectCount"))
        if defect_count is None:
            return ValidationResult(RejectionReason.MISSING_DEFECT_COUNT)

        if duration_ms < 0 or duration_ms > MAX_DURATION_MS:
            return ValidationResult(RejectionReason.INVALID_DURATION)

        event_time = parse_instant(raw_event_time)
        if event_time is None:
            return ValidationResult(RejectionReason.INVALID_EVENT_TIME_FORMAT)

        if event_time - (ensure_utc(now) or now) > self.future_horizon:
            return ValidationResult(RejectionReason.FUTURE_EVENT_TIME)

        return ValidationResult(
            event=ValidatedEvent(
                event_id=event_id,
                event_time=event_time,
                machine_id=machine_id,
                line_id=_optional_id(raw.get("lineId")),
                factory_id=_optional_id(raw.get("factoryId")),
                duration_ms=duration_ms,
                defect_count=defect_count,
            )
        )
