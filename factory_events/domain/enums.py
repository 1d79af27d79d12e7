"""Domain enumerations for factory events.

Enums represent fixed sets of domain values: rejection reasons, the four
terminal outcomes of reconciling one record, and machine health.
"""

from enum import Enum


class RejectionReason(str, Enum):
    """Why a raw event was rejected by validation.

    Checks run in declaration order; the first failing check is reported.
    """

    MISSING_EVENT_ID = "MISSING_EVENT_ID"
    MISSING_EVENT_TIME = "MISSING_EVENT_TIME"
    MISSING_MACHINE_ID = "MISSING_MACHINE_ID"
    MISSING_DURATION = "MISSING_DURATION"
    MISSING_DEFECT_COUNT = "MISSING_DEFECT_COUNT"
    INVALID_DURATION = "INVALID_DURATION"
    INVALID_EVENT_TIME_FORMAT = "INVALID_EVENT_TIME_FORMAT"
    FUTURE_EVENT_TIME = "FUTURE_EVENT_TIME"


class RecordOutcome(str, Enum):
    """Terminal state of one record in a batch."""

    ACCEPTED = "accepted"
    DEDUPED = "deduped"
    UPDATED = "updated"
    REJECTED = "rejected"


class MachineHealth(str, Enum):
    """Machine status derived from its average defect rate per hour."""

    HEALTHY = "Healthy"
    WARNING = "Warning"
