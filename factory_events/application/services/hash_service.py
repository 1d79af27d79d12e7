"""Hash service for event payload fingerprints (canonical JSON + algorithm)."""

from __future__ import annotations

import hashlib
import json
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from factory_events.shared.utils.datetime import to_iso

if TYPE_CHECKING:
    from factory_events.application.dtos.event import NormalizedEvent


class HashAlgorithm(ABC):
    """Abstract hash algorithm (OCP)."""

    @abstractmethod
    def hash(self, data: str) -> str:
        """Compute hash of input string."""
        ...


class SHA256Algorithm(HashAlgorithm):
    """SHA-256 implementation."""

    def hash(self, data: str) -> str:
        return hashlib.sha256(data.encode()).hexdigest()


class HashService:
    """Single source of truth for payload fingerprints (IPayloadHasher)."""

    def __init__(self, algorithm: HashAlgorithm | None = None) -> None:
        self.algorithm = algorithm or SHA256Algorithm()

    @staticmethod
    def canonical_json(data: dict[str, Any]) -> str:
        """Canonical JSON for deterministic hashing."""
        return json.dumps(data, sort_keys=True, separators=(",", ":"))

    @staticmethod
    def semantic_fields(event: NormalizedEvent) -> dict[str, Any]:
        """The fields that define an event's content. received_time is not one of them."""
        return {
            "eventId": event.event_id,
            "eventTime": to_iso(event.event_time),
            "machineId": event.machine_id,
            "lineId": event.line_id or None,
            "factoryId": event.factory_id or None,
            "durationMs": event.duration_ms,
            "defectCount": event.defect_count,
        }

    def compute_payload_hash(self, event: NormalizedEvent) -> str:
        """Compute the payload fingerprint used for deduplication."""
        return self.algorithm.hash(self.canonical_json(self.semantic_fields(event)))
