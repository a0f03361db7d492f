"""Field mapper for correction request records.

The correction read model is not a stable contract: different platform
versions name the same timestamp differently, sometimes nest the attendance
times under an ``attendance`` object, put a single-sided proposal in the
wrong field, or send BOTH-type proposals in reverse order. This mapper
turns any of those into one canonical CorrectionRecord.

Mapping runs in fixed passes:
    1. Key fallback: each canonical field takes the first candidate key
       holding a non-empty string (CANDIDATE_KEYS order decides the winner)
    2. Single-sided correction: CHECK_IN keeps only the check-in proposal,
       moving a misplaced check-out value over; CHECK_OUT mirrors it
    3. Order correction: BOTH with two parseable proposals is swapped when
       check-in is later than check-out; unparseable values pass through

The mapper never raises. Malformed input yields a best-effort record.
"""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from ..domain.entities import CorrectionRecord, CorrectionStatus, CorrectionType

logger = logging.getLogger(__name__)

# Candidate raw keys per canonical field, in priority order.
CANDIDATE_KEYS: dict[str, tuple[str, ...]] = {
    "proposed_check_in": (
        "proposedCheckInAt",
        "proposed_check_in_at",
        "proposedCheckInTime",
        "proposedCheckIn",
        "checkInProposedAt",
    ),
    "proposed_check_out": (
        "proposedCheckOutAt",
        "proposed_check_out_at",
        "proposedCheckOutTime",
        "proposedCheckOut",
        "checkOutProposedAt",
    ),
    "current_check_in": (
        "currentCheckInAt",
        "finalCheckInAt",
        "beforeCheckInAt",
        "baseCheckInAt",
        "checkInAt",
        "attendanceCheckInAt",
    ),
    "current_check_out": (
        "currentCheckOutAt",
        "finalCheckOutAt",
        "beforeCheckOutAt",
        "baseCheckOutAt",
        "checkOutAt",
        "attendanceCheckOutAt",
    ),
    "original_check_in": (
        "originalCheckInAt",
        "original_check_in_at",
        "originCheckInAt",
    ),
    "original_check_out": (
        "originalCheckOutAt",
        "original_check_out_at",
        "originCheckOutAt",
    ),
}

# Fields that may also be found inside a nested object when absent at top level
NESTED_FALLBACK: dict[str, str] = {
    "current_check_in": "attendance",
    "current_check_out": "attendance",
    "original_check_in": "attendance",
    "original_check_out": "attendance",
}


def pick_first(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Optional[str]:
    """Return the value of the first key holding a non-empty string.

    Whitespace-only strings count as empty. The value is returned untouched.
    """
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def parse_instant(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp, or None if it cannot be parsed."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def _enum_or_none(enum_cls, value):
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        return None


def _int_or_none(value) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _str_or_none(value) -> Optional[str]:
    return value if isinstance(value, str) else None


class CorrectionFieldMapper:
    """Maps raw correction request records to CorrectionRecord."""

    def resolve_fields(self, raw: Mapping[str, Any]) -> dict[str, Optional[str]]:
        """Resolve every canonical timestamp field from its candidate keys.

        Args:
            raw: Raw record from the platform

        Returns:
            Canonical field name -> raw string value (or None)
        """
        resolved: dict[str, Optional[str]] = {}
        for field_name, keys in CANDIDATE_KEYS.items():
            value = pick_first(raw, keys)
            nested_key = NESTED_FALLBACK.get(field_name)
            if value is None and nested_key:
                nested = raw.get(nested_key)
                if isinstance(nested, Mapping):
                    value = pick_first(nested, keys)
            resolved[field_name] = value
        return resolved

    def map_to_entity(self, raw: Any) -> CorrectionRecord:
        """Transform a raw record into a canonical CorrectionRecord.

        Args:
            raw: Raw record; anything that is not a mapping yields an
                empty record

        Returns:
            Normalized CorrectionRecord
        """
        if not isinstance(raw, Mapping):
            logger.warning(f"Correction record is not an object: {type(raw).__name__}")
            return CorrectionRecord()

        record = CorrectionRecord(
            type=_enum_or_none(CorrectionType, raw.get("type")),
            request_id=_int_or_none(raw.get("requestId")),
            attendance_id=_int_or_none(raw.get("attendanceId")),
            status=_enum_or_none(CorrectionStatus, raw.get("status")),
            requested_at=_str_or_none(raw.get("requestedAt")),
            reason=_str_or_none(raw.get("reason")),
            processed_at=_str_or_none(raw.get("processedAt")),
            approve_comment=_str_or_none(raw.get("approveComment")),
            reject_reason=_str_or_none(raw.get("rejectReason")),
            **self.resolve_fields(raw),
        )
        return self.normalize(record)

    @staticmethod
    def normalize(record: CorrectionRecord) -> CorrectionRecord:
        """Apply single-sided and order corrections in place.

        Args:
            record: Record with fields already resolved

        Returns:
            The same record, normalized
        """
        if record.type == CorrectionType.CHECK_IN:
            if record.proposed_check_in is None and record.proposed_check_out is not None:
                record.proposed_check_in = record.proposed_check_out
            record.proposed_check_out = None

        elif record.type == CorrectionType.CHECK_OUT:
            if record.proposed_check_out is None and record.proposed_check_in is not None:
                record.proposed_check_out = record.proposed_check_in
            record.proposed_check_in = None

        elif record.type == CorrectionType.BOTH:
            check_in = parse_instant(record.proposed_check_in)
            check_out = parse_instant(record.proposed_check_out)
            if check_in is None or check_out is None:
                return record
            try:
                inverted = check_in > check_out
            except TypeError:
                # Naive and aware timestamps cannot be ordered
                return record
            if inverted:
                record.proposed_check_in, record.proposed_check_out = (
                    record.proposed_check_out,
                    record.proposed_check_in,
                )

        return record
