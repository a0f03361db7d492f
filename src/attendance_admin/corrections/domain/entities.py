"""Domain entities for time-correction requests."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CorrectionType(str, Enum):
    """Which side of an attendance record a correction targets."""

    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"
    BOTH = "BOTH"


class CorrectionStatus(str, Enum):
    """Lifecycle status of a correction request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELED = "CANCELED"


class CorrectionScope(str, Enum):
    """Read scope for a correction request."""

    REQUESTED_BY_ME = "requested_by_me"
    APPROVABLE = "approvable"


@dataclass
class CorrectionRecord:
    """Canonical correction request.

    Timestamps stay as the ISO 8601 strings the platform sent; the mapper
    only decides which raw field feeds each canonical one.

    After normalization:
    - CHECK_IN has no proposed_check_out
    - CHECK_OUT has no proposed_check_in
    - BOTH with two parseable proposed times has proposed_check_in first
    """

    type: Optional[CorrectionType] = None
    proposed_check_in: Optional[str] = None
    proposed_check_out: Optional[str] = None
    current_check_in: Optional[str] = None
    current_check_out: Optional[str] = None
    original_check_in: Optional[str] = None
    original_check_out: Optional[str] = None

    request_id: Optional[int] = None
    attendance_id: Optional[int] = None
    status: Optional[CorrectionStatus] = None
    requested_at: Optional[str] = None
    reason: Optional[str] = None
    processed_at: Optional[str] = None
    approve_comment: Optional[str] = None
    reject_reason: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for output."""
        return {
            "request_id": self.request_id,
            "attendance_id": self.attendance_id,
            "status": self.status.value if self.status else None,
            "type": self.type.value if self.type else None,
            "requested_at": self.requested_at,
            "proposed_check_in": self.proposed_check_in,
            "proposed_check_out": self.proposed_check_out,
            "current_check_in": self.current_check_in,
            "current_check_out": self.current_check_out,
            "original_check_in": self.original_check_in,
            "original_check_out": self.original_check_out,
            "reason": self.reason,
            "processed_at": self.processed_at,
            "approve_comment": self.approve_comment,
            "reject_reason": self.reject_reason,
        }
