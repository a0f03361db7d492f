"""Domain layer for correction requests."""

from .entities import CorrectionRecord, CorrectionScope, CorrectionStatus, CorrectionType
from .ports import ICorrectionReader

__all__ = [
    "CorrectionRecord",
    "CorrectionScope",
    "CorrectionStatus",
    "CorrectionType",
    "ICorrectionReader",
]
