"""Infrastructure adapters for correction requests."""

from .admin_api_reader import AdminApiCorrectionReader
from .field_mapper import CANDIDATE_KEYS, CorrectionFieldMapper, parse_instant, pick_first

__all__ = [
    "AdminApiCorrectionReader",
    "CorrectionFieldMapper",
    "CANDIDATE_KEYS",
    "pick_first",
    "parse_instant",
]
