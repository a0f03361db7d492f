"""Use cases for correction requests."""

from .load_correction import LoadCorrectionUseCase

__all__ = ["LoadCorrectionUseCase"]
