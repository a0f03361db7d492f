"""Use cases for site assignment and employee relocation.

Each use case represents a single user action and orchestrates
domain logic without knowing about infrastructure details.
"""

from .apply_assignments import ApplyAssignmentsUseCase
from .relocate_employees import RelocateEmployeesUseCase

__all__ = [
    "ApplyAssignmentsUseCase",
    "RelocateEmployeesUseCase",
]
