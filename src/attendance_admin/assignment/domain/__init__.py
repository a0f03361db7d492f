"""Domain layer for site assignment and employee relocation.

Contains:
- Entities: Core business objects
- Delta: Set difference between current and desired assignments
- Guards: Pre-flight checks that run before any remote call
- Ports: Interface definitions for infrastructure adapters
"""

from .delta import diff_assignments
from .entities import (
    ActorScope,
    ApplyResult,
    ApplyState,
    AssignmentDelta,
    BusyError,
    BusyGuard,
    Employee,
    EmployeeRole,
    GuardCode,
    GuardViolation,
    RelocationFailure,
    RelocationOutcome,
    RelocationRequest,
    Site,
)
from .guards import (
    check_assignable,
    check_assignment_actor,
    check_relocation,
    index_employees,
    index_sites,
    selectable_for_relocation,
)
from .ports import IDirectoryPort, IEmployeePort, IManagerAssignmentPort

__all__ = [
    # Entities
    "Site",
    "Employee",
    "EmployeeRole",
    "ActorScope",
    "AssignmentDelta",
    "ApplyState",
    "ApplyResult",
    "GuardCode",
    "GuardViolation",
    "RelocationRequest",
    "RelocationFailure",
    "RelocationOutcome",
    "BusyGuard",
    "BusyError",
    # Pure functions
    "diff_assignments",
    "check_assignable",
    "check_assignment_actor",
    "check_relocation",
    "index_sites",
    "index_employees",
    "selectable_for_relocation",
    # Ports
    "IManagerAssignmentPort",
    "IEmployeePort",
    "IDirectoryPort",
]
