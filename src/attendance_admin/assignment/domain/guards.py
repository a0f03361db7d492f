"""Pre-flight guards for assignment and relocation.

Every function here is pure and runs before any remote call. A guard
returns None when the operation may proceed, or a GuardViolation.
"""

from typing import Iterable, Mapping, Optional

from .entities import (
    ActorScope,
    AssignmentDelta,
    Employee,
    EmployeeRole,
    GuardCode,
    GuardViolation,
    RelocationRequest,
    Site,
)


def index_sites(sites: Iterable[Site]) -> dict[int, Site]:
    """Build a site catalog keyed by id."""
    return {s.id: s for s in sites}


def index_employees(employees: Iterable[Employee]) -> dict[int, Employee]:
    """Build an employee catalog keyed by id."""
    return {e.id: e for e in employees}


def check_assignment_actor(actor: ActorScope) -> Optional[GuardViolation]:
    """Only an admin may read or change a manager's site assignments."""
    if actor.role != EmployeeRole.ADMIN:
        return GuardViolation(
            code=GuardCode.FORBIDDEN,
            message="You do not have permission to manage site assignments.",
        )
    return None


def check_assignable(
    delta: AssignmentDelta,
    site_catalog: Mapping[int, Site],
) -> Optional[GuardViolation]:
    """Reject a delta that would newly assign an inactive site.

    Sites missing from the catalog are not rejected here; the platform is
    the authority on whether they exist. Removals are never guarded, so an
    inactive site can always be dropped.
    """
    inactive = tuple(
        site_id
        for site_id in delta.to_add
        if site_id in site_catalog and not site_catalog[site_id].active
    )
    if inactive:
        return GuardViolation(
            code=GuardCode.INACTIVE_SITE,
            message="Inactive sites cannot be assigned.",
            site_ids=inactive,
        )
    return None


def check_relocation(
    request: RelocationRequest,
    site_catalog: Mapping[int, Site],
    employee_catalog: Mapping[int, Employee],
    actor: ActorScope,
) -> Optional[GuardViolation]:
    """Validate a whole relocation batch before any employee is touched.

    Checks, in order: actor role, non-empty selection, a loaded site catalog,
    a known and active target, and (for scoped actors) that every selected
    employee currently sits on a manageable site. The scope check covers the
    full selection at once; one out-of-scope employee rejects the batch.
    """
    if actor.role not in (EmployeeRole.ADMIN, EmployeeRole.MANAGER):
        return GuardViolation(
            code=GuardCode.FORBIDDEN,
            message="You do not have permission to move employees.",
        )

    if not request.selection:
        return GuardViolation(
            code=GuardCode.EMPTY_SELECTION,
            message="Select at least one employee to move.",
        )

    if not site_catalog:
        return GuardViolation(
            code=GuardCode.SITE_CATALOG_EMPTY,
            message="The site list is not loaded. Refresh and try again.",
        )

    target = site_catalog.get(request.target_site_id)
    if target is None:
        return GuardViolation(
            code=GuardCode.UNKNOWN_SITE,
            message="The target site cannot be selected.",
            site_ids=(request.target_site_id,),
        )
    if not target.active:
        return GuardViolation(
            code=GuardCode.INACTIVE_SITE,
            message="Employees cannot be moved to an inactive site.",
            site_ids=(target.id,),
        )

    if actor.is_scoped:
        out_of_scope = tuple(
            employee_id
            for employee_id in request.selection
            if employee_id not in employee_catalog
            or not actor.can_manage_site(employee_catalog[employee_id].site_id)
        )
        if out_of_scope:
            return GuardViolation(
                code=GuardCode.OUT_OF_SCOPE,
                message="The selection includes employees outside your scope.",
                employee_ids=out_of_scope,
            )

    return None


def selectable_for_relocation(
    employees: Iterable[Employee],
    actor: ActorScope,
    site_filter: Optional[int] = None,
) -> list[Employee]:
    """Employees that may be offered for bulk relocation.

    Only EMPLOYEE-role records qualify, never the actor themself, optionally
    narrowed to one current site.
    """
    return [
        e
        for e in employees
        if e.role == EmployeeRole.EMPLOYEE
        and e.id != actor.user_id
        and (site_filter is None or e.site_id == site_filter)
    ]
