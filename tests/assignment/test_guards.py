"""Tests for pre-flight guards."""

import pytest

from src.attendance_admin.assignment.domain.entities import (
    ActorScope,
    AssignmentDelta,
    Employee,
    EmployeeRole,
    GuardCode,
    RelocationRequest,
    Site,
)
from src.attendance_admin.assignment.domain.guards import (
    check_assignable,
    check_assignment_actor,
    check_relocation,
    index_employees,
    index_sites,
    selectable_for_relocation,
)


@pytest.fixture
def site_catalog():
    return index_sites([
        Site(id=1, name="HQ"),
        Site(id=2, name="Plant"),
        Site(id=3, name="Closed Depot", active=False),
    ])


@pytest.fixture
def employee_catalog():
    return index_employees([
        Employee(id=11, site_id=1),
        Employee(id=12, site_id=1),
        Employee(id=13, site_id=2),
        Employee(id=7, site_id=1, role=EmployeeRole.MANAGER),
    ])


@pytest.fixture
def admin():
    return ActorScope(user_id=1, role=EmployeeRole.ADMIN)


@pytest.fixture
def manager():
    return ActorScope(user_id=7, role=EmployeeRole.MANAGER, manageable_site_ids=frozenset({1}))


class TestCheckAssignmentActor:
    def test_admin_passes(self, admin):
        assert check_assignment_actor(admin) is None

    @pytest.mark.parametrize("role", [EmployeeRole.MANAGER, EmployeeRole.EMPLOYEE])
    def test_non_admin_forbidden(self, role):
        violation = check_assignment_actor(ActorScope(user_id=7, role=role))
        assert violation.code == GuardCode.FORBIDDEN


class TestCheckAssignable:
    """Tests for check_assignable."""

    def test_active_sites_pass(self, site_catalog):
        assert check_assignable(AssignmentDelta(to_add=(1, 2)), site_catalog) is None

    def test_inactive_site_rejected(self, site_catalog):
        violation = check_assignable(AssignmentDelta(to_add=(1, 3)), site_catalog)
        assert violation.code == GuardCode.INACTIVE_SITE
        assert violation.site_ids == (3,)

    def test_removing_inactive_site_allowed(self, site_catalog):
        assert check_assignable(AssignmentDelta(to_remove=(3,)), site_catalog) is None

    def test_unknown_site_not_rejected(self, site_catalog):
        assert check_assignable(AssignmentDelta(to_add=(99,)), site_catalog) is None


class TestCheckRelocation:
    """Tests for check_relocation."""

    def test_admin_passes(self, site_catalog, employee_catalog, admin):
        request = RelocationRequest(selection=(11, 13), target_site_id=2)
        assert check_relocation(request, site_catalog, employee_catalog, admin) is None

    def test_employee_actor_forbidden(self, site_catalog, employee_catalog):
        actor = ActorScope(user_id=11, role=EmployeeRole.EMPLOYEE)
        request = RelocationRequest(selection=(12,), target_site_id=2)
        violation = check_relocation(request, site_catalog, employee_catalog, actor)
        assert violation.code == GuardCode.FORBIDDEN

    def test_empty_selection(self, site_catalog, employee_catalog, admin):
        request = RelocationRequest(selection=(), target_site_id=2)
        violation = check_relocation(request, site_catalog, employee_catalog, admin)
        assert violation.code == GuardCode.EMPTY_SELECTION

    def test_empty_site_catalog(self, employee_catalog, admin):
        request = RelocationRequest(selection=(11,), target_site_id=2)
        violation = check_relocation(request, {}, employee_catalog, admin)
        assert violation.code == GuardCode.SITE_CATALOG_EMPTY

    def test_unknown_target(self, site_catalog, employee_catalog, admin):
        request = RelocationRequest(selection=(11,), target_site_id=99)
        violation = check_relocation(request, site_catalog, employee_catalog, admin)
        assert violation.code == GuardCode.UNKNOWN_SITE
        assert violation.site_ids == (99,)

    def test_inactive_target(self, site_catalog, employee_catalog, admin):
        request = RelocationRequest(selection=(11,), target_site_id=3)
        violation = check_relocation(request, site_catalog, employee_catalog, admin)
        assert violation.code == GuardCode.INACTIVE_SITE

    def test_manager_in_scope(self, site_catalog, employee_catalog, manager):
        request = RelocationRequest(selection=(11, 12), target_site_id=2)
        assert check_relocation(request, site_catalog, employee_catalog, manager) is None

    def test_one_out_of_scope_rejects_batch(self, site_catalog, employee_catalog, manager):
        request = RelocationRequest(selection=(11, 13, 12), target_site_id=2)
        violation = check_relocation(request, site_catalog, employee_catalog, manager)
        assert violation.code == GuardCode.OUT_OF_SCOPE
        assert violation.employee_ids == (13,)

    def test_unknown_employee_is_out_of_scope(self, site_catalog, employee_catalog, manager):
        request = RelocationRequest(selection=(11, 404), target_site_id=2)
        violation = check_relocation(request, site_catalog, employee_catalog, manager)
        assert violation.code == GuardCode.OUT_OF_SCOPE
        assert violation.employee_ids == (404,)

    def test_admin_skips_scope_check(self, site_catalog, employee_catalog, admin):
        request = RelocationRequest(selection=(404,), target_site_id=2)
        assert check_relocation(request, site_catalog, employee_catalog, admin) is None


class TestSelectableForRelocation:
    def test_only_employees_excluding_actor(self, employee_catalog, manager):
        selectable = selectable_for_relocation(employee_catalog.values(), manager)
        assert [e.id for e in selectable] == [11, 12, 13]

    def test_site_filter(self, employee_catalog, manager):
        selectable = selectable_for_relocation(employee_catalog.values(), manager, site_filter=2)
        assert [e.id for e in selectable] == [13]
