"""Tests for RelocateEmployeesUseCase."""

from unittest.mock import AsyncMock, call

import pytest

from src.attendance_admin.api.error_messages import GENERIC_ERROR_MESSAGE
from src.attendance_admin.api.exceptions import APIError, TimeoutError
from src.attendance_admin.assignment.domain.entities import (
    ActorScope,
    BusyGuard,
    Employee,
    EmployeeRole,
    GuardCode,
    RelocationRequest,
    Site,
)
from src.attendance_admin.assignment.domain.guards import index_employees, index_sites
from src.attendance_admin.assignment.use_cases import RelocateEmployeesUseCase
from src.attendance_admin.assignment.use_cases.relocate_employees import BUSY_KEY


def moved(employee_id, site_id=2):
    return Employee(id=employee_id, site_id=site_id)


@pytest.fixture
def mock_port():
    port = AsyncMock()

    async def update(employee_id, *, site_id=None, **kwargs):
        return moved(employee_id, site_id)

    port.update_employee.side_effect = update
    return port


@pytest.fixture
def use_case(mock_port):
    return RelocateEmployeesUseCase(mock_port)


@pytest.fixture
def site_catalog():
    return index_sites([
        Site(id=1, name="HQ"),
        Site(id=2, name="Plant"),
        Site(id=3, name="Closed", active=False),
    ])


@pytest.fixture
def employee_catalog():
    return index_employees([
        Employee(id=11, site_id=1),
        Employee(id=12, site_id=1),
        Employee(id=13, site_id=1),
        Employee(id=14, site_id=2),
    ])


@pytest.fixture
def admin():
    return ActorScope(user_id=1, role=EmployeeRole.ADMIN)


@pytest.fixture
def manager():
    return ActorScope(user_id=7, role=EmployeeRole.MANAGER, manageable_site_ids=frozenset({1}))


def inactive_employee(employee_id):
    return APIError(
        f"Employee {employee_id} is inactive", status_code=409, code="EMPLOYEE_INACTIVE"
    )


class TestRelocateSuccess:
    @pytest.mark.asyncio
    async def test_moves_in_selection_order(
        self, use_case, mock_port, site_catalog, employee_catalog, admin
    ):
        request = RelocationRequest(selection=(13, 11, 12), target_site_id=2)

        outcome = await use_case.execute(request, site_catalog, employee_catalog, admin)

        assert mock_port.update_employee.call_args_list == [
            call(13, site_id=2),
            call(11, site_id=2),
            call(12, site_id=2),
        ]
        assert outcome.succeeded == [13, 11, 12]
        assert outcome.failed == []
        assert outcome.success is True
        assert outcome.updated[11].site_id == 2

    @pytest.mark.asyncio
    async def test_one_call_in_flight(
        self, use_case, mock_port, site_catalog, employee_catalog, admin
    ):
        in_flight = 0
        peak = 0

        async def update(employee_id, *, site_id=None, **kwargs):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            in_flight -= 1
            return moved(employee_id, site_id)

        mock_port.update_employee.side_effect = update
        request = RelocationRequest(selection=(11, 12, 13), target_site_id=2)

        await use_case.execute(request, site_catalog, employee_catalog, admin)

        assert peak == 1


class TestRelocatePartialFailure:
    """A failure never stops the loop."""

    @pytest.mark.asyncio
    async def test_continues_after_failure(
        self, use_case, mock_port, site_catalog, employee_catalog, admin
    ):
        async def update(employee_id, *, site_id=None, **kwargs):
            if employee_id == 12:
                raise inactive_employee(12)
            return moved(employee_id, site_id)

        mock_port.update_employee.side_effect = update
        request = RelocationRequest(selection=(11, 12, 13), target_site_id=2)

        outcome = await use_case.execute(request, site_catalog, employee_catalog, admin)

        assert mock_port.update_employee.await_count == 3
        assert outcome.succeeded == [11, 13]
        assert [f.id for f in outcome.failed] == [12]
        assert outcome.failed[0].reason == "Employee 12 is inactive"
        assert outcome.is_partial is True
        assert outcome.summary() == "Moved 2, failed 1 (#12)."

    @pytest.mark.asyncio
    async def test_every_id_accounted_once(
        self, use_case, mock_port, site_catalog, employee_catalog, admin
    ):
        mock_port.update_employee.side_effect = [
            moved(11),
            TimeoutError(),
            moved(13),
            inactive_employee(14),
        ]
        request = RelocationRequest(selection=(11, 12, 13, 14), target_site_id=2)

        outcome = await use_case.execute(request, site_catalog, employee_catalog, admin)

        failed_ids = [f.id for f in outcome.failed]
        assert sorted(outcome.succeeded + failed_ids) == [11, 12, 13, 14]
        assert not set(outcome.succeeded) & set(failed_ids)
        assert outcome.attempted == [11, 12, 13, 14]

    @pytest.mark.asyncio
    async def test_transport_failure_reason_is_generic(
        self, use_case, mock_port, site_catalog, employee_catalog, admin
    ):
        mock_port.update_employee.side_effect = TimeoutError(timeout_seconds=30)
        request = RelocationRequest(selection=(11,), target_site_id=2)

        outcome = await use_case.execute(request, site_catalog, employee_catalog, admin)

        assert outcome.failed[0].reason == GENERIC_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_all_fail(self, use_case, mock_port, site_catalog, employee_catalog, admin):
        mock_port.update_employee.side_effect = TimeoutError()
        request = RelocationRequest(selection=(11, 12), target_site_id=2)

        outcome = await use_case.execute(request, site_catalog, employee_catalog, admin)

        assert outcome.succeeded == []
        assert len(outcome.failed) == 2
        assert outcome.is_partial is False
        assert outcome.success is False


class TestRelocateGuards:
    """Pre-flight guards reject the whole batch with no remote call."""

    @pytest.mark.asyncio
    async def test_empty_selection(self, use_case, mock_port, site_catalog, employee_catalog, admin):
        request = RelocationRequest(selection=(), target_site_id=2)

        outcome = await use_case.execute(request, site_catalog, employee_catalog, admin)

        mock_port.update_employee.assert_not_awaited()
        assert outcome.violation.code == GuardCode.EMPTY_SELECTION
        assert outcome.succeeded == []
        assert outcome.failed == []

    @pytest.mark.asyncio
    async def test_inactive_target(self, use_case, mock_port, site_catalog, employee_catalog, admin):
        request = RelocationRequest(selection=(11,), target_site_id=3)

        outcome = await use_case.execute(request, site_catalog, employee_catalog, admin)

        mock_port.update_employee.assert_not_awaited()
        assert outcome.violation.code == GuardCode.INACTIVE_SITE

    @pytest.mark.asyncio
    async def test_out_of_scope_rejects_all(
        self, use_case, mock_port, site_catalog, employee_catalog, manager
    ):
        # 14 sits on site 2, outside the manager's scope
        request = RelocationRequest(selection=(11, 12, 14), target_site_id=1)

        outcome = await use_case.execute(request, site_catalog, employee_catalog, manager)

        mock_port.update_employee.assert_not_awaited()
        assert outcome.violation.code == GuardCode.OUT_OF_SCOPE
        assert outcome.violation.employee_ids == (14,)

    @pytest.mark.asyncio
    async def test_manager_in_scope(
        self, use_case, mock_port, site_catalog, employee_catalog, manager
    ):
        request = RelocationRequest(selection=(11, 12), target_site_id=2)

        outcome = await use_case.execute(request, site_catalog, employee_catalog, manager)

        assert outcome.succeeded == [11, 12]

    @pytest.mark.asyncio
    async def test_busy(self, use_case, mock_port, site_catalog, employee_catalog, admin):
        busy = BusyGuard()
        request = RelocationRequest(selection=(11,), target_site_id=2)

        with busy.hold(BUSY_KEY):
            outcome = await use_case.execute(
                request, site_catalog, employee_catalog, admin, busy=busy
            )

        mock_port.update_employee.assert_not_awaited()
        assert outcome.violation.code == GuardCode.BUSY

    @pytest.mark.asyncio
    async def test_busy_released(self, use_case, site_catalog, employee_catalog, admin):
        busy = BusyGuard()
        request = RelocationRequest(selection=(11,), target_site_id=2)

        await use_case.execute(request, site_catalog, employee_catalog, admin, busy=busy)

        assert busy.is_busy(BUSY_KEY) is False


class TestRelocateMiddleFailure:
    @pytest.mark.asyncio
    async def test_third_of_five_fails(self, use_case, mock_port, site_catalog, admin):
        employee_catalog = index_employees(Employee(id=i, site_id=1) for i in range(21, 26))
        mock_port.update_employee.side_effect = [
            moved(21),
            moved(22),
            inactive_employee(23),
            moved(24),
            moved(25),
        ]
        request = RelocationRequest(selection=(21, 22, 23, 24, 25), target_site_id=2)

        outcome = await use_case.execute(request, site_catalog, employee_catalog, admin)

        assert len(outcome.succeeded) == 4
        assert [(f.id, f.reason) for f in outcome.failed] == [(23, "Employee 23 is inactive")]
        assert outcome.attempted == [21, 22, 23, 24, 25]
        assert mock_port.update_employee.await_count == 5


class TestRelocateWithoutEchoedRecord:
    @pytest.mark.asyncio
    async def test_update_without_record_still_succeeds(
        self, use_case, mock_port, site_catalog, employee_catalog, admin
    ):
        mock_port.update_employee.side_effect = [None, moved(12)]
        request = RelocationRequest(selection=(11, 12), target_site_id=2)

        outcome = await use_case.execute(request, site_catalog, employee_catalog, admin)

        assert outcome.succeeded == [11, 12]
        assert outcome.failed == []
        assert 11 not in outcome.updated
        assert outcome.updated[12].site_id == 2
        assert outcome.to_dict()["updated"] == [outcome.updated[12].to_dict()]
