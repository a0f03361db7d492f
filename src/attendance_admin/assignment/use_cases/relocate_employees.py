"""Relocate Employees use case.

Moves a batch of selected employees to one target site:

GUARD (client-side, whole batch, no network)
├── Actor must be ADMIN or MANAGER
├── Selection must be non-empty
├── Site catalog must be loaded; target must exist and be active
└── Scoped actor: EVERY selected employee must sit on a manageable site

RELOCATE (SEQUENTIAL, one PATCH in flight at a time)
├── Update each employee's site in selection order
└── Continue on failures, record each failing id with its reason

Unlike ApplyAssignmentsUseCase, a failure here never stops the loop. At most
one update is in flight at a time.
"""

import logging
from typing import Mapping, Optional

from ...api.error_messages import failure_reason
from ..domain.entities import (
    ActorScope,
    BusyGuard,
    Employee,
    GuardCode,
    GuardViolation,
    RelocationFailure,
    RelocationOutcome,
    RelocationRequest,
    Site,
)
from ..domain.guards import check_relocation
from ..domain.ports import IEmployeePort

logger = logging.getLogger(__name__)

BUSY_KEY = ("relocation",)
MSG_BUSY = "A bulk move is already in progress."


class RelocateEmployeesUseCase:
    """Move selected employees to a target site with per-item isolation."""

    def __init__(self, employee_port: IEmployeePort):
        """Initialize the use case.

        Args:
            employee_port: Remote employee update
        """
        self.port = employee_port

    async def execute(
        self,
        request: RelocationRequest,
        site_catalog: Mapping[int, Site],
        employee_catalog: Mapping[int, Employee],
        actor: ActorScope,
        busy: Optional[BusyGuard] = None,
    ) -> RelocationOutcome:
        """Relocate ``request.selection`` to ``request.target_site_id``.

        Args:
            request: Selection and target site
            site_catalog: Known sites keyed by id
            employee_catalog: Known employees keyed by id (for the scope guard)
            actor: Principal performing the move
            busy: Caller-owned guard against overlapping runs

        Returns:
            RelocationOutcome. Never raises once guards pass; a rejected
            batch is reported through ``outcome.violation``.
        """
        outcome = RelocationOutcome(target_site_id=request.target_site_id)

        if busy is not None and busy.is_busy(BUSY_KEY):
            outcome.violation = GuardViolation(code=GuardCode.BUSY, message=MSG_BUSY)
            logger.warning("Bulk move rejected: already in progress")
            return outcome

        violation = check_relocation(request, site_catalog, employee_catalog, actor)
        if violation:
            outcome.violation = violation
            logger.warning(
                f"Bulk move of {len(request.selection)} employee(s) to site "
                f"#{request.target_site_id} rejected: {violation.code.value}"
            )
            return outcome

        if busy is None:
            await self._run(request, outcome)
        else:
            with busy.hold(BUSY_KEY):
                await self._run(request, outcome)
        return outcome

    async def _run(self, request: RelocationRequest, outcome: RelocationOutcome) -> None:
        target = request.target_site_id
        logger.info(f"Moving {len(request.selection)} employee(s) to site #{target}")

        for employee_id in request.selection:
            outcome.attempted.append(employee_id)
            try:
                updated = await self.port.update_employee(employee_id, site_id=target)
            except Exception as e:
                outcome.failed.append(
                    RelocationFailure(id=employee_id, reason=failure_reason(e))
                )
                logger.warning(f"  Move of employee {employee_id} failed: {e}")
                continue

            outcome.succeeded.append(employee_id)
            if updated is not None:
                outcome.updated[employee_id] = updated

        if outcome.failed:
            logger.error(
                f"Bulk move to site #{target}: {len(outcome.succeeded)} moved, "
                f"{len(outcome.failed)} failed: {[f.id for f in outcome.failed]}"
            )
        else:
            logger.info(f"Bulk move to site #{target}: {len(outcome.succeeded)} moved")
