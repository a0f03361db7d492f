"""Apply Assignments use case.

This use case turns an AssignmentDelta into remote effects on ONE manager's
site assignments:

GUARD (client-side, no network)
├── Actor guard: only an admin may change or read assignments
├── Busy guard: reject if this manager is already being applied
├── No-op: empty delta returns at once, no call, no refresh
└── Inactive sites in to_add are rejected

APPLY (SEQUENTIAL, each call awaited before the next)
├── Add every site in to_add, in order
└── Remove every site in to_remove, in order

REFRESH
└── Re-fetch the canonical assignment set (full success only)

Failure policy: the FIRST failing call stops the run. Nothing after it is
attempted (a failure while adding skips the whole remove phase), nothing
already applied is rolled back, and the canonical set is NOT refreshed. The
result lists the calls that took effect so the partial state is visible.

The platform has no multi-operation transaction, so there is no rollback.
"""

import logging
from typing import Iterable, Mapping, Optional

from ...api.error_messages import surface_message
from ...api.exceptions import AdminConsoleError, PermissionDeniedError
from ..domain.delta import diff_assignments
from ..domain.entities import (
    ActorScope,
    ApplyResult,
    ApplyState,
    AssignmentDelta,
    BusyGuard,
    GuardCode,
    GuardViolation,
    Site,
)
from ..domain.guards import check_assignable, check_assignment_actor
from ..domain.ports import IManagerAssignmentPort

logger = logging.getLogger(__name__)

MSG_NO_CHANGES = "No changes to apply."
MSG_UPDATED = "Assigned sites updated."
MSG_BUSY = "An update for this manager is already in progress."


class ApplyAssignmentsUseCase:
    """Apply a site-assignment delta for one manager.

    Key constraints:
    - All adds strictly before any remove
    - Stop on first failure, no rollback, no refresh on failure
    - Guards never make a remote call

    The use case keeps no per-run state, so one instance can serve several
    managers; the run's state machine is reported on ApplyResult.state.
    """

    def __init__(self, assignment_port: IManagerAssignmentPort):
        """Initialize the use case.

        Args:
            assignment_port: Remote add/remove/list of manager assignments
        """
        self.port = assignment_port

    @staticmethod
    def busy_key(manager_id: int) -> tuple:
        return ("assignments", manager_id)

    async def refresh(self, manager_id: int, actor: ActorScope) -> list[int]:
        """Fetch the canonical assignment set for a manager.

        Raises:
            PermissionDeniedError: If the actor is not an admin (no call made)
            AdminConsoleError: If the read fails
        """
        violation = check_assignment_actor(actor)
        if violation:
            logger.warning(f"Refresh for manager {manager_id} rejected: {violation.code.value}")
            raise PermissionDeniedError(violation.message)
        return await self._fetch(manager_id)

    async def _fetch(self, manager_id: int) -> list[int]:
        site_ids = await self.port.list_assignments(manager_id)
        logger.info(f"Manager {manager_id} has {len(site_ids)} assigned site(s)")
        return site_ids

    async def apply_desired(
        self,
        manager_id: int,
        current_site_ids: Iterable[int],
        desired_site_ids: Iterable[int],
        site_catalog: Mapping[int, Site],
        actor: ActorScope,
        busy: Optional[BusyGuard] = None,
    ) -> ApplyResult:
        """Diff current against desired, then execute the delta."""
        current = list(dict.fromkeys(current_site_ids))
        delta = diff_assignments(current, desired_site_ids)
        return await self.execute(
            manager_id,
            delta,
            site_catalog,
            actor,
            current_site_ids=current,
            busy=busy,
        )

    async def execute(
        self,
        manager_id: int,
        delta: AssignmentDelta,
        site_catalog: Mapping[int, Site],
        actor: ActorScope,
        current_site_ids: Optional[Iterable[int]] = None,
        busy: Optional[BusyGuard] = None,
    ) -> ApplyResult:
        """Apply ``delta`` to ``manager_id``'s assignments.

        Args:
            manager_id: Manager whose assignments change
            delta: Sites to add and remove
            site_catalog: Known sites keyed by id (for the inactive guard)
            actor: Principal performing the change; must be an admin
            current_site_ids: Last known canonical set, echoed back on no-op
            busy: Caller-owned guard against overlapping runs

        Returns:
            ApplyResult; ``assigned_site_ids`` is set only when the canonical
            set was re-fetched after full success, or echoed on no-op
        """
        result = ApplyResult(
            success=False,
            state=ApplyState.IDLE,
            manager_id=manager_id,
            delta=delta,
        )
        key = self.busy_key(manager_id)
        result.state = ApplyState.GUARDING

        violation = check_assignment_actor(actor)
        if violation:
            logger.warning(
                f"Apply for manager {manager_id} by user {actor.user_id} rejected: "
                f"{violation.code.value}"
            )
            return self._reject(result, violation)

        if busy is not None and busy.is_busy(key):
            logger.warning(f"Apply for manager {manager_id} rejected: already in progress")
            return self._reject(result, GuardViolation(code=GuardCode.BUSY, message=MSG_BUSY))

        if delta.is_empty:
            logger.info(f"No assignment changes for manager {manager_id}")
            result.success = True
            result.state = ApplyState.DONE
            result.message = MSG_NO_CHANGES
            if current_site_ids is not None:
                result.assigned_site_ids = list(current_site_ids)
            return result

        violation = check_assignable(delta, site_catalog)
        if violation:
            logger.warning(
                f"Apply for manager {manager_id} rejected: {violation.code.value} "
                f"{list(violation.site_ids)}"
            )
            return self._reject(result, violation)

        if busy is None:
            return await self._run(result)
        with busy.hold(key):
            return await self._run(result)

    @staticmethod
    def _reject(result: ApplyResult, violation: GuardViolation) -> ApplyResult:
        result.state = ApplyState.REJECTED
        result.violation = violation
        result.message = violation.message
        return result

    async def _run(self, result: ApplyResult) -> ApplyResult:
        manager_id = result.manager_id
        delta = result.delta
        logger.info(
            f"Applying assignments for manager {manager_id}: "
            f"+{list(delta.to_add)} -{list(delta.to_remove)}"
        )

        # Phase 1: adds
        result.state = ApplyState.APPLYING_ADD
        for site_id in delta.to_add:
            try:
                await self.port.add_assignment(manager_id, site_id)
            except AdminConsoleError as e:
                return self._fail(result, site_id, e)
            result.added.append(site_id)

        # Phase 2: removes
        result.state = ApplyState.APPLYING_REMOVE
        for site_id in delta.to_remove:
            try:
                await self.port.remove_assignment(manager_id, site_id)
            except AdminConsoleError as e:
                return self._fail(result, site_id, e)
            result.removed.append(site_id)

        # Phase 3: refresh canonical state
        result.state = ApplyState.REFRESHING
        try:
            result.assigned_site_ids = await self._fetch(manager_id)
        except AdminConsoleError as e:
            return self._fail(result, None, e)

        result.state = ApplyState.DONE
        result.success = True
        result.message = MSG_UPDATED
        logger.info(
            f"Assignments for manager {manager_id} applied: "
            f"{len(result.added)} added, {len(result.removed)} removed"
        )
        return result

    @staticmethod
    def _fail(
        result: ApplyResult,
        site_id: Optional[int],
        error: AdminConsoleError,
    ) -> ApplyResult:
        phase = result.state.value
        result.state = ApplyState.ERROR
        result.error = error
        result.failed_site_id = site_id
        result.message = surface_message(error)
        at_site = f" at site {site_id}" if site_id is not None else ""
        logger.error(
            f"Apply for manager {result.manager_id} stopped during {phase}{at_site}: "
            f"{error}. Already applied: +{result.added} -{result.removed} (not rolled back)"
        )
        return result
