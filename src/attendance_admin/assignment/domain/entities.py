"""Domain entities for site assignment and employee relocation.

These are pure domain objects with no infrastructure dependencies.
They are rebuilt from remote reads for every operation and discarded after.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable, Iterator, Optional


class EmployeeRole(str, Enum):
    """Roles known to the attendance platform."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class ApplyState(str, Enum):
    """States of the assignment apply executor."""

    IDLE = "idle"
    GUARDING = "guarding"
    APPLYING_ADD = "applying_add"
    APPLYING_REMOVE = "applying_remove"
    REFRESHING = "refreshing"
    DONE = "done"
    ERROR = "error"  # A remote call failed; nothing after it was attempted
    REJECTED = "rejected"  # A guard failed; no remote call was made


class GuardCode(str, Enum):
    """Reasons a pre-flight guard can reject an operation."""

    INACTIVE_SITE = "INACTIVE_SITE"
    UNKNOWN_SITE = "UNKNOWN_SITE"
    SITE_CATALOG_EMPTY = "SITE_CATALOG_EMPTY"
    EMPTY_SELECTION = "EMPTY_SELECTION"
    OUT_OF_SCOPE = "OUT_OF_SCOPE"
    FORBIDDEN = "FORBIDDEN"
    BUSY = "BUSY"


@dataclass(frozen=True)
class Site:
    """A work site.

    An inactive site may stay as an already-held assignment, but never
    becomes the target of a new assignment or placement.
    """

    id: int
    name: str
    active: bool = True


@dataclass(frozen=True)
class Employee:
    """An employee record as returned by the platform."""

    id: int
    site_id: Optional[int]
    role: EmployeeRole = EmployeeRole.EMPLOYEE
    active: bool = True
    username: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for output."""
        return {
            "user_id": self.id,
            "username": self.username,
            "active": self.active,
            "role": self.role.value,
            "site_id": self.site_id,
        }


@dataclass(frozen=True)
class ActorScope:
    """The principal performing an operation.

    An admin is unscoped. A manager may only act on employees whose current
    site is in ``manageable_site_ids``.
    """

    user_id: int
    role: EmployeeRole
    manageable_site_ids: frozenset[int] = frozenset()

    @property
    def is_scoped(self) -> bool:
        return self.role != EmployeeRole.ADMIN

    def can_manage_site(self, site_id: Optional[int]) -> bool:
        if not self.is_scoped:
            return True
        return site_id is not None and site_id in self.manageable_site_ids


@dataclass(frozen=True)
class GuardViolation:
    """A pre-flight rejection. No remote call was made."""

    code: GuardCode
    message: str
    site_ids: tuple[int, ...] = ()
    employee_ids: tuple[int, ...] = ()

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "site_ids": list(self.site_ids),
            "employee_ids": list(self.employee_ids),
        }


@dataclass(frozen=True)
class AssignmentDelta:
    """Minimal add/remove difference between two assignment sets.

    Both tuples keep the insertion order of the set they were taken from;
    the apply executor issues calls in exactly that order.
    """

    to_add: tuple[int, ...] = ()
    to_remove: tuple[int, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove

    def to_dict(self) -> dict:
        return {"to_add": list(self.to_add), "to_remove": list(self.to_remove)}


@dataclass
class ApplyResult:
    """Result of applying a delta to one manager's assignments.

    On success ``assigned_site_ids`` is the freshly re-fetched canonical set.
    On failure it is None: the caller's cache must not be updated, and
    ``added``/``removed`` show which calls took effect before the stop.
    """

    success: bool
    state: ApplyState
    manager_id: int
    delta: AssignmentDelta
    assigned_site_ids: Optional[list[int]] = None
    added: list[int] = field(default_factory=list)
    removed: list[int] = field(default_factory=list)
    violation: Optional[GuardViolation] = None
    error: Optional[Exception] = None
    failed_site_id: Optional[int] = None
    message: str = ""

    @property
    def no_changes(self) -> bool:
        return self.success and self.delta.is_empty

    def to_dict(self) -> dict:
        """Convert to dictionary for output."""
        return {
            "success": self.success,
            "state": self.state.value,
            "manager_id": self.manager_id,
            "delta": self.delta.to_dict(),
            "assigned_site_ids": self.assigned_site_ids,
            "added": self.added,
            "removed": self.removed,
            "violation": self.violation.to_dict() if self.violation else None,
            "failed_site_id": self.failed_site_id,
            "message": self.message,
        }


@dataclass(frozen=True)
class RelocationRequest:
    """Move ``selection`` to ``target_site_id``. Order of the selection is kept."""

    selection: tuple[int, ...]
    target_site_id: int

    def __post_init__(self):
        # Drop duplicates, keep first occurrence
        object.__setattr__(self, "selection", tuple(dict.fromkeys(self.selection)))


@dataclass(frozen=True)
class RelocationFailure:
    """One employee that could not be moved."""

    id: int
    reason: str


@dataclass
class RelocationOutcome:
    """Result of a bulk relocation.

    Once guards pass, every selected id ends up in exactly one of
    ``succeeded`` or ``failed``. When a guard rejects the batch, both lists
    are empty and ``violation`` says why.
    """

    target_site_id: int
    succeeded: list[int] = field(default_factory=list)
    failed: list[RelocationFailure] = field(default_factory=list)
    attempted: list[int] = field(default_factory=list)
    updated: dict[int, Employee] = field(default_factory=dict)
    violation: Optional[GuardViolation] = None

    @property
    def rejected(self) -> bool:
        return self.violation is not None

    @property
    def is_partial(self) -> bool:
        return bool(self.succeeded) and bool(self.failed)

    @property
    def success(self) -> bool:
        return not self.rejected and not self.failed

    def summary(self, limit: int = 5) -> str:
        """One-line report: success count, and the first failing ids."""
        if self.violation:
            return self.violation.message
        if not self.failed:
            return f"Moved {len(self.succeeded)} employee(s) to site #{self.target_site_id}."

        ids = ", ".join(f"#{f.id}" for f in self.failed[:limit])
        more = f" and {len(self.failed) - limit} more" if len(self.failed) > limit else ""
        return f"Moved {len(self.succeeded)}, failed {len(self.failed)} ({ids}{more})."

    def to_dict(self) -> dict:
        """Convert to dictionary for output."""
        return {
            "target_site_id": self.target_site_id,
            "succeeded": self.succeeded,
            "failed": [{"id": f.id, "reason": f.reason} for f in self.failed],
            "updated": [e.to_dict() for e in self.updated.values()],
            "violation": self.violation.to_dict() if self.violation else None,
            "summary": self.summary(),
        }


class BusyError(RuntimeError):
    """Raised by BusyGuard.hold when the key is already held."""


class BusyGuard:
    """Caller-owned token that prevents overlapping runs on the same entity.

    The caller creates one guard and passes it to every executor call. An
    executor holds its key for the whole run; a second call with the same
    key is rejected before any remote call is made.
    """

    def __init__(self):
        self._held: set[Hashable] = set()

    def is_busy(self, key: Hashable) -> bool:
        return key in self._held

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        if key in self._held:
            raise BusyError(f"Operation already in progress: {key!r}")
        self._held.add(key)
        try:
            yield
        finally:
            self._held.discard(key)
