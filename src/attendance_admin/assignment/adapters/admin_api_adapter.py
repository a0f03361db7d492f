"""Platform AdminApi adapter.

This adapter wraps AdminApi to implement the assignment ports. It converts
camelCase JSON to domain entities and lets platform errors propagate so the
executors can apply their own failure policy.
"""

import logging
from typing import Any, Optional

from ...api.admin_api import AdminApi
from ..domain.entities import Employee, EmployeeRole, Site
from ..domain.ports import IDirectoryPort, IEmployeePort, IManagerAssignmentPort

logger = logging.getLogger(__name__)


def site_from_raw(raw: dict[str, Any]) -> Site:
    """Map a ``{siteId, name, active}`` record to a Site."""
    return Site(
        id=int(raw["siteId"]),
        name=raw.get("name") or "",
        active=bool(raw.get("active", True)),
    )


def employee_from_raw(raw: dict[str, Any]) -> Employee:
    """Map a ``{userId, username, active, role, siteId}`` record to an Employee."""
    site_id = raw.get("siteId")
    try:
        role = EmployeeRole(raw.get("role") or EmployeeRole.EMPLOYEE.value)
    except ValueError:
        logger.warning(f"Unknown role {raw.get('role')!r} for user {raw.get('userId')}")
        role = EmployeeRole.EMPLOYEE
    return Employee(
        id=int(raw["userId"]),
        site_id=int(site_id) if site_id is not None else None,
        role=role,
        active=bool(raw.get("active", True)),
        username=raw.get("username"),
    )


class AdminApiAdapter(IManagerAssignmentPort, IEmployeePort, IDirectoryPort):
    """Adapter exposing AdminApi through the domain ports."""

    def __init__(self, admin_api: AdminApi):
        """Initialize with an existing AdminApi.

        Args:
            admin_api: Configured AdminApi instance
        """
        self.api = admin_api

    async def add_assignment(self, manager_id: int, site_id: int) -> None:
        await self.api.assign_manager_site(manager_id, site_id)

    async def remove_assignment(self, manager_id: int, site_id: int) -> None:
        await self.api.remove_manager_site(manager_id, site_id)

    async def list_assignments(self, manager_id: int) -> list[int]:
        return [int(s) for s in await self.api.list_manager_sites(manager_id)]

    async def update_employee(
        self,
        employee_id: int,
        *,
        active: Optional[bool] = None,
        site_id: Optional[int] = None,
        username: Optional[str] = None,
    ) -> Optional[Employee]:
        raw = await self.api.update_employee(
            employee_id,
            active=active,
            site_id=site_id,
            username=username,
        )
        # The PATCH already succeeded; a body we cannot map is not a failure
        if not isinstance(raw, dict):
            logger.warning(f"Update of employee {employee_id} returned no record")
            return None
        try:
            return employee_from_raw({**raw, "userId": raw.get("userId") or employee_id})
        except (TypeError, ValueError) as e:
            logger.warning(f"Could not map updated employee {employee_id}: {e}")
            return None

    async def list_sites(self) -> list[Site]:
        return [site_from_raw(r) for r in await self.api.list_sites()]

    async def list_employees(self) -> list[Employee]:
        return [employee_from_raw(r) for r in await self.api.list_employees()]
