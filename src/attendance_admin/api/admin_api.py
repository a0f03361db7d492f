#!/usr/bin/env python3
"""Admin resource operations for the Attendance Platform API.

This module provides the AdminApi class: one method per platform endpoint
the admin console uses. It works with raw JSON (camelCase dicts); mapping to
domain entities happens in the adapters that compose it.

Endpoints:
    Sites:
        GET    /api/admin/sites
    Employees:
        GET    /api/admin/employees
        PATCH  /api/admin/employees/{userId}
    Manager <-> Site assignments:
        POST   /api/admin/manager-site-assignments
        DELETE /api/admin/manager-site-assignments?managerUserId=&siteId=
        GET    /api/admin/manager-site-assignments/managers/{managerUserId}/sites
    Correction requests:
        GET    /api/correction-requests/{requestId}?scope=

Example:
    async with AdminApiClient() as client:
        api = AdminApi(client)
        site_ids = await api.list_manager_sites(7)
        await api.assign_manager_site(7, 3)
"""
import logging
from typing import Any, Optional

from .client import AdminApiClient

logger = logging.getLogger(__name__)


class AdminApi:
    """Admin console endpoints of the attendance platform.

    Attributes:
        client: AdminApiClient instance for API communication
    """

    SITES_ENDPOINT = "/api/admin/sites"
    EMPLOYEES_ENDPOINT = "/api/admin/employees"
    ASSIGNMENTS_ENDPOINT = "/api/admin/manager-site-assignments"
    CORRECTIONS_ENDPOINT = "/api/correction-requests"

    def __init__(self, client: AdminApiClient):
        self.client = client

    # ----------------------------------------
    # Sites
    # ----------------------------------------

    async def list_sites(self) -> list[dict[str, Any]]:
        """List sites visible to the caller.

        For a manager the platform only returns the sites they manage, so
        this list doubles as the manager's scope.
        """
        return await self.client.get(self.SITES_ENDPOINT) or []

    # ----------------------------------------
    # Employees
    # ----------------------------------------

    async def list_employees(self) -> list[dict[str, Any]]:
        """List employees visible to the caller."""
        return await self.client.get(self.EMPLOYEES_ENDPOINT) or []

    async def update_employee(
        self,
        user_id: int,
        *,
        active: Optional[bool] = None,
        site_id: Optional[int] = None,
        username: Optional[str] = None,
    ) -> dict[str, Any]:
        """Partially update an employee.

        Fields left as None are sent as null, which the platform treats as
        "unchanged".

        Returns:
            The updated employee record
        """
        body = {"active": active, "siteId": site_id, "username": username}
        logger.debug(f"PATCH employee {user_id}: {sorted(k for k, v in body.items() if v is not None)}")
        return await self.client.patch(f"{self.EMPLOYEES_ENDPOINT}/{user_id}", json_body=body)

    # ----------------------------------------
    # Manager <-> Site assignments
    # ----------------------------------------

    async def assign_manager_site(self, manager_user_id: int, site_id: int) -> None:
        """Assign a site to a manager (idempotent on the server)."""
        await self.client.post(
            self.ASSIGNMENTS_ENDPOINT,
            json_body={"managerUserId": manager_user_id, "siteId": site_id},
        )

    async def remove_manager_site(self, manager_user_id: int, site_id: int) -> None:
        """Remove a site from a manager's assignments."""
        await self.client.delete(
            self.ASSIGNMENTS_ENDPOINT,
            params={"managerUserId": str(manager_user_id), "siteId": str(site_id)},
        )

    async def list_manager_sites(self, manager_user_id: int) -> list[int]:
        """List the site ids currently assigned to a manager."""
        data = await self.client.get(
            f"{self.ASSIGNMENTS_ENDPOINT}/managers/{manager_user_id}/sites"
        )
        return list(data or [])

    # ----------------------------------------
    # Correction requests
    # ----------------------------------------

    async def get_correction_request(
        self,
        request_id: int,
        scope: str = "requested_by_me",
    ) -> dict[str, Any]:
        """Read one correction request as seen through the given scope.

        Args:
            request_id: Correction request id
            scope: "requested_by_me" or "approvable"
        """
        return await self.client.get(
            f"{self.CORRECTIONS_ENDPOINT}/{request_id}",
            params={"scope": scope},
        ) or {}
