"""Port interfaces for assignment and relocation.

These are abstract interfaces (ports) for the remote mutation interface the
executors drive. Concrete implementations (adapters) live in the adapters
module.

This follows the Hexagonal Architecture pattern.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .entities import Employee, Site


class IManagerAssignmentPort(ABC):
    """Port for a manager's site assignments.

    Every method raises on failure; executors decide whether a failure stops
    the run.
    """

    @abstractmethod
    async def add_assignment(self, manager_id: int, site_id: int) -> None:
        """Assign a site to a manager.

        Raises:
            AdminConsoleError: If the platform rejects the call or it fails
        """
        ...

    @abstractmethod
    async def remove_assignment(self, manager_id: int, site_id: int) -> None:
        """Remove a site from a manager.

        Raises:
            AdminConsoleError: If the platform rejects the call or it fails
        """
        ...

    @abstractmethod
    async def list_assignments(self, manager_id: int) -> list[int]:
        """Fetch the canonical list of site ids assigned to a manager."""
        ...


class IEmployeePort(ABC):
    """Port for employee mutations."""

    @abstractmethod
    async def update_employee(
        self,
        employee_id: int,
        *,
        active: Optional[bool] = None,
        site_id: Optional[int] = None,
        username: Optional[str] = None,
    ) -> Optional[Employee]:
        """Partially update an employee and return the stored record.

        Returns None when the update succeeded but the platform sent back
        no usable employee record.

        Raises:
            AdminConsoleError: If the platform rejects the call or it fails
        """
        ...


class IDirectoryPort(ABC):
    """Read-only port used to build site and employee catalogs."""

    @abstractmethod
    async def list_sites(self) -> list[Site]:
        """List sites visible to the caller."""
        ...

    @abstractmethod
    async def list_employees(self) -> list[Employee]:
        """List employees visible to the caller."""
        ...
