"""Infrastructure adapters for site assignment and relocation."""

from .admin_api_adapter import AdminApiAdapter, employee_from_raw, site_from_raw

__all__ = [
    "AdminApiAdapter",
    "employee_from_raw",
    "site_from_raw",
]
