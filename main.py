#!/usr/bin/env python3
"""Attendance Platform Admin Console CLI.

This module provides a command-line interface for the administrative
operations of the attendance platform: reconciling a manager's assigned
sites, bulk-relocating employees to another site, and reading a
time-correction request in its canonical form.

Architecture:
    - Uses AdminApiClient as the shared HTTP layer for all API calls
    - AdminApiAdapter / AdminApiCorrectionReader expose AdminApi as ports
    - Use cases own ordering, guards and failure policy
    - One BusyGuard per process blocks overlapping runs

Environment Variables:
    - ATTENDANCE_API_BASE_URL: Platform base URL (required)
    - ATTENDANCE_API_TIMEOUT: Request timeout in seconds (default 30)
    - ATTENDANCE_API_MAX_RETRIES: Attempts for reads (default 3)
    - LOG_LEVEL: Logging level (default INFO)

Example Usage:
    $ python main.py assignments show 7
    $ python main.py assignments apply 7 --sites 1,2,3
    $ python main.py relocate --employees 11,12 --target 3
    $ python main.py correction 42 --scope approvable
"""
import argparse
import asyncio
import json
import logging
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Local imports
from src.attendance_admin.api import AdminApi, AdminApiClient, AdminConsoleError
from src.attendance_admin.assignment.adapters import AdminApiAdapter
from src.attendance_admin.assignment.domain import (
    ActorScope,
    BusyGuard,
    EmployeeRole,
    RelocationRequest,
    index_employees,
    index_sites,
)
from src.attendance_admin.assignment.use_cases import (
    ApplyAssignmentsUseCase,
    RelocateEmployeesUseCase,
)
from src.attendance_admin.corrections.adapters import AdminApiCorrectionReader
from src.attendance_admin.corrections.domain import CorrectionScope
from src.attendance_admin.corrections.use_cases import LoadCorrectionUseCase

logger = logging.getLogger("attendance_admin.main")

# CLI runs act as an administrator unless --as-manager is given
CLI_ADMIN_USER_ID = 0
CLI_ADMIN = ActorScope(user_id=CLI_ADMIN_USER_ID, role=EmployeeRole.ADMIN)


def parse_id_list(value: str) -> list[int]:
    """Parse a comma-separated id list ("1,2,3"). Empty input is an empty list."""
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated ids, got {value!r}")


def print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


async def show_assignments(api: AdminApi, manager_id: int) -> int:
    """Print a manager's assigned sites with their names and status."""
    adapter = AdminApiAdapter(api)
    use_case = ApplyAssignmentsUseCase(adapter)

    site_ids = await use_case.refresh(manager_id, CLI_ADMIN)
    catalog = index_sites(await adapter.list_sites())

    print(f"\nManager {manager_id} - {len(site_ids)} assigned site(s):\n")
    print(f"{'Site':<8} {'Name':<30} {'Status':<10}")
    print("-" * 50)
    for site_id in site_ids:
        site = catalog.get(site_id)
        name = site.name[:28] if site else "(unknown)"
        status = ("active" if site.active else "inactive") if site else "-"
        print(f"#{site_id:<7} {name:<30} {status:<10}")
    return 0


async def apply_assignments(
    api: AdminApi,
    manager_id: int,
    desired: list[int],
    busy: BusyGuard,
) -> int:
    """Reconcile a manager's assignments to ``desired``."""
    adapter = AdminApiAdapter(api)
    use_case = ApplyAssignmentsUseCase(adapter)

    current = await use_case.refresh(manager_id, CLI_ADMIN)
    catalog = index_sites(await adapter.list_sites())

    result = await use_case.apply_desired(
        manager_id, current, desired, catalog, CLI_ADMIN, busy=busy
    )
    print(result.message)
    print_json(result.to_dict())
    return 0 if result.success else 1


async def relocate(
    api: AdminApi,
    employee_ids: list[int],
    target_site_id: int,
    as_manager: int | None,
    busy: BusyGuard,
) -> int:
    """Move employees to a target site and print the outcome."""
    adapter = AdminApiAdapter(api)
    use_case = RelocateEmployeesUseCase(adapter)

    sites, employees = await asyncio.gather(adapter.list_sites(), adapter.list_employees())

    if as_manager is None:
        actor = CLI_ADMIN
    else:
        managed = await adapter.list_assignments(as_manager)
        actor = ActorScope(
            user_id=as_manager,
            role=EmployeeRole.MANAGER,
            manageable_site_ids=frozenset(managed),
        )

    outcome = await use_case.execute(
        RelocationRequest(selection=tuple(employee_ids), target_site_id=target_site_id),
        index_sites(sites),
        index_employees(employees),
        actor,
        busy=busy,
    )
    print(outcome.summary())
    for failure in outcome.failed:
        print(f"  #{failure.id}: {failure.reason}")
    print_json(outcome.to_dict())
    return 0 if outcome.success else 1


async def show_correction(api: AdminApi, request_id: int, scope: CorrectionScope) -> int:
    """Print a correction request in canonical form."""
    use_case = LoadCorrectionUseCase(AdminApiCorrectionReader(api))
    record = await use_case.execute(request_id, scope=scope)
    print_json(record.to_dict())
    return 0


async def run(args: argparse.Namespace) -> int:
    """Dispatch the parsed command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code
    """
    busy = BusyGuard()
    try:
        async with AdminApiClient() as client:
            api = AdminApi(client)

            if args.command == "assignments" and args.action == "show":
                return await show_assignments(api, args.manager_id)
            if args.command == "assignments" and args.action == "apply":
                return await apply_assignments(api, args.manager_id, args.sites, busy)
            if args.command == "relocate":
                return await relocate(api, args.employees, args.target, args.as_manager, busy)
            if args.command == "correction":
                return await show_correction(api, args.request_id, CorrectionScope(args.scope))

    except AdminConsoleError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    return 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Administrative operations for the attendance platform",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py assignments show 7                   # List manager 7's sites
  python main.py assignments apply 7 --sites 1,2,3    # Make manager 7's sites exactly 1,2,3
  python main.py relocate --employees 11,12 --target 3
  python main.py relocate --employees 11 --target 3 --as-manager 7
  python main.py correction 42 --scope approvable     # Read correction request 42
        """
    )
    commands = parser.add_subparsers(dest="command", required=True)

    # Manager site assignments
    assignments = commands.add_parser("assignments", help="Manager site assignments")
    actions = assignments.add_subparsers(dest="action", required=True)

    show = actions.add_parser("show", help="Show a manager's assigned sites")
    show.add_argument("manager_id", type=int, help="Manager user id")

    apply = actions.add_parser("apply", help="Reconcile a manager's assigned sites")
    apply.add_argument("manager_id", type=int, help="Manager user id")
    apply.add_argument(
        "--sites",
        type=parse_id_list,
        required=True,
        metavar="IDS",
        help="Desired site ids, comma-separated (empty string removes all)"
    )

    # Bulk relocation
    move = commands.add_parser("relocate", help="Move employees to another site")
    move.add_argument(
        "--employees",
        type=parse_id_list,
        required=True,
        metavar="IDS",
        help="Employee ids, comma-separated"
    )
    move.add_argument("--target", type=int, required=True, metavar="SITE", help="Target site id")
    move.add_argument(
        "--as-manager",
        type=int,
        metavar="ID",
        help="Act as this manager (scope limited to their assigned sites)"
    )

    # Correction requests
    correction = commands.add_parser("correction", help="Show a time-correction request")
    correction.add_argument("request_id", type=int, help="Correction request id")
    correction.add_argument(
        "--scope",
        choices=[s.value for s in CorrectionScope],
        default=CorrectionScope.REQUESTED_BY_ME.value,
        help="Read scope (default: requested_by_me)"
    )

    return parser


def main():
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    args = build_parser().parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
