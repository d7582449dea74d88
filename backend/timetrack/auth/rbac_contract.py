"""
RBAC Contract - the single role-to-permission table for the time tracker.

Every capability decision in the application is derived from this module:
- Role and Permission are closed enumerations
- Each role maps to an explicit, immutable permission set
- No per-user overrides; ``system_admin`` satisfies every check (see permissions.py)

The table is validated at import time. A broken mapping fails fast instead of
silently granting or withholding access at request time.
"""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping


# ============================================================================
# ROLES
# ============================================================================

class Role(str, Enum):
    """Roles a subject can hold for the duration of a request."""
    ADMIN = "admin"
    MANAGER = "manager"
    PROJECT_MANAGER = "project_manager"
    EMPLOYEE = "employee"
    VIEWER = "viewer"


DEFAULT_ROLE: Final[Role] = Role.EMPLOYEE


# ============================================================================
# PERMISSIONS
# ============================================================================

class Permission(str, Enum):
    # Project
    CREATE_PROJECT = "create_project"
    UPDATE_PROJECT = "update_project"
    DELETE_PROJECT = "delete_project"
    VIEW_PROJECT = "view_project"
    ASSIGN_PROJECT = "assign_project"

    # Time entry
    CREATE_TIME_ENTRY = "create_time_entry"
    UPDATE_TIME_ENTRY = "update_time_entry"
    DELETE_TIME_ENTRY = "delete_time_entry"
    VIEW_TIME_ENTRY = "view_time_entry"
    VIEW_ALL_TIME_ENTRIES = "view_all_time_entries"

    # Employee
    CREATE_EMPLOYEE = "create_employee"
    UPDATE_EMPLOYEE = "update_employee"
    DELETE_EMPLOYEE = "delete_employee"
    VIEW_EMPLOYEE = "view_employee"
    MANAGE_EMPLOYEE_ASSIGNMENTS = "manage_employee_assignments"

    # Department
    CREATE_DEPARTMENT = "create_department"
    UPDATE_DEPARTMENT = "update_department"
    DELETE_DEPARTMENT = "delete_department"
    VIEW_DEPARTMENT = "view_department"
    MANAGE_DEPARTMENT = "manage_department"

    # Organization
    CREATE_ORGANIZATION = "create_organization"
    UPDATE_ORGANIZATION = "update_organization"
    DELETE_ORGANIZATION = "delete_organization"
    VIEW_ORGANIZATION = "view_organization"

    # Reporting
    VIEW_DASHBOARD = "view_dashboard"
    VIEW_REPORTS = "view_reports"
    VIEW_ANALYTICS = "view_analytics"
    EXPORT_DATA = "export_data"

    # System
    MANAGE_USERS = "manage_users"
    MANAGE_ROLES = "manage_roles"
    SYSTEM_ADMIN = "system_admin"


PROJECT_PERMISSIONS: Final[frozenset[Permission]] = frozenset({
    Permission.CREATE_PROJECT,
    Permission.UPDATE_PROJECT,
    Permission.DELETE_PROJECT,
    Permission.VIEW_PROJECT,
    Permission.ASSIGN_PROJECT,
})

TIME_ENTRY_PERMISSIONS: Final[frozenset[Permission]] = frozenset({
    Permission.CREATE_TIME_ENTRY,
    Permission.UPDATE_TIME_ENTRY,
    Permission.DELETE_TIME_ENTRY,
    Permission.VIEW_TIME_ENTRY,
    Permission.VIEW_ALL_TIME_ENTRIES,
})

EMPLOYEE_PERMISSIONS: Final[frozenset[Permission]] = frozenset({
    Permission.CREATE_EMPLOYEE,
    Permission.UPDATE_EMPLOYEE,
    Permission.DELETE_EMPLOYEE,
    Permission.VIEW_EMPLOYEE,
    Permission.MANAGE_EMPLOYEE_ASSIGNMENTS,
})

DEPARTMENT_PERMISSIONS: Final[frozenset[Permission]] = frozenset({
    Permission.CREATE_DEPARTMENT,
    Permission.UPDATE_DEPARTMENT,
    Permission.DELETE_DEPARTMENT,
    Permission.VIEW_DEPARTMENT,
    Permission.MANAGE_DEPARTMENT,
})

ORGANIZATION_PERMISSIONS: Final[frozenset[Permission]] = frozenset({
    Permission.CREATE_ORGANIZATION,
    Permission.UPDATE_ORGANIZATION,
    Permission.DELETE_ORGANIZATION,
    Permission.VIEW_ORGANIZATION,
})

REPORTING_PERMISSIONS: Final[frozenset[Permission]] = frozenset({
    Permission.VIEW_DASHBOARD,
    Permission.VIEW_REPORTS,
    Permission.VIEW_ANALYTICS,
    Permission.EXPORT_DATA,
})

SYSTEM_PERMISSIONS: Final[frozenset[Permission]] = frozenset({
    Permission.MANAGE_USERS,
    Permission.MANAGE_ROLES,
    Permission.SYSTEM_ADMIN,
})

ALL_PERMISSIONS: Final[frozenset[Permission]] = (
    PROJECT_PERMISSIONS
    | TIME_ENTRY_PERMISSIONS
    | EMPLOYEE_PERMISSIONS
    | DEPARTMENT_PERMISSIONS
    | ORGANIZATION_PERMISSIONS
    | REPORTING_PERMISSIONS
    | SYSTEM_PERMISSIONS
)

# Permissions that mutate data; viewers must never hold any of these
WRITE_PERMISSIONS: Final[frozenset[Permission]] = frozenset(
    permission
    for permission in ALL_PERMISSIONS
    if permission.value.split("_", 1)[0] in {"create", "update", "delete", "manage", "assign"}
)


# ============================================================================
# ROLE-PERMISSION TABLE
# ============================================================================

ROLE_PERMISSION_MAPPINGS: Final[Mapping[Role, frozenset[Permission]]] = MappingProxyType({
    # Full system access
    Role.ADMIN: ALL_PERMISSIONS,

    Role.MANAGER: frozenset({
        # Department and employees (own department, narrowed in resource_access)
        Permission.VIEW_DEPARTMENT,
        Permission.MANAGE_DEPARTMENT,
        Permission.CREATE_EMPLOYEE,
        Permission.UPDATE_EMPLOYEE,
        Permission.VIEW_EMPLOYEE,
        Permission.MANAGE_EMPLOYEE_ASSIGNMENTS,
        # Projects, no delete
        Permission.CREATE_PROJECT,
        Permission.UPDATE_PROJECT,
        Permission.VIEW_PROJECT,
        Permission.ASSIGN_PROJECT,
        # Time entries
        *TIME_ENTRY_PERMISSIONS,
        # Reporting
        *REPORTING_PERMISSIONS,
    }),

    Role.PROJECT_MANAGER: frozenset({
        Permission.CREATE_PROJECT,
        Permission.UPDATE_PROJECT,
        Permission.VIEW_PROJECT,
        Permission.ASSIGN_PROJECT,
        Permission.CREATE_TIME_ENTRY,
        Permission.UPDATE_TIME_ENTRY,
        Permission.DELETE_TIME_ENTRY,
        Permission.VIEW_TIME_ENTRY,
        Permission.VIEW_DASHBOARD,
        Permission.VIEW_REPORTS,
        Permission.VIEW_ANALYTICS,
    }),

    Role.EMPLOYEE: frozenset({
        Permission.VIEW_PROJECT,
        # Own time entries
        Permission.CREATE_TIME_ENTRY,
        Permission.UPDATE_TIME_ENTRY,
        Permission.DELETE_TIME_ENTRY,
        Permission.VIEW_TIME_ENTRY,
        Permission.VIEW_DASHBOARD,
    }),

    # Read-only
    Role.VIEWER: frozenset({
        Permission.VIEW_PROJECT,
        Permission.VIEW_TIME_ENTRY,
        Permission.VIEW_DASHBOARD,
    }),
})


def parse_role(value: Role | str | None) -> Role | None:
    """Strictly parse a role value, returning None for anything unknown."""
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Role(value.strip().lower())
    except ValueError:
        return None


def permissions_for(role: Role | str | None) -> frozenset[Permission]:
    """
    Return the permission set for a role.

    Unknown or missing roles fall back to the employee set. This is a policy
    decision, not an error.
    """
    resolved = parse_role(role) or DEFAULT_ROLE
    return ROLE_PERMISSION_MAPPINGS[resolved]


# ============================================================================
# CONTRACT VALIDATION - FAIL-FAST
# ============================================================================

def _validate_contract() -> None:
    """Validate the role-permission table at module import time."""
    errors = []

    for role in Role:
        if role not in ROLE_PERMISSION_MAPPINGS:
            errors.append(f"Role '{role.value}' has no permission mapping")

    for role, permissions in ROLE_PERMISSION_MAPPINGS.items():
        unknown = permissions - ALL_PERMISSIONS
        if unknown:
            errors.append(f"Role '{role.value}' has unknown permissions: {sorted(unknown)}")

        if role is not Role.ADMIN:
            system_perms = permissions & SYSTEM_PERMISSIONS
            if system_perms:
                errors.append(
                    f"SECURITY VIOLATION: Role '{role.value}' has system permissions: "
                    f"{sorted(p.value for p in system_perms)}"
                )

    viewer_writes = ROLE_PERMISSION_MAPPINGS.get(Role.VIEWER, frozenset()) & WRITE_PERMISSIONS
    if viewer_writes:
        errors.append(
            f"Role 'viewer' must be read-only, found: {sorted(p.value for p in viewer_writes)}"
        )

    if errors:
        raise RuntimeError(
            "RBAC Contract validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )


# Run validation on import
_validate_contract()
