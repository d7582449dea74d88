"""
Auth context resolution.

Turns an authenticated identity into an AuthContext by consulting the
employee/department lookup:

    identity -> employee -> department -> organization

Role resolution:
- employee (default)
- manager, if the employee is the registered manager of their own department
- admin, if the subject is in the admin allow-list (always wins)

Any lookup failure yields None (unauthenticated). The builder never falls
back to a default or elevated context.
"""
from __future__ import annotations

import logging
from typing import AbstractSet, Iterable

from ..domain.ports.employee_lookup import EmployeeLookup
from .permissions import missing_permissions
from .rbac_contract import DEFAULT_ROLE, Permission, Role
from .types import AuthContext, AuthorizationResult, Identity

logger = logging.getLogger("timetrack.auth")


async def build_auth_context(
    identity: Identity | None,
    lookup: EmployeeLookup,
    admin_subjects: AbstractSet[str] = frozenset(),
) -> AuthContext | None:
    if identity is None or not identity.subject:
        return None

    subject_id = identity.subject
    role = DEFAULT_ROLE
    department_id: str | None = None
    organization_id: str | None = None

    try:
        employee = await lookup.get_employee_by_identity(subject_id)
        if employee is not None:
            department_id = employee.department_id or None
            if department_id:
                department = await lookup.get_department(department_id)
                if department is not None:
                    organization_id = department.organization_id or None
                    if department.manager_id is not None and department.manager_id == employee.id:
                        role = Role.MANAGER
    except Exception as exc:
        logger.warning(
            "auth_context_lookup_failed subject=%s error=%s",
            subject_id,
            exc,
            exc_info=exc,
        )
        return None

    if subject_id in admin_subjects:
        role = Role.ADMIN

    logger.debug(
        "auth_context_built subject=%s role=%s department=%s organization=%s",
        subject_id,
        role.value,
        department_id,
        organization_id,
    )
    return AuthContext.for_role(
        identity,
        role,
        department_id=department_id,
        organization_id=organization_id,
    )


def check_authorization(
    context: AuthContext | None, required: Iterable[Permission]
) -> AuthorizationResult:
    """Check permissions without going through a guard."""
    if context is None:
        return AuthorizationResult.deny("Authentication required")

    missing = missing_permissions(context.permissions, list(required))
    if missing:
        return AuthorizationResult.deny("Insufficient permissions", missing)

    return AuthorizationResult.allow()
