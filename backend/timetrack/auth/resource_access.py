"""
Resource-scoped access checks.

Per-resource narrowing happens ONLY through the two enumerations below.
Every other permission is governed by the role table alone.

Order of evaluation (first match wins):
1. system_admin -> allow
2. base permission missing -> deny
3. ownership-restricted permission -> allow iff subject owns the resource
4. department-restricted permission -> allow iff both department ids are
   known and equal (missing ids deny)
5. allow
"""
from __future__ import annotations

from typing import AbstractSet, Final

from .permissions import has_permission
from .rbac_contract import Permission
from .types import AuthorizationResult

OWNERSHIP_RESTRICTED_PERMISSIONS: Final[frozenset[Permission]] = frozenset({
    Permission.UPDATE_TIME_ENTRY,
    Permission.DELETE_TIME_ENTRY,
})

DEPARTMENT_RESTRICTED_PERMISSIONS: Final[frozenset[Permission]] = frozenset({
    Permission.VIEW_ALL_TIME_ENTRIES,
    Permission.MANAGE_EMPLOYEE_ASSIGNMENTS,
})


def check_resource_access(
    granted: AbstractSet[Permission],
    subject_id: str | None,
    resource_owner_id: str | None,
    required: Permission,
    resource_department_id: str | None = None,
    subject_department_id: str | None = None,
) -> AuthorizationResult:
    if Permission.SYSTEM_ADMIN in granted:
        return AuthorizationResult.allow()

    if not has_permission(granted, required):
        return AuthorizationResult.deny("missing base permission", (required,))

    if required in OWNERSHIP_RESTRICTED_PERMISSIONS:
        if subject_id is None or subject_id != resource_owner_id:
            return AuthorizationResult.deny("not resource owner")
        return AuthorizationResult.allow()

    if required in DEPARTMENT_RESTRICTED_PERMISSIONS:
        if not resource_department_id or not subject_department_id:
            return AuthorizationResult.deny("department unknown")
        if resource_department_id != subject_department_id:
            return AuthorizationResult.deny("department mismatch")
        return AuthorizationResult.allow()

    return AuthorizationResult.allow()


def can_access_resource(
    granted: AbstractSet[Permission],
    subject_id: str | None,
    resource_owner_id: str | None,
    required: Permission,
    resource_department_id: str | None = None,
    subject_department_id: str | None = None,
) -> bool:
    return check_resource_access(
        granted,
        subject_id,
        resource_owner_id,
        required,
        resource_department_id,
        subject_department_id,
    ).authorized
