"""
Request-pipeline guards.

Each guard is a synchronous, side-effect-free function of
``(request, AuthContext | None)`` returning a GuardDecision. Guards never
raise for policy outcomes; the FastAPI layer (dependencies.py) turns denials
into HTTP errors.

Usage:
    guard = permission_gate(Permission.CREATE_PROJECT)
    decision = guard(request, context)
    if not decision.allowed:
        ...
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Final

from fastapi import status

from .permissions import missing_permissions
from .rbac_contract import Permission, Role
from .resource_access import check_resource_access
from .types import AuthContext

logger = logging.getLogger("timetrack.auth")


class DenialCode(str, Enum):
    AUTH_REQUIRED = "AUTH_REQUIRED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    RESOURCE_ACCESS_DENIED = "RESOURCE_ACCESS_DENIED"
    ROLE_NOT_AUTHORIZED = "ROLE_NOT_AUTHORIZED"
    NO_DEPARTMENT_ACCESS = "NO_DEPARTMENT_ACCESS"
    NO_ORGANIZATION_ACCESS = "NO_ORGANIZATION_ACCESS"


DENIAL_MESSAGES: Final[dict[DenialCode, str]] = {
    DenialCode.AUTH_REQUIRED: "Authentication required",
    DenialCode.INSUFFICIENT_PERMISSIONS: "Insufficient permissions",
    DenialCode.RESOURCE_ACCESS_DENIED: "Access denied to this resource",
    DenialCode.ROLE_NOT_AUTHORIZED: "Role not authorized",
    DenialCode.NO_DEPARTMENT_ACCESS: "No department assignment found",
    DenialCode.NO_ORGANIZATION_ACCESS: "No organization access found",
}


@dataclass(frozen=True, slots=True)
class GuardDecision:
    allowed: bool
    code: DenialCode | None = None
    reason: str | None = None
    missing_permissions: tuple[Permission, ...] = field(default_factory=tuple)

    @classmethod
    def deny(
        cls,
        code: DenialCode,
        reason: str | None = None,
        missing: tuple[Permission, ...] | list[Permission] = (),
    ) -> "GuardDecision":
        return cls(
            allowed=False,
            code=code,
            reason=reason or DENIAL_MESSAGES[code],
            missing_permissions=tuple(missing),
        )

    @property
    def status_code(self) -> int:
        if self.allowed:
            return status.HTTP_200_OK
        if self.code is DenialCode.AUTH_REQUIRED:
            return status.HTTP_401_UNAUTHORIZED
        return status.HTTP_403_FORBIDDEN


ALLOW: Final[GuardDecision] = GuardDecision(allowed=True)

Guard = Callable[[Any, AuthContext | None], GuardDecision]
RequestValueGetter = Callable[[Any], str | None]


def _auth_required() -> GuardDecision:
    return GuardDecision.deny(DenialCode.AUTH_REQUIRED)


def permission_gate(*required: Permission) -> Guard:
    """Require ALL of the given permissions."""
    def guard(request: Any, context: AuthContext | None) -> GuardDecision:
        if context is None:
            return _auth_required()
        missing = missing_permissions(context.permissions, required)
        if missing:
            return GuardDecision.deny(DenialCode.INSUFFICIENT_PERMISSIONS, missing=missing)
        return ALLOW

    return guard


def resource_gate(
    required: Permission,
    owner_id_getter: RequestValueGetter | None = None,
    department_id_getter: RequestValueGetter | None = None,
) -> Guard:
    """
    Require ``required`` against the specific resource addressed by the request.

    Without an owner getter the resource is treated as the subject's own.
    Without a department getter the resource department is unknown, which
    denies department-restricted permissions. A getter that raises denies
    the request.
    """
    def guard(request: Any, context: AuthContext | None) -> GuardDecision:
        if context is None:
            return _auth_required()

        subject_id = context.subject_id
        try:
            if owner_id_getter is None:
                resource_owner_id = subject_id
            else:
                resource_owner_id = owner_id_getter(request)
            resource_department_id = (
                department_id_getter(request) if department_id_getter is not None else None
            )
        except Exception as exc:
            logger.warning(
                "resource_lookup_failed permission=%s subject=%s error=%r",
                required.value,
                subject_id,
                exc,
            )
            return GuardDecision.deny(
                DenialCode.RESOURCE_ACCESS_DENIED,
                reason=f"{DENIAL_MESSAGES[DenialCode.RESOURCE_ACCESS_DENIED]}: resource unknown",
                missing=(required,),
            )

        result = check_resource_access(
            context.permissions,
            subject_id,
            resource_owner_id,
            required,
            resource_department_id,
            context.department_id,
        )
        if not result.authorized:
            return GuardDecision.deny(
                DenialCode.RESOURCE_ACCESS_DENIED,
                reason=f"{DENIAL_MESSAGES[DenialCode.RESOURCE_ACCESS_DENIED]}: {result.reason}",
                missing=(required,),
            )
        return ALLOW

    return guard


def role_gate(*allowed_roles: Role) -> Guard:
    allowed = frozenset(allowed_roles)

    def guard(request: Any, context: AuthContext | None) -> GuardDecision:
        if context is None:
            return _auth_required()
        if context.role not in allowed:
            return GuardDecision.deny(DenialCode.ROLE_NOT_AUTHORIZED)
        return ALLOW

    return guard


def department_gate() -> Guard:
    def guard(request: Any, context: AuthContext | None) -> GuardDecision:
        if context is None:
            return _auth_required()
        # Admins can access any department
        if context.role is Role.ADMIN:
            return ALLOW
        if not context.department_id:
            return GuardDecision.deny(DenialCode.NO_DEPARTMENT_ACCESS)
        return ALLOW

    return guard


def organization_gate() -> Guard:
    def guard(request: Any, context: AuthContext | None) -> GuardDecision:
        if context is None:
            return _auth_required()
        # Admins can access any organization
        if context.role is Role.ADMIN:
            return ALLOW
        if not context.organization_id:
            return GuardDecision.deny(DenialCode.NO_ORGANIZATION_ACCESS)
        return ALLOW

    return guard


def run_guards(request: Any, context: AuthContext | None, *guards: Guard) -> GuardDecision:
    """Evaluate guards in order and return the first denial."""
    for guard in guards:
        decision = guard(request, context)
        if not decision.allowed:
            return decision
    return ALLOW
