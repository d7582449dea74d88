"""
Authorization dependencies - FastAPI enforcement of the request guards.

Usage:
    @router.post("/projects")
    async def create_project(
        context: AuthContext = Depends(require_permissions(Permission.CREATE_PROJECT)),
    ):
        ...

Each dependency evaluates a guard against the request's effective
AuthContext. Denials are logged and raised as AppError subclasses:
- AUTH_REQUIRED -> AuthError (401)
- any other code -> PermissionError (403) carrying the denial code
On success the dependency returns the AuthContext the guard approved.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import Depends, Request

from ..dependencies import get_effective_auth_context
from ..errors import AppError, AuthError, PermissionError
from .guards import (
    DenialCode,
    Guard,
    GuardDecision,
    RequestValueGetter,
    department_gate,
    organization_gate,
    permission_gate,
    resource_gate,
    role_gate,
)
from .rbac_contract import Permission, Role
from .types import AuthContext

logger = logging.getLogger("timetrack.auth")


def _log_deny(request: Request, context: AuthContext | None, decision: GuardDecision) -> None:
    logger.warning(
        "authorization_denied code=%s method=%s path=%s subject=%s role=%s missing=%s",
        decision.code.value if decision.code else None,
        request.method,
        request.url.path,
        context.subject_id if context else None,
        context.role.value if context else None,
        ",".join(p.value for p in decision.missing_permissions) or "-",
    )


def denial_error(decision: GuardDecision) -> AppError:
    if decision.code is DenialCode.AUTH_REQUIRED:
        return AuthError(decision.reason)
    return PermissionError(
        decision.reason,
        code=decision.code.value if decision.code else None,
        required_permissions=[p.value for p in decision.missing_permissions],
    )


def enforce(guard: Guard) -> Callable[..., Awaitable[AuthContext]]:
    async def dependency(
        request: Request,
        context: AuthContext | None = Depends(get_effective_auth_context),
    ) -> AuthContext:
        decision = guard(request, context)
        if not decision.allowed:
            _log_deny(request, context, decision)
            raise denial_error(decision)
        assert context is not None
        return context

    return dependency


def require_permissions(*permissions: Permission) -> Callable[..., Awaitable[AuthContext]]:
    return enforce(permission_gate(*permissions))


def require_resource_access(
    permission: Permission,
    owner_id_getter: RequestValueGetter | None = None,
    department_id_getter: RequestValueGetter | None = None,
) -> Callable[..., Awaitable[AuthContext]]:
    return enforce(resource_gate(permission, owner_id_getter, department_id_getter))


def require_role(*roles: Role) -> Callable[..., Awaitable[AuthContext]]:
    return enforce(role_gate(*roles))


def require_department_access() -> Callable[..., Awaitable[AuthContext]]:
    return enforce(department_gate())


def require_organization_access() -> Callable[..., Awaitable[AuthContext]]:
    return enforce(organization_gate())
