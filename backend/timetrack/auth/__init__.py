"""Authorization core: role table, evaluators, context building and guards.

FastAPI enforcement lives in ``timetrack.auth.dependencies`` and is not
re-exported here.
"""
from .context import build_auth_context, check_authorization
from .guards import (
    ALLOW,
    DenialCode,
    GuardDecision,
    department_gate,
    organization_gate,
    permission_gate,
    resource_gate,
    role_gate,
    run_guards,
)
from .impersonation import ImpersonationContext, start_impersonation
from .permissions import (
    has_all_permissions,
    has_any_permission,
    has_permission,
    missing_permissions,
)
from .rbac_contract import Permission, Role, parse_role, permissions_for
from .resource_access import can_access_resource, check_resource_access
from .types import AuthContext, AuthorizationResult, Identity

__all__ = [
    "ALLOW",
    "AuthContext",
    "AuthorizationResult",
    "DenialCode",
    "GuardDecision",
    "Identity",
    "ImpersonationContext",
    "Permission",
    "Role",
    "build_auth_context",
    "can_access_resource",
    "check_authorization",
    "check_resource_access",
    "department_gate",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
    "missing_permissions",
    "organization_gate",
    "parse_role",
    "permission_gate",
    "permissions_for",
    "resource_gate",
    "role_gate",
    "run_guards",
    "start_impersonation",
]
