from fastapi import APIRouter, Depends

from ..auth.dependencies import require_permissions
from ..auth.impersonation import ImpersonationContext
from ..auth.rbac_contract import ROLE_PERMISSION_MAPPINGS, Permission
from ..auth.types import AuthContext
from ..dependencies import get_impersonation
from ..schemas.auth import AuthContextRead, RolePermissionsRead

router = APIRouter(prefix="/auth", tags=["auth"])


def _sorted_permissions(permissions: frozenset[Permission]) -> list[Permission]:
    return sorted(permissions, key=lambda permission: permission.value)


@router.get("/context", response_model=AuthContextRead)
async def read_auth_context(
    context: AuthContext = Depends(require_permissions()),
    impersonation: ImpersonationContext | None = Depends(get_impersonation),
) -> AuthContextRead:
    return AuthContextRead(
        subject=context.subject_id,
        role=context.role,
        permissions=_sorted_permissions(context.permissions),
        department_id=context.department_id,
        organization_id=context.organization_id,
        testing=impersonation is not None,
        original_role=impersonation.original.role if impersonation else None,
    )


@router.get("/roles", response_model=list[RolePermissionsRead])
async def list_role_permissions(
    _: AuthContext = Depends(require_permissions(Permission.MANAGE_ROLES)),
) -> list[RolePermissionsRead]:
    return [
        RolePermissionsRead(role=role, permissions=_sorted_permissions(permissions))
        for role, permissions in ROLE_PERMISSION_MAPPINGS.items()
    ]
