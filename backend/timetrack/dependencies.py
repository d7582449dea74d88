from collections.abc import AsyncGenerator, Mapping
from typing import Final

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .auth.context import build_auth_context
from .auth.impersonation import ImpersonationContext, start_impersonation
from .auth.rbac_contract import parse_role
from .auth.types import AuthContext, Identity
from .config import get_settings
from .crud.employee import EmployeeRepository
from .database import get_session
from .domain.ports.employee_lookup import EmployeeLookup
from .errors import ValidationError

TEST_ROLE_HEADER: Final[str] = "x-test-role"


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


def get_employee_lookup(db: AsyncSession = Depends(get_db)) -> EmployeeLookup:
    return EmployeeRepository(db)


def get_admin_subjects() -> frozenset[str]:
    return get_settings().admin_subjects


def get_identity(request: Request) -> Identity | None:
    """Identity placed on ``request.state`` by the upstream authentication layer."""
    identity = getattr(request.state, "identity", None)
    if identity is None or isinstance(identity, Identity):
        return identity
    if isinstance(identity, Mapping):
        return Identity.from_claims(identity)
    return None


async def get_auth_context(
    identity: Identity | None = Depends(get_identity),
    lookup: EmployeeLookup = Depends(get_employee_lookup),
    admin_subjects: frozenset[str] = Depends(get_admin_subjects),
) -> AuthContext | None:
    # Built fresh for every request; FastAPI caches it within the request only
    return await build_auth_context(identity, lookup, admin_subjects)


def get_impersonation(
    request: Request,
    context: AuthContext | None = Depends(get_auth_context),
) -> ImpersonationContext | None:
    raw_role = request.headers.get(TEST_ROLE_HEADER)
    if context is None or not raw_role:
        return None
    role = parse_role(raw_role)
    if role is None:
        raise ValidationError("Invalid test role", details={"role": raw_role})
    return start_impersonation(context, role)


def get_effective_auth_context(
    context: AuthContext | None = Depends(get_auth_context),
    impersonation: ImpersonationContext | None = Depends(get_impersonation),
) -> AuthContext | None:
    if impersonation is not None:
        return impersonation.effective
    return context
