"""
Role testing for administrators.

An admin may evaluate a request as another role. The real AuthContext is
wrapped, not modified, and nothing is written to persistence: the stored
account role is untouched and ``restore()`` hands back the original context.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import ImpersonationError
from .rbac_contract import Role
from .types import AuthContext

logger = logging.getLogger("timetrack.auth")


@dataclass(frozen=True, slots=True)
class ImpersonationContext:
    original: AuthContext
    role: Role

    @property
    def effective(self) -> AuthContext:
        return AuthContext.for_role(
            self.original.identity,
            self.role,
            department_id=self.original.department_id,
            organization_id=self.original.organization_id,
        )

    def restore(self) -> AuthContext:
        logger.info(
            "impersonation_restored subject=%s role=%s",
            self.original.subject_id,
            self.original.role.value,
        )
        return self.original


def start_impersonation(context: AuthContext, role: Role) -> ImpersonationContext:
    if context.role is not Role.ADMIN:
        raise ImpersonationError(
            "Only administrators can use role testing",
            details={"role": context.role.value},
        )
    logger.info(
        "impersonation_started subject=%s role=%s original_role=%s",
        context.subject_id,
        role.value,
        context.role.value,
    )
    return ImpersonationContext(original=context, role=role)
