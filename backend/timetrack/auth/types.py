from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .rbac_contract import Permission, Role, permissions_for


@dataclass(frozen=True, slots=True)
class Identity:
    """Authenticated subject handed over by the SAML/session layer."""

    subject: str | None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any] | None) -> "Identity":
        claims = claims or {}
        subject = claims.get("sub")
        if subject is not None:
            subject = str(subject).strip() or None
        return cls(
            subject=subject,
            email=claims.get("email"),
            first_name=claims.get("first_name"),
            last_name=claims.get("last_name"),
        )


@dataclass(frozen=True, slots=True)
class AuthContext:
    """
    Resolved authorization state for one request.

    Built once by ``build_auth_context`` and threaded explicitly through
    guards. Never cached, never shared between subjects, never mutated.
    ``permissions`` is read from the role table for ``role`` and cannot be
    supplied by the caller.
    """

    identity: Identity
    role: Role
    department_id: str | None = None
    organization_id: str | None = None

    @classmethod
    def for_role(
        cls,
        identity: Identity,
        role: Role,
        *,
        department_id: str | None = None,
        organization_id: str | None = None,
    ) -> "AuthContext":
        return cls(
            identity=identity,
            role=role,
            department_id=department_id,
            organization_id=organization_id,
        )

    @property
    def permissions(self) -> frozenset[Permission]:
        return permissions_for(self.role)

    @property
    def subject_id(self) -> str | None:
        return self.identity.subject


@dataclass(frozen=True, slots=True)
class AuthorizationResult:
    authorized: bool
    reason: str | None = None
    missing_permissions: tuple[Permission, ...] = field(default_factory=tuple)

    @classmethod
    def allow(cls) -> "AuthorizationResult":
        return cls(authorized=True)

    @classmethod
    def deny(
        cls, reason: str, missing: tuple[Permission, ...] | list[Permission] = ()
    ) -> "AuthorizationResult":
        return cls(authorized=False, reason=reason, missing_permissions=tuple(missing))
