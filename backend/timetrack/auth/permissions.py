"""Permission set predicates.

All checks go through ``has_permission`` so the ``system_admin`` override is
applied in exactly one place.
"""
from __future__ import annotations

from typing import AbstractSet, Iterable

from .rbac_contract import Permission


def has_permission(granted: AbstractSet[Permission], required: Permission) -> bool:
    if Permission.SYSTEM_ADMIN in granted:
        return True
    return required in granted


def has_any_permission(
    granted: AbstractSet[Permission], required: Iterable[Permission]
) -> bool:
    return any(has_permission(granted, permission) for permission in required)


def has_all_permissions(
    granted: AbstractSet[Permission], required: Iterable[Permission]
) -> bool:
    return all(has_permission(granted, permission) for permission in required)


def missing_permissions(
    granted: AbstractSet[Permission], required: Iterable[Permission]
) -> list[Permission]:
    """Return the required permissions not satisfied by ``granted``, in order."""
    missing: list[Permission] = []
    for permission in required:
        if not has_permission(granted, permission) and permission not in missing:
            missing.append(permission)
    return missing
