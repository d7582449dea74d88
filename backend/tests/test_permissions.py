"""Tests for permission set predicates and the system_admin override."""
import pytest

from timetrack.auth.permissions import (
    has_all_permissions,
    has_any_permission,
    has_permission,
    missing_permissions,
)
from timetrack.auth.rbac_contract import Permission, Role, permissions_for

VIEWER = permissions_for(Role.VIEWER)
ADMIN_ONLY = frozenset({Permission.SYSTEM_ADMIN})


class TestHasPermission:
    @pytest.mark.parametrize("permission", list(Permission))
    def test_system_admin_satisfies_everything(self, permission):
        assert has_permission(ADMIN_ONLY, permission) is True

    @pytest.mark.parametrize("permission", list(Permission))
    def test_without_system_admin_membership_decides(self, permission):
        assert has_permission(VIEWER, permission) is (permission in VIEWER)

    def test_empty_set_grants_nothing(self):
        assert has_permission(frozenset(), Permission.VIEW_PROJECT) is False


class TestHasAnyAndAll:
    def test_any_matches_single_member(self):
        assert has_any_permission(VIEWER, [Permission.CREATE_PROJECT, Permission.VIEW_PROJECT])

    def test_any_rejects_when_none_match(self):
        assert not has_any_permission(VIEWER, [Permission.CREATE_PROJECT, Permission.EXPORT_DATA])

    def test_any_of_nothing_is_false(self):
        assert has_any_permission(VIEWER, []) is False

    def test_all_requires_every_member(self):
        assert has_all_permissions(VIEWER, [Permission.VIEW_PROJECT, Permission.VIEW_DASHBOARD])
        assert not has_all_permissions(VIEWER, [Permission.VIEW_PROJECT, Permission.EXPORT_DATA])

    def test_all_of_nothing_is_true(self):
        assert has_all_permissions(frozenset(), []) is True

    def test_system_admin_overrides_any_and_all(self):
        required = [Permission.DELETE_ORGANIZATION, Permission.MANAGE_ROLES]
        assert has_any_permission(ADMIN_ONLY, required)
        assert has_all_permissions(ADMIN_ONLY, required)

    def test_accepts_generators(self):
        assert has_all_permissions(VIEWER, (p for p in VIEWER))


class TestMissingPermissions:
    def test_reports_missing_in_order_without_duplicates(self):
        missing = missing_permissions(
            VIEWER,
            [
                Permission.EXPORT_DATA,
                Permission.VIEW_PROJECT,
                Permission.CREATE_TIME_ENTRY,
                Permission.EXPORT_DATA,
            ],
        )
        assert missing == [Permission.EXPORT_DATA, Permission.CREATE_TIME_ENTRY]

    def test_system_admin_misses_nothing(self):
        assert missing_permissions(ADMIN_ONLY, list(Permission)) == []
