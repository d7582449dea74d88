"""
Tests for the role-permission table.

The table is the single source of truth for every capability decision.
"""
import pytest

from timetrack.auth import rbac_contract
from timetrack.auth.permissions import has_all_permissions
from timetrack.auth.rbac_contract import Permission, Role


class TestRoleDefinitions:
    """Test the closed role and permission enumerations."""

    def test_roles_defined(self):
        """All roles used by the application are in one enumeration."""
        assert {role.value for role in Role} == {
            "admin",
            "manager",
            "project_manager",
            "employee",
            "viewer",
        }

    def test_permission_families_cover_all_permissions(self):
        """Every permission belongs to exactly one family."""
        families = [
            rbac_contract.PROJECT_PERMISSIONS,
            rbac_contract.TIME_ENTRY_PERMISSIONS,
            rbac_contract.EMPLOYEE_PERMISSIONS,
            rbac_contract.DEPARTMENT_PERMISSIONS,
            rbac_contract.ORGANIZATION_PERMISSIONS,
            rbac_contract.REPORTING_PERMISSIONS,
            rbac_contract.SYSTEM_PERMISSIONS,
        ]
        assert sum(len(family) for family in families) == len(Permission)
        assert rbac_contract.ALL_PERMISSIONS == frozenset(Permission)

    def test_every_role_has_mapping(self):
        for role in Role:
            assert role in rbac_contract.ROLE_PERMISSION_MAPPINGS


class TestRolePermissionMappings:
    """Test the contents of each role's permission set."""

    def test_admin_has_everything(self):
        assert rbac_contract.permissions_for(Role.ADMIN) == rbac_contract.ALL_PERMISSIONS
        assert Permission.SYSTEM_ADMIN in rbac_contract.permissions_for(Role.ADMIN)

    def test_manager_cannot_delete_projects(self):
        manager = rbac_contract.permissions_for(Role.MANAGER)
        assert Permission.DELETE_PROJECT not in manager
        assert Permission.CREATE_PROJECT in manager
        assert Permission.VIEW_ALL_TIME_ENTRIES in manager
        assert rbac_contract.REPORTING_PERMISSIONS <= manager

    def test_manager_has_no_system_permissions(self):
        manager = rbac_contract.permissions_for(Role.MANAGER)
        assert not manager & rbac_contract.SYSTEM_PERMISSIONS

    def test_project_manager_manages_projects_only(self):
        project_manager = rbac_contract.permissions_for(Role.PROJECT_MANAGER)
        assert Permission.CREATE_PROJECT in project_manager
        assert Permission.ASSIGN_PROJECT in project_manager
        assert Permission.DELETE_PROJECT not in project_manager
        assert Permission.MANAGE_EMPLOYEE_ASSIGNMENTS not in project_manager
        assert Permission.EXPORT_DATA not in project_manager

    def test_employee_permissions(self):
        assert rbac_contract.permissions_for(Role.EMPLOYEE) == frozenset({
            Permission.VIEW_PROJECT,
            Permission.CREATE_TIME_ENTRY,
            Permission.UPDATE_TIME_ENTRY,
            Permission.DELETE_TIME_ENTRY,
            Permission.VIEW_TIME_ENTRY,
            Permission.VIEW_DASHBOARD,
        })

    def test_viewer_is_read_only(self):
        viewer = rbac_contract.permissions_for(Role.VIEWER)
        assert viewer == frozenset({
            Permission.VIEW_PROJECT,
            Permission.VIEW_TIME_ENTRY,
            Permission.VIEW_DASHBOARD,
        })
        assert not viewer & rbac_contract.WRITE_PERMISSIONS

    def test_only_admin_holds_system_permissions(self):
        for role, permissions in rbac_contract.ROLE_PERMISSION_MAPPINGS.items():
            if role is Role.ADMIN:
                continue
            assert not permissions & rbac_contract.SYSTEM_PERMISSIONS, role

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            rbac_contract.ROLE_PERMISSION_MAPPINGS[Role.VIEWER] = frozenset()  # type: ignore[index]


class TestPermissionsFor:
    """Test table lookups."""

    @pytest.mark.parametrize("role", list(Role))
    def test_deterministic(self, role):
        assert rbac_contract.permissions_for(role) == rbac_contract.permissions_for(role)
        assert rbac_contract.permissions_for(role) is rbac_contract.permissions_for(role)

    @pytest.mark.parametrize("role", list(Role))
    def test_table_is_internally_consistent(self, role):
        permissions = rbac_contract.permissions_for(role)
        assert has_all_permissions(permissions, permissions)

    def test_accepts_role_string(self):
        assert rbac_contract.permissions_for("viewer") == rbac_contract.permissions_for(Role.VIEWER)

    @pytest.mark.parametrize("value", ["superuser", "", None, 42])
    def test_unknown_role_falls_back_to_employee(self, value):
        expected = rbac_contract.permissions_for(Role.EMPLOYEE)
        assert rbac_contract.permissions_for(value) == expected

    def test_parse_role(self):
        assert rbac_contract.parse_role("Manager") is Role.MANAGER
        assert rbac_contract.parse_role(Role.VIEWER) is Role.VIEWER
        assert rbac_contract.parse_role("root") is None
        assert rbac_contract.parse_role(None) is None


class TestContractValidation:
    """Test import-time validation of the table."""

    def test_current_contract_is_valid(self):
        rbac_contract._validate_contract()  # Should not raise

    def test_system_permission_leak_is_rejected(self, monkeypatch):
        broken = dict(rbac_contract.ROLE_PERMISSION_MAPPINGS)
        broken[Role.MANAGER] = broken[Role.MANAGER] | {Permission.SYSTEM_ADMIN}
        monkeypatch.setattr(rbac_contract, "ROLE_PERMISSION_MAPPINGS", broken)
        with pytest.raises(RuntimeError, match="SECURITY VIOLATION.*manager"):
            rbac_contract._validate_contract()

    def test_viewer_write_permission_is_rejected(self, monkeypatch):
        broken = dict(rbac_contract.ROLE_PERMISSION_MAPPINGS)
        broken[Role.VIEWER] = broken[Role.VIEWER] | {Permission.CREATE_TIME_ENTRY}
        monkeypatch.setattr(rbac_contract, "ROLE_PERMISSION_MAPPINGS", broken)
        with pytest.raises(RuntimeError, match="viewer' must be read-only"):
            rbac_contract._validate_contract()

    def test_missing_role_is_rejected(self, monkeypatch):
        broken = dict(rbac_contract.ROLE_PERMISSION_MAPPINGS)
        del broken[Role.PROJECT_MANAGER]
        monkeypatch.setattr(rbac_contract, "ROLE_PERMISSION_MAPPINGS", broken)
        with pytest.raises(RuntimeError, match="project_manager' has no permission mapping"):
            rbac_contract._validate_contract()
