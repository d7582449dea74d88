"""Tests for the SQLAlchemy-backed employee lookup."""
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from timetrack.auth.context import build_auth_context
from timetrack.auth.rbac_contract import Role
from timetrack.auth.types import Identity
from timetrack.crud.employee import EmployeeRepository
from timetrack.models import Department, Employee


@pytest.fixture
def mock_session():
    return MagicMock(spec=AsyncSession)


def _execute_returning(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return AsyncMock(return_value=result)


class TestEmployeeRepository:
    @pytest.mark.anyio
    async def test_get_employee_by_identity_filters_on_subject(self, mock_session):
        employee = Employee(id="e1", user_id="sub-1", employee_id="E-1", first_name="A", last_name="B")
        mock_session.execute = _execute_returning(employee)

        repo = EmployeeRepository(mock_session)
        assert await repo.get_employee_by_identity("sub-1") is employee

        statement = mock_session.execute.call_args.args[0]
        compiled = statement.compile(compile_kwargs={"literal_binds": True})
        assert "employees.user_id = 'sub-1'" in str(compiled)

    @pytest.mark.anyio
    async def test_get_department_uses_primary_key(self, mock_session):
        department = Department(id="d1", name="Engineering", manager_id="e1", organization_id="o1")
        mock_session.get = AsyncMock(return_value=department)

        repo = EmployeeRepository(mock_session)
        assert await repo.get_department("d1") is department
        mock_session.get.assert_awaited_once_with(Department, "d1")

    @pytest.mark.anyio
    async def test_repository_drives_manager_promotion(self, mock_session):
        employee = Employee(id="e1", user_id="sub-1", employee_id="E-1", first_name="A", last_name="B", department_id="d1")
        department = Department(id="d1", name="Engineering", manager_id="e1", organization_id="o1")
        mock_session.execute = _execute_returning(employee)
        mock_session.get = AsyncMock(return_value=department)

        context = await build_auth_context(Identity(subject="sub-1"), EmployeeRepository(mock_session))

        assert context.role is Role.MANAGER
        assert context.department_id == "d1"
        assert context.organization_id == "o1"

    @pytest.mark.anyio
    async def test_database_error_fails_closed(self, mock_session):
        mock_session.execute = AsyncMock(side_effect=OSError("connection refused"))

        context = await build_auth_context(Identity(subject="sub-1"), EmployeeRepository(mock_session))

        assert context is None
