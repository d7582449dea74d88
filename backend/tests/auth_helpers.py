from types import SimpleNamespace

from timetrack.auth.rbac_contract import Role
from timetrack.auth.types import AuthContext, Identity


class FakeEmployeeLookup:
    """In-memory employee/department lookup keyed by subject and department id."""

    def __init__(
        self,
        employees: dict[str, SimpleNamespace] | None = None,
        departments: dict[str, SimpleNamespace] | None = None,
    ) -> None:
        self.employees = employees or {}
        self.departments = departments or {}
        self.calls: list[tuple[str, str]] = []

    async def get_employee_by_identity(self, subject_id: str):
        self.calls.append(("employee", subject_id))
        return self.employees.get(subject_id)

    async def get_department(self, department_id: str):
        self.calls.append(("department", department_id))
        return self.departments.get(department_id)


class FailingEmployeeLookup:
    async def get_employee_by_identity(self, subject_id: str):
        raise ConnectionError("employee directory unavailable")

    async def get_department(self, department_id: str):
        raise ConnectionError("employee directory unavailable")


def make_lookup() -> FakeEmployeeLookup:
    """``mgr-sub`` manages dept-1, ``emp-sub`` works in it, ``floating-sub`` has no department."""
    return FakeEmployeeLookup(
        employees={
            "mgr-sub": SimpleNamespace(id="emp-100", department_id="dept-1"),
            "emp-sub": SimpleNamespace(id="emp-200", department_id="dept-1"),
            "floating-sub": SimpleNamespace(id="emp-300", department_id=None),
        },
        departments={
            "dept-1": SimpleNamespace(id="dept-1", manager_id="emp-100", organization_id="org-1"),
        },
    )


def make_context(
    role: Role,
    subject: str = "user-1",
    department_id: str | None = None,
    organization_id: str | None = None,
) -> AuthContext:
    return AuthContext.for_role(
        Identity(subject=subject),
        role,
        department_id=department_id,
        organization_id=organization_id,
    )
