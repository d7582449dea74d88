from __future__ import annotations

from typing import Protocol


class EmployeeRecord(Protocol):
    id: str
    department_id: str | None


class DepartmentRecord(Protocol):
    id: str
    manager_id: str | None
    organization_id: str | None


class EmployeeLookup(Protocol):
    async def get_employee_by_identity(self, subject_id: str) -> EmployeeRecord | None:
        ...

    async def get_department(self, department_id: str) -> DepartmentRecord | None:
        ...
