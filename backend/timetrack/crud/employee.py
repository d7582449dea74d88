from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.department import Department
from ..models.employee import Employee


class EmployeeRepository:
    """SQLAlchemy-backed employee/department lookup used to build auth contexts."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_employee_by_identity(self, subject_id: str) -> Employee | None:
        result = await self.session.execute(
            select(Employee).where(Employee.user_id == subject_id)
        )
        return result.scalar_one_or_none()

    async def get_department(self, department_id: str) -> Department | None:
        return await self.session.get(Department, department_id)
