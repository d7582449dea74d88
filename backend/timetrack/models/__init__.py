from .base import Base
from .department import Department
from .employee import Employee
from .organization import Organization

__all__ = ["Base", "Department", "Employee", "Organization"]
