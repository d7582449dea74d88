from pydantic import BaseModel, ConfigDict, Field

from ..auth.rbac_contract import Permission, Role


class AuthContextRead(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    subject: str | None
    role: Role
    permissions: list[Permission]
    department_id: str | None = None
    organization_id: str | None = None
    testing: bool = False
    original_role: Role | None = None


class RolePermissionsRead(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    role: Role
    permissions: list[Permission] = Field(default_factory=list)
