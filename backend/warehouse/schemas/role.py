from datetime import datetime

from pydantic import BaseModel, Field

from .base import REQUEST_MODEL_CONFIG
from .permission import PermissionResponse


class RoleBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None


class RoleCreate(RoleBase):
    model_config = REQUEST_MODEL_CONFIG

    is_active: bool = True
    permission_ids: list[int] = Field(default_factory=list)


class RoleUpdate(BaseModel):
    model_config = REQUEST_MODEL_CONFIG

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    is_active: bool | None = None


class RolePermissionsUpdate(BaseModel):
    model_config = REQUEST_MODEL_CONFIG

    permission_ids: list[int]


class RoleResponse(RoleBase):
    id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RoleDetailResponse(RoleResponse):
    permissions: list[PermissionResponse] = Field(default_factory=list)
