from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from .base import REQUEST_MODEL_CONFIG
from .permission import PermissionResponse
from .role import RoleResponse


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=100, pattern=r"^[A-Za-z0-9_.\-]+$")
    email: EmailStr
    full_name: str | None = Field(None, max_length=255)
    phone_number: str | None = Field(None, max_length=32)
    address: str | None = None


class UserCreate(UserBase):
    model_config = REQUEST_MODEL_CONFIG

    password: str = Field(..., min_length=8, max_length=128)
    is_active: bool = True
    role_id: int | None = None


class UserUpdate(BaseModel):
    model_config = REQUEST_MODEL_CONFIG

    email: EmailStr | None = None
    full_name: str | None = Field(None, max_length=255)
    phone_number: str | None = Field(None, max_length=32)
    address: str | None = None
    password: str | None = Field(None, min_length=8, max_length=128)
    is_active: bool | None = None
    role_id: int | None = None


class UserResponse(UserBase):
    id: int
    is_active: bool
    role_id: int | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CurrentUserResponse(BaseModel):
    user: UserResponse
    role: RoleResponse | None = None
    permissions: list[PermissionResponse] = Field(default_factory=list)
