from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ..auth.path_matching import is_valid_api_path
from .base import REQUEST_MODEL_CONFIG

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]


def _validate_api_path(value: str) -> str:
    if not is_valid_api_path(value):
        raise ValueError(
            "api_path must start with '/' and contain only literal segments or "
            "{placeholder} segments"
        )
    return value


class PermissionBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    api_path: str = Field(..., min_length=1, max_length=255)
    http_method: HttpMethod
    module: str = Field(..., min_length=1, max_length=100)
    description: str | None = None

    @field_validator("api_path")
    @classmethod
    def check_api_path(cls, value: str) -> str:
        return _validate_api_path(value)

    @field_validator("http_method", mode="before")
    @classmethod
    def upper_http_method(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class PermissionCreate(PermissionBase):
    model_config = REQUEST_MODEL_CONFIG


class PermissionUpdate(BaseModel):
    model_config = REQUEST_MODEL_CONFIG

    name: str | None = Field(None, min_length=1, max_length=100)
    api_path: str | None = Field(None, min_length=1, max_length=255)
    http_method: HttpMethod | None = None
    module: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None

    @field_validator("api_path")
    @classmethod
    def check_api_path(cls, value: str | None) -> str | None:
        return None if value is None else _validate_api_path(value)

    @field_validator("http_method", mode="before")
    @classmethod
    def upper_http_method(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class PermissionResponse(BaseModel):
    id: int
    name: str
    api_path: str
    http_method: str
    module: str
    description: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True
