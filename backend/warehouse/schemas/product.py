from datetime import datetime

from pydantic import BaseModel, Field

from .base import REQUEST_MODEL_CONFIG

PRODUCT_CODE_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_\-]*$"


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    unit: str = Field("pcs", min_length=1, max_length=32)
    description: str | None = None


class ProductCreate(ProductBase):
    model_config = REQUEST_MODEL_CONFIG

    code: str = Field(..., min_length=1, max_length=64, pattern=PRODUCT_CODE_PATTERN)


class ProductUpdate(BaseModel):
    model_config = REQUEST_MODEL_CONFIG

    name: str | None = Field(None, min_length=1, max_length=255)
    unit: str | None = Field(None, min_length=1, max_length=32)
    description: str | None = None


class ProductResponse(ProductBase):
    id: int
    code: str
    quantity: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
