from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from .base import REQUEST_MODEL_CONFIG

# Form dates are exchanged as "YYYY-MM-DD HH:MM:SS"; ISO 8601 is accepted too
FORM_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_form_date(value: object) -> object:
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), FORM_DATE_FORMAT)
        except ValueError:
            return value
    return value


def ensure_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class StockLineRequest(BaseModel):
    model_config = REQUEST_MODEL_CONFIG

    product_code: str = Field(..., min_length=1, max_length=64)
    quantity: int = Field(..., gt=0)
    unit_price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)


class StockFormRequest(BaseModel):
    model_config = REQUEST_MODEL_CONFIG

    code: str = Field(..., min_length=1, max_length=64)
    products: list[StockLineRequest] = Field(..., min_length=1)
    username: str | None = Field(None, min_length=1, max_length=100)
    note: str | None = None


class StockInRequest(StockFormRequest):
    date_in: datetime | None = None

    @field_validator("date_in", mode="before")
    @classmethod
    def parse_date_in(cls, value: object) -> object:
        return parse_form_date(value)

    @field_validator("date_in")
    @classmethod
    def date_in_to_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class StockOutRequest(StockFormRequest):
    date_out: datetime | None = None

    @field_validator("date_out", mode="before")
    @classmethod
    def parse_date_out(cls, value: object) -> object:
        return parse_form_date(value)

    @field_validator("date_out")
    @classmethod
    def date_out_to_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class StockLineResponse(BaseModel):
    id: int
    product_id: int
    quantity: int
    unit_price: Decimal | None = None

    class Config:
        from_attributes = True


class StockInResponse(BaseModel):
    id: int
    code: str
    username: str
    note: str | None = None
    date_in: datetime
    items: list[StockLineResponse]

    @field_validator("date_in")
    @classmethod
    def date_in_as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    class Config:
        from_attributes = True


class StockOutResponse(BaseModel):
    id: int
    code: str
    username: str
    note: str | None = None
    date_out: datetime
    items: list[StockLineResponse]

    @field_validator("date_out")
    @classmethod
    def date_out_as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    class Config:
        from_attributes = True
