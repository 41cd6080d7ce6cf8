"""
Stock movement endpoints.

Recording a form adjusts product quantities in the same transaction.
Listing accepts an optional ``[from_date, to_date)`` window on the form date.
"""
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_current_user, get_db
from ..models.user import User
from ..schemas.stock import (
    StockInRequest,
    StockInResponse,
    StockOutRequest,
    StockOutResponse,
    ensure_utc,
)
from ..services.inventory.stock_service import StockService

stock_in_router = APIRouter(prefix="/stock-in", tags=["stock-in"])
stock_out_router = APIRouter(prefix="/stock-out", tags=["stock-out"])


@stock_in_router.get("", response_model=list[StockInResponse])
async def list_stock_in(
    from_date: datetime | None = Query(None),
    to_date: datetime | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    service = StockService(db)
    return await service.list_stock_in(
        from_date=ensure_utc(from_date),
        to_date=ensure_utc(to_date),
        limit=limit,
        offset=offset,
    )


@stock_in_router.post("", response_model=StockInResponse, status_code=status.HTTP_201_CREATED)
async def create_stock_in(
    payload: StockInRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = StockService(db)
    return await service.record_stock_in(payload, actor=current_user)


@stock_in_router.get("/{form_id}", response_model=StockInResponse)
async def get_stock_in(form_id: int, db: AsyncSession = Depends(get_db)):
    service = StockService(db)
    return await service.get_stock_in(form_id)


@stock_out_router.get("", response_model=list[StockOutResponse])
async def list_stock_out(
    from_date: datetime | None = Query(None),
    to_date: datetime | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    service = StockService(db)
    return await service.list_stock_out(
        from_date=ensure_utc(from_date),
        to_date=ensure_utc(to_date),
        limit=limit,
        offset=offset,
    )


@stock_out_router.post("", response_model=StockOutResponse, status_code=status.HTTP_201_CREATED)
async def create_stock_out(
    payload: StockOutRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = StockService(db)
    return await service.record_stock_out(payload, actor=current_user)


@stock_out_router.get("/{form_id}", response_model=StockOutResponse)
async def get_stock_out(form_id: int, db: AsyncSession = Depends(get_db)):
    service = StockService(db)
    return await service.get_stock_out(form_id)
