from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db
from ..schemas.product import ProductCreate, ProductResponse, ProductUpdate
from ..services.inventory.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=list[ProductResponse])
async def list_products(
    search: str | None = Query(None, description="Match against code or name"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    service = ProductService(db)
    return await service.list_products(search=search, limit=limit, offset=offset)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(payload: ProductCreate, db: AsyncSession = Depends(get_db)):
    service = ProductService(db)
    return await service.create_product(payload)


@router.get("/{product_code}", response_model=ProductResponse)
async def get_product(product_code: str, db: AsyncSession = Depends(get_db)):
    service = ProductService(db)
    return await service.get_product(product_code)


@router.put("/{product_code}", response_model=ProductResponse)
async def update_product(
    product_code: str,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_db),
):
    service = ProductService(db)
    return await service.update_product(product_code, payload)
