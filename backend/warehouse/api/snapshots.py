from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_db
from ..schemas.inventory_snapshot import InventorySnapshotResponse
from ..services.inventory.snapshot_service import InventorySnapshotService

router = APIRouter(prefix="/inventory-snapshots", tags=["inventory-snapshots"])


@router.get("", response_model=list[InventorySnapshotResponse])
async def list_snapshots(
    year: int | None = Query(None),
    month: int | None = Query(None),
    product_id: int | None = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    service = InventorySnapshotService(db)
    return await service.list_snapshots(
        year=year, month=month, product_id=product_id, limit=limit, offset=offset
    )


@router.post(
    "/{year}/{month}",
    response_model=list[InventorySnapshotResponse],
    status_code=status.HTTP_201_CREATED,
)
async def compute_snapshot(year: int, month: int, db: AsyncSession = Depends(get_db)):
    """Compute (or recompute) every product's snapshot for the month."""
    service = InventorySnapshotService(db)
    return await service.compute_month(year, month)
