"""
Monthly inventory snapshots.

Quantities are reconstructed backwards from the current product quantity:
movements recorded after the month are undone to get the closing figure,
then the month's own movements are undone to get the opening figure.
Recomputing a month overwrites the rows stored for it.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from ...crud.inventory_snapshot import InventorySnapshotRepository
from ...crud.product import ProductRepository
from ...crud.stock import StockInRepository, StockOutRepository
from ...errors import ValidationError
from ...models.inventory_snapshot import InventorySnapshot

logger = logging.getLogger("warehouse.inventory")

MIN_SNAPSHOT_YEAR = 2000


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """Return the UTC ``[start, end)`` range covering ``year``/``month``."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def validate_period(year: int, month: int, *, now: datetime | None = None) -> None:
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12", details={"month": month})
    if year < MIN_SNAPSHOT_YEAR:
        raise ValidationError(
            f"Year must be {MIN_SNAPSHOT_YEAR} or later", details={"year": year}
        )
    now = now or datetime.now(timezone.utc)
    start, _ = month_bounds(year, month)
    if start > now:
        raise ValidationError(
            "Cannot snapshot a month that has not started",
            details={"year": year, "month": month},
        )


class InventorySnapshotService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.product_repo = ProductRepository(session)
        self.stock_in_repo = StockInRepository(session)
        self.stock_out_repo = StockOutRepository(session)
        self.snapshot_repo = InventorySnapshotRepository(session)

    async def list_snapshots(
        self,
        year: int | None = None,
        month: int | None = None,
        product_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventorySnapshot]:
        if month is not None and not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12", details={"month": month})
        return await self.snapshot_repo.list_by_filters(
            year=year, month=month, product_id=product_id, limit=limit, offset=offset
        )

    async def compute_month(self, year: int, month: int) -> list[InventorySnapshot]:
        now = datetime.now(timezone.utc)
        validate_period(year, month, now=now)
        start, end = month_bounds(year, month)

        try:
            products = await self.product_repo.list_every()
            ins_during = await self.stock_in_repo.totals_by_product(start, end)
            outs_during = await self.stock_out_repo.totals_by_product(start, end)
            ins_after = await self.stock_in_repo.totals_by_product(end, None)
            outs_after = await self.stock_out_repo.totals_by_product(end, None)
            existing = await self.snapshot_repo.get_for_month(year, month)

            snapshots = []
            for product in products:
                stock_in = ins_during.get(product.id, 0)
                stock_out = outs_during.get(product.id, 0)
                closing = (
                    product.quantity
                    - ins_after.get(product.id, 0)
                    + outs_after.get(product.id, 0)
                )
                opening = closing - stock_in + stock_out

                snapshot = existing.get(product.id)
                if snapshot is None:
                    snapshot = InventorySnapshot(product_id=product.id, year=year, month=month)
                snapshot.opening_quantity = opening
                snapshot.stock_in_quantity = stock_in
                snapshot.stock_out_quantity = stock_out
                snapshot.closing_quantity = closing
                snapshot.computed_at = now
                snapshots.append(snapshot)

            snapshots = await self.snapshot_repo.save_all(snapshots)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Inventory snapshot computed year=%s month=%s products=%d",
            year,
            month,
            len(snapshots),
        )
        return snapshots
