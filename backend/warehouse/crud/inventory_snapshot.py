from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.inventory_snapshot import InventorySnapshot


class InventorySnapshotRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_month(self, year: int, month: int) -> dict[int, InventorySnapshot]:
        result = await self.session.execute(
            select(InventorySnapshot).where(
                InventorySnapshot.year == year,
                InventorySnapshot.month == month,
            )
        )
        return {snapshot.product_id: snapshot for snapshot in result.scalars().all()}

    async def save_all(self, snapshots: list[InventorySnapshot]) -> list[InventorySnapshot]:
        self.session.add_all(snapshots)
        await self.session.flush()
        for snapshot in snapshots:
            await self.session.refresh(snapshot)
        return snapshots

    async def list_by_filters(
        self,
        year: int | None = None,
        month: int | None = None,
        product_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventorySnapshot]:
        query = select(InventorySnapshot)
        if year is not None:
            query = query.where(InventorySnapshot.year == year)
        if month is not None:
            query = query.where(InventorySnapshot.month == month)
        if product_id is not None:
            query = query.where(InventorySnapshot.product_id == product_id)
        result = await self.session.execute(
            query.order_by(
                InventorySnapshot.year.desc(),
                InventorySnapshot.month.desc(),
                InventorySnapshot.product_id,
            )
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())
