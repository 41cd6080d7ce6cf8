from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.stock_in import StockInForm, StockInItem
from ..models.stock_out import StockOutForm, StockOutItem


class StockInRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, form: StockInForm) -> StockInForm:
        self.session.add(form)
        await self.session.flush()
        await self.session.refresh(form)
        return form

    async def get_by_id(self, form_id: int) -> StockInForm | None:
        return await self.session.get(StockInForm, form_id)

    async def get_by_code(self, code: str) -> StockInForm | None:
        result = await self.session.execute(
            select(StockInForm).where(StockInForm.code == code)
        )
        return result.scalar_one_or_none()

    async def list_by_period(
        self,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockInForm]:
        query = select(StockInForm)
        if from_date is not None:
            query = query.where(StockInForm.date_in >= from_date)
        if to_date is not None:
            query = query.where(StockInForm.date_in < to_date)
        result = await self.session.execute(
            query.order_by(StockInForm.date_in.desc(), StockInForm.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def totals_by_product(
        self, from_date: datetime | None = None, to_date: datetime | None = None
    ) -> dict[int, int]:
        query = (
            select(StockInItem.product_id, func.sum(StockInItem.quantity))
            .join(StockInForm, StockInForm.id == StockInItem.form_id)
            .group_by(StockInItem.product_id)
        )
        if from_date is not None:
            query = query.where(StockInForm.date_in >= from_date)
        if to_date is not None:
            query = query.where(StockInForm.date_in < to_date)
        result = await self.session.execute(query)
        return {product_id: int(total or 0) for product_id, total in result.all()}


class StockOutRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, form: StockOutForm) -> StockOutForm:
        self.session.add(form)
        await self.session.flush()
        await self.session.refresh(form)
        return form

    async def get_by_id(self, form_id: int) -> StockOutForm | None:
        return await self.session.get(StockOutForm, form_id)

    async def get_by_code(self, code: str) -> StockOutForm | None:
        result = await self.session.execute(
            select(StockOutForm).where(StockOutForm.code == code)
        )
        return result.scalar_one_or_none()

    async def list_by_period(
        self,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockOutForm]:
        query = select(StockOutForm)
        if from_date is not None:
            query = query.where(StockOutForm.date_out >= from_date)
        if to_date is not None:
            query = query.where(StockOutForm.date_out < to_date)
        result = await self.session.execute(
            query.order_by(StockOutForm.date_out.desc(), StockOutForm.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def totals_by_product(
        self, from_date: datetime | None = None, to_date: datetime | None = None
    ) -> dict[int, int]:
        query = (
            select(StockOutItem.product_id, func.sum(StockOutItem.quantity))
            .join(StockOutForm, StockOutForm.id == StockOutItem.form_id)
            .group_by(StockOutItem.product_id)
        )
        if from_date is not None:
            query = query.where(StockOutForm.date_out >= from_date)
        if to_date is not None:
            query = query.where(StockOutForm.date_out < to_date)
        result = await self.session.execute(query)
        return {product_id: int(total or 0) for product_id, total in result.all()}
