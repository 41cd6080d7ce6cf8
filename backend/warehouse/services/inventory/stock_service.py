"""
Stock movement recording.

A stock-in or stock-out form and the product quantity changes it implies
are written in one transaction. Product rows are locked for the duration
so concurrent stock-outs cannot both spend the same quantity.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from ...crud.product import ProductRepository
from ...crud.stock import StockInRepository, StockOutRepository
from ...crud.user import UserRepository
from ...errors import ConflictError, InsufficientStockError, NotFoundError, ValidationError
from ...models.product import Product
from ...models.stock_in import StockInForm, StockInItem
from ...models.stock_out import StockOutForm, StockOutItem
from ...models.user import User
from ...schemas.stock import StockFormRequest, StockInRequest, StockOutRequest

logger = logging.getLogger("warehouse.inventory")


class StockService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.product_repo = ProductRepository(session)
        self.user_repo = UserRepository(session)
        self.stock_in_repo = StockInRepository(session)
        self.stock_out_repo = StockOutRepository(session)

    async def _resolve_username(self, username: str | None, actor: User) -> str:
        if username is None or username == actor.username:
            return actor.username
        if await self.user_repo.get_by_username(username) is None:
            raise ValidationError(f"Unknown user '{username}'")
        return username

    async def _lock_products(self, payload: StockFormRequest) -> dict[str, Product]:
        codes = [line.product_code for line in payload.products]
        duplicates = sorted({code for code in codes if codes.count(code) > 1})
        if duplicates:
            raise ValidationError(
                "A product may appear only once per form",
                details={"product_codes": duplicates},
            )

        products = await self.product_repo.get_by_codes(codes, for_update=True)
        missing = [code for code in codes if code not in products]
        if missing:
            raise NotFoundError("Unknown products", details={"product_codes": missing})
        return products

    async def get_stock_in(self, form_id: int) -> StockInForm:
        form = await self.stock_in_repo.get_by_id(form_id)
        if form is None:
            raise NotFoundError(f"Stock-in form {form_id} not found")
        return form

    async def get_stock_out(self, form_id: int) -> StockOutForm:
        form = await self.stock_out_repo.get_by_id(form_id)
        if form is None:
            raise NotFoundError(f"Stock-out form {form_id} not found")
        return form

    async def list_stock_in(self, **filters) -> list[StockInForm]:
        return await self.stock_in_repo.list_by_period(**filters)

    async def list_stock_out(self, **filters) -> list[StockOutForm]:
        return await self.stock_out_repo.list_by_period(**filters)

    async def record_stock_in(self, payload: StockInRequest, *, actor: User) -> StockInForm:
        try:
            if await self.stock_in_repo.get_by_code(payload.code) is not None:
                raise ConflictError(f"Stock-in form '{payload.code}' already exists")
            username = await self._resolve_username(payload.username, actor)
            products = await self._lock_products(payload)

            items = []
            for line in payload.products:
                product = products[line.product_code]
                product.quantity += line.quantity
                items.append(
                    StockInItem(
                        product_id=product.id,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                    )
                )

            form = await self.stock_in_repo.create(
                StockInForm(
                    code=payload.code,
                    username=username,
                    note=payload.note,
                    date_in=payload.date_in or datetime.now(timezone.utc),
                    items=items,
                )
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Stock-in recorded code=%s lines=%d by=%s", form.code, len(form.items), username
        )
        return form

    async def record_stock_out(self, payload: StockOutRequest, *, actor: User) -> StockOutForm:
        try:
            if await self.stock_out_repo.get_by_code(payload.code) is not None:
                raise ConflictError(f"Stock-out form '{payload.code}' already exists")
            username = await self._resolve_username(payload.username, actor)
            products = await self._lock_products(payload)

            shortages = [
                {
                    "product_code": line.product_code,
                    "available": products[line.product_code].quantity,
                    "requested": line.quantity,
                }
                for line in payload.products
                if products[line.product_code].quantity < line.quantity
            ]
            if shortages:
                raise InsufficientStockError(details={"shortages": shortages})

            items = []
            for line in payload.products:
                product = products[line.product_code]
                product.quantity -= line.quantity
                items.append(
                    StockOutItem(
                        product_id=product.id,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                    )
                )

            form = await self.stock_out_repo.create(
                StockOutForm(
                    code=payload.code,
                    username=username,
                    note=payload.note,
                    date_out=payload.date_out or datetime.now(timezone.utc),
                    items=items,
                )
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Stock-out recorded code=%s lines=%d by=%s", form.code, len(form.items), username
        )
        return form
