from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.product import Product


class ProductRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        code: str,
        name: str,
        unit: str = "pcs",
        description: str | None = None,
    ) -> Product:
        product = Product(code=code, name=name, unit=unit, quantity=0, description=description)
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def update(self, product: Product) -> Product:
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def get_by_code(self, code: str) -> Product | None:
        result = await self.session.execute(
            select(Product).where(Product.code == code)
        )
        return result.scalar_one_or_none()

    async def get_by_codes(
        self, codes: list[str], *, for_update: bool = False
    ) -> dict[str, Product]:
        if not codes:
            return {}
        stmt = select(Product).where(Product.code.in_(codes)).order_by(Product.id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return {product.code: product for product in result.scalars().all()}

    async def list_all(
        self, search: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[Product]:
        query = select(Product)
        if search:
            pattern = f"%{search}%"
            query = query.where(Product.code.ilike(pattern) | Product.name.ilike(pattern))
        result = await self.session.execute(
            query.order_by(Product.code).limit(limit).offset(offset)
        )
        return list(result.scalars().all())

    async def list_every(self) -> list[Product]:
        result = await self.session.execute(select(Product).order_by(Product.id))
        return list(result.scalars().all())
