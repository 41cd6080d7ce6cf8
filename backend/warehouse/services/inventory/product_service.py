from sqlalchemy.ext.asyncio import AsyncSession

from ...crud.product import ProductRepository
from ...errors import ConflictError, NotFoundError
from ...models.product import Product
from ...schemas.product import ProductCreate, ProductUpdate


class ProductService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.product_repo = ProductRepository(session)

    async def get_product(self, code: str) -> Product:
        product = await self.product_repo.get_by_code(code)
        if product is None:
            raise NotFoundError(f"Product '{code}' not found")
        return product

    async def list_products(
        self, search: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[Product]:
        return await self.product_repo.list_all(search=search, limit=limit, offset=offset)

    async def create_product(self, payload: ProductCreate) -> Product:
        try:
            if await self.product_repo.get_by_code(payload.code) is not None:
                raise ConflictError(f"Product '{payload.code}' already exists")
            product = await self.product_repo.create(
                code=payload.code,
                name=payload.name,
                unit=payload.unit,
                description=payload.description,
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return product

    async def update_product(self, code: str, payload: ProductUpdate) -> Product:
        try:
            product = await self.get_product(code)
            for field, value in payload.model_dump(exclude_unset=True).items():
                if value is not None or field == "description":
                    setattr(product, field, value)
            product = await self.product_repo.update(product)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return product
