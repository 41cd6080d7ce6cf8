from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from warehouse.config import settings
from warehouse.models import Base, Product, Role, User
from warehouse.utils.security import hash_password


@asynccontextmanager
async def sqlite_session_factory():
    """In-memory database with every table created, shared by all sessions."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    try:
        yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    finally:
        await engine.dispose()


async def add_role(session: AsyncSession, name: str, *, is_active: bool = True) -> Role:
    role = Role(name=name, is_active=is_active)
    session.add(role)
    await session.flush()
    await session.refresh(role)
    return role


async def add_user(
    session: AsyncSession,
    username: str,
    *,
    role_id: int | None = None,
    is_active: bool = True,
) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        full_name=username.title(),
        password_hash=hash_password("password123", iterations=1_000),
        is_active=is_active,
        role_id=role_id,
    )
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


async def add_product(
    session: AsyncSession, code: str, *, quantity: int = 0, name: str | None = None
) -> Product:
    product = Product(code=code, name=name or code, unit="pcs", quantity=quantity)
    session.add(product)
    await session.flush()
    await session.refresh(product)
    return product


def access_token(user_id: int, *, expires_in: timedelta = timedelta(minutes=5)) -> str:
    payload = {
        "sub": str(user_id),
        "type": "access",
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def auth_headers(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token(user_id)}"}
