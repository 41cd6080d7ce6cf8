from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from db_helpers import add_user, sqlite_session_factory
from scripts.seed_permissions import seed_permissions
from warehouse.dependencies import get_db
from warehouse.main import app
from warehouse.models.user import User


@dataclass
class SeededUsers:
    admin: User
    manager: User
    staff: User
    roleless: User
    role_ids: dict[str, int]


@asynccontextmanager
async def api_client():
    """Client against the app with a seeded in-memory database behind ``get_db``."""
    async with sqlite_session_factory() as session_factory:
        async with session_factory() as session:
            role_ids = await seed_permissions(session)
            users = SeededUsers(
                admin=await add_user(session, "admin", role_id=role_ids["admin"]),
                manager=await add_user(session, "manager", role_id=role_ids["manager"]),
                staff=await add_user(session, "staff", role_id=role_ids["staff"]),
                roleless=await add_user(session, "roleless"),
                role_ids=role_ids,
            )
            await session.commit()

        async def override_get_db():
            async with session_factory() as request_session:
                yield request_session

        app.dependency_overrides[get_db] = override_get_db
        try:
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
                yield client, users
        finally:
            app.dependency_overrides.pop(get_db, None)
