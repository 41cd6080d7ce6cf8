"""
Seed the permission table, the default roles and their grants.

Safe to run repeatedly: existing permissions (matched by method and path),
roles (matched by name) and grants are left in place. When ADMIN_USERNAME,
ADMIN_EMAIL and ADMIN_PASSWORD are set, an administrator account is created
if it does not exist yet.

Usage:
    python -m scripts.seed_permissions
"""
import asyncio
import os
import sys

from sqlalchemy.ext.asyncio import AsyncSession

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from warehouse.auth.path_matching import is_valid_api_path
from warehouse.auth.permission_catalog import (
    DEFAULT_ROLE_DESCRIPTIONS,
    DEFAULT_ROLE_PERMISSIONS,
    PERMISSION_CATALOG,
)
from warehouse.crud.permission import PermissionRepository
from warehouse.crud.role import RoleRepository
from warehouse.crud.user import UserRepository
from warehouse.database import AsyncSessionLocal
from warehouse.models.user import User
from warehouse.utils.security import hash_password


async def seed_permissions(session: AsyncSession) -> dict[str, int]:
    """Write catalogue permissions, default roles and grants. Returns role ids by name."""
    permission_repo = PermissionRepository(session)
    role_repo = RoleRepository(session)

    print("Seeding permissions...")
    permission_map: dict[str, int] = {}
    for spec in PERMISSION_CATALOG:
        if not is_valid_api_path(spec.api_path):
            raise RuntimeError(f"Catalogue path for '{spec.name}' is invalid: {spec.api_path}")

        existing = await permission_repo.find_by_path_and_method(spec.api_path, spec.http_method)
        if existing:
            print(f"  Permission {spec.http_method} {spec.api_path} already exists, skipping...")
            permission_map[spec.name] = existing.id
            continue

        permission = await permission_repo.create(
            name=spec.name,
            api_path=spec.api_path,
            http_method=spec.http_method,
            module=spec.module,
            description=spec.description,
        )
        permission_map[spec.name] = permission.id
        print(f"  + Created permission: {spec.name} ({spec.http_method} {spec.api_path})")

    print("\nSeeding roles...")
    role_map: dict[str, int] = {}
    for role_name, description in DEFAULT_ROLE_DESCRIPTIONS.items():
        existing = await role_repo.get_by_name(role_name)
        if existing:
            print(f"  Role '{role_name}' already exists, skipping...")
            role_map[role_name] = existing.id
            continue

        role = await role_repo.create(name=role_name, description=description)
        role_map[role_name] = role.id
        print(f"  + Created role: {role_name}")

    print("\nAssigning permissions to roles...")
    for role_name, permission_names in DEFAULT_ROLE_PERMISSIONS.items():
        role_id = role_map[role_name]
        granted = await role_repo.get_permission_ids(role_id)
        added = 0
        for permission_name in sorted(permission_names):
            permission_id = permission_map[permission_name]
            if permission_id in granted:
                continue
            await role_repo.assign_permission(role_id, permission_id)
            added += 1
        print(f"  + Assigned {added} new permissions to '{role_name}'")

    return role_map


async def seed_admin_user(session: AsyncSession, role_id: int) -> None:
    username = os.getenv("ADMIN_USERNAME")
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not (username and email and password):
        print("\nADMIN_USERNAME/ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin account")
        return

    user_repo = UserRepository(session)
    if await user_repo.find_conflicting(username, email) is not None:
        print(f"\nUser '{username}' already exists, skipping...")
        return

    await user_repo.create(
        User(
            username=username,
            email=email,
            full_name="Administrator",
            password_hash=hash_password(password),
            is_active=True,
            role_id=role_id,
        )
    )
    print(f"\n+ Created admin account: {username}")


async def main() -> None:
    async with AsyncSessionLocal() as session:
        async with session.begin():
            role_map = await seed_permissions(session)
            await seed_admin_user(session, role_map["admin"])

    print("\nSeeding completed successfully!")


if __name__ == "__main__":
    asyncio.run(main())
