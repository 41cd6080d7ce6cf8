"""Administrative operations on roles and their permission links."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ...crud.permission import PermissionRepository
from ...crud.role import RoleRepository
from ...errors import ConflictError, NotFoundError
from ...models.permission import Permission
from ...models.role import Role
from ...schemas.role import RoleCreate, RoleUpdate

logger = logging.getLogger("warehouse.admin")


class RoleAdminService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.role_repo = RoleRepository(session)
        self.permission_repo = PermissionRepository(session)

    async def get_role(self, role_id: int) -> Role:
        role = await self.role_repo.get_by_id(role_id)
        if role is None:
            raise NotFoundError(f"Role {role_id} not found")
        return role

    async def list_roles(self, include_inactive: bool = False) -> list[Role]:
        return await self.role_repo.list_all(include_inactive=include_inactive)

    async def get_role_permissions(self, role_id: int) -> list[Permission]:
        await self.get_role(role_id)
        return await self.permission_repo.get_role_permissions(role_id)

    async def _load_permissions(self, permission_ids: list[int]) -> list[Permission]:
        unique_ids = sorted(set(permission_ids))
        permissions = await self.permission_repo.get_by_ids(unique_ids)
        missing = sorted(set(unique_ids) - {permission.id for permission in permissions})
        if missing:
            raise NotFoundError(
                "Unknown permission ids", details={"permission_ids": missing}
            )
        return permissions

    async def create_role(self, payload: RoleCreate) -> Role:
        try:
            if await self.role_repo.get_by_name(payload.name) is not None:
                raise ConflictError(f"Role '{payload.name}' already exists")
            permissions = await self._load_permissions(payload.permission_ids)
            role = await self.role_repo.create(
                name=payload.name,
                description=payload.description,
                is_active=payload.is_active,
            )
            for permission in permissions:
                await self.role_repo.assign_permission(role.id, permission.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Role created id=%s name=%s permissions=%d", role.id, role.name, len(permissions))
        return role

    async def update_role(self, role_id: int, payload: RoleUpdate) -> Role:
        try:
            role = await self.get_role(role_id)
            changes = payload.model_dump(exclude_unset=True)
            new_name = changes.get("name")
            if new_name and new_name != role.name:
                existing = await self.role_repo.get_by_name(new_name)
                if existing is not None:
                    raise ConflictError(f"Role '{new_name}' already exists")
            for field, value in changes.items():
                if value is not None or field == "description":
                    setattr(role, field, value)
            role = await self.role_repo.update(role)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return role

    async def replace_permissions(self, role_id: int, permission_ids: list[int]) -> list[Permission]:
        try:
            await self.get_role(role_id)
            permissions = await self._load_permissions(permission_ids)
            await self.role_repo.clear_permissions(role_id)
            for permission in permissions:
                await self.role_repo.assign_permission(role_id, permission.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Role permissions replaced role_id=%s count=%d", role_id, len(permissions))
        return sorted(permissions, key=lambda permission: permission.id)

    async def grant_permission(self, role_id: int, permission_id: int) -> Permission:
        try:
            await self.get_role(role_id)
            permission = await self.permission_repo.get_by_id(permission_id)
            if permission is None:
                raise NotFoundError(f"Permission {permission_id} not found")
            if permission_id in await self.role_repo.get_permission_ids(role_id):
                raise ConflictError("Permission already granted to role")
            await self.role_repo.assign_permission(role_id, permission_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return permission

    async def revoke_permission(self, role_id: int, permission_id: int) -> None:
        try:
            await self.get_role(role_id)
            removed = await self.role_repo.remove_permission(role_id, permission_id)
            if not removed:
                raise NotFoundError("Permission is not granted to role")
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
