from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.ports.permission import PermissionLookupPort
from ..models.permission import Permission
from ..models.role import Role
from ..models.role_permission import RolePermission


class PermissionRepository(PermissionLookupPort):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        name: str,
        api_path: str,
        http_method: str,
        module: str,
        description: str | None = None,
    ) -> Permission:
        permission = Permission(
            name=name,
            api_path=api_path,
            http_method=http_method.upper(),
            module=module,
            description=description,
        )
        self.session.add(permission)
        await self.session.flush()
        await self.session.refresh(permission)
        return permission

    async def update(self, permission: Permission) -> Permission:
        await self.session.flush()
        await self.session.refresh(permission)
        return permission

    async def delete(self, permission: Permission) -> None:
        await self.session.execute(
            delete(RolePermission).where(RolePermission.permission_id == permission.id)
        )
        await self.session.delete(permission)
        await self.session.flush()

    async def get_by_id(self, permission_id: int) -> Permission | None:
        return await self.session.get(Permission, permission_id)

    async def get_by_ids(self, permission_ids: list[int]) -> list[Permission]:
        if not permission_ids:
            return []
        result = await self.session.execute(
            select(Permission).where(Permission.id.in_(permission_ids))
        )
        return list(result.scalars().all())

    async def find_by_path_and_method(
        self, api_path: str, http_method: str
    ) -> Permission | None:
        result = await self.session.execute(
            select(Permission).where(
                Permission.api_path == api_path,
                Permission.http_method == http_method.upper(),
            )
        )
        return result.scalar_one_or_none()

    async def list_by_method(self, http_method: str) -> list[Permission]:
        result = await self.session.execute(
            select(Permission)
            .where(Permission.http_method == http_method.upper())
            .order_by(Permission.id)
        )
        return list(result.scalars().all())

    async def list_all(self, module: str | None = None) -> list[Permission]:
        query = select(Permission)
        if module is not None:
            query = query.where(Permission.module == module)
        result = await self.session.execute(
            query.order_by(Permission.module, Permission.api_path, Permission.http_method)
        )
        return list(result.scalars().all())

    async def get_role_permissions(self, role_id: int) -> list[Permission]:
        result = await self.session.execute(
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(Permission.id)
        )
        return list(result.scalars().all())

    async def get_active_role_permissions(self, role_id: int) -> list[Permission]:
        result = await self.session.execute(
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(Role, Role.id == RolePermission.role_id)
            .where(RolePermission.role_id == role_id)
            .where(Role.is_active)
            .order_by(Permission.id)
        )
        return list(result.scalars().all())
