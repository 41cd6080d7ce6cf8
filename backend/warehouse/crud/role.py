from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.ports.permission import RoleGrantPort
from ..models.role import Role
from ..models.role_permission import RolePermission


class RoleRepository(RoleGrantPort):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, name: str, description: str | None = None, is_active: bool = True) -> Role:
        role = Role(name=name, description=description, is_active=is_active)
        self.session.add(role)
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def get_by_id(self, role_id: int) -> Role | None:
        return await self.session.get(Role, role_id)

    async def get_by_name(self, name: str) -> Role | None:
        result = await self.session.execute(
            select(Role).where(Role.name == name)
        )
        return result.scalar_one_or_none()

    async def list_all(self, include_inactive: bool = False) -> list[Role]:
        query = select(Role)
        if not include_inactive:
            query = query.where(Role.is_active)
        result = await self.session.execute(query.order_by(Role.id))
        return list(result.scalars().all())

    async def update(self, role: Role) -> Role:
        await self.session.flush()
        await self.session.refresh(role)
        return role

    async def role_has_permission(self, role_id: int, permission_id: int) -> bool:
        result = await self.session.execute(
            select(RolePermission.id)
            .join(Role, Role.id == RolePermission.role_id)
            .where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
            .where(Role.is_active)
            .limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def get_permission_ids(self, role_id: int) -> set[int]:
        result = await self.session.execute(
            select(RolePermission.permission_id).where(RolePermission.role_id == role_id)
        )
        return set(result.scalars().all())

    async def assign_permission(self, role_id: int, permission_id: int) -> RolePermission:
        role_permission = RolePermission(role_id=role_id, permission_id=permission_id)
        self.session.add(role_permission)
        await self.session.flush()
        await self.session.refresh(role_permission)
        return role_permission

    async def remove_permission(self, role_id: int, permission_id: int) -> bool:
        result = await self.session.execute(
            select(RolePermission).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id
            )
        )
        role_permission = result.scalar_one_or_none()
        if role_permission is None:
            return False
        await self.session.delete(role_permission)
        await self.session.flush()
        return True

    async def clear_permissions(self, role_id: int) -> None:
        await self.session.execute(
            delete(RolePermission).where(RolePermission.role_id == role_id)
        )
        await self.session.flush()
