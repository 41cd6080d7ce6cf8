"""Administrative CRUD for permission records.

Path patterns are what the request interceptor matches against, so two
records may not share the same ``(api_path, http_method)`` pair.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ...crud.permission import PermissionRepository
from ...errors import ConflictError, NotFoundError
from ...models.permission import Permission
from ...schemas.permission import PermissionCreate, PermissionUpdate

logger = logging.getLogger("warehouse.admin")


class PermissionAdminService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.permission_repo = PermissionRepository(session)

    async def get_permission(self, permission_id: int) -> Permission:
        permission = await self.permission_repo.get_by_id(permission_id)
        if permission is None:
            raise NotFoundError(f"Permission {permission_id} not found")
        return permission

    async def list_permissions(self, module: str | None = None) -> list[Permission]:
        return await self.permission_repo.list_all(module=module)

    async def _ensure_unique(
        self, api_path: str, http_method: str, exclude_id: int | None = None
    ) -> None:
        existing = await self.permission_repo.find_by_path_and_method(api_path, http_method)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(
                f"Permission for {http_method} {api_path} already exists",
                details={"permission_id": existing.id},
            )

    async def create_permission(self, payload: PermissionCreate) -> Permission:
        try:
            await self._ensure_unique(payload.api_path, payload.http_method)
            permission = await self.permission_repo.create(
                name=payload.name,
                api_path=payload.api_path,
                http_method=payload.http_method,
                module=payload.module,
                description=payload.description,
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Permission created id=%s %s %s", permission.id, permission.http_method, permission.api_path
        )
        return permission

    async def update_permission(self, permission_id: int, payload: PermissionUpdate) -> Permission:
        try:
            permission = await self.get_permission(permission_id)
            changes = payload.model_dump(exclude_unset=True)
            api_path = changes.get("api_path") or permission.api_path
            http_method = changes.get("http_method") or permission.http_method
            if (api_path, http_method) != (permission.api_path, permission.http_method):
                await self._ensure_unique(api_path, http_method, exclude_id=permission.id)

            for field, value in changes.items():
                if value is not None or field == "description":
                    setattr(permission, field, value)
            permission = await self.permission_repo.update(permission)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        return permission

    async def delete_permission(self, permission_id: int) -> None:
        try:
            permission = await self.get_permission(permission_id)
            await self.permission_repo.delete(permission)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Permission deleted id=%s", permission_id)
