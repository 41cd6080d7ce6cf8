"""Admin API endpoints for the permission table."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...dependencies import get_db
from ...schemas.permission import PermissionCreate, PermissionResponse, PermissionUpdate
from ...services.admin.permission_service import PermissionAdminService

router = APIRouter(prefix="/admin/permissions", tags=["admin-permissions"])


@router.get("", response_model=list[PermissionResponse])
async def list_permissions(
    module: str | None = Query(None, description="Filter by module"),
    db: AsyncSession = Depends(get_db),
):
    service = PermissionAdminService(db)
    return await service.list_permissions(module=module)


@router.post("", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED)
async def create_permission(payload: PermissionCreate, db: AsyncSession = Depends(get_db)):
    service = PermissionAdminService(db)
    return await service.create_permission(payload)


@router.get("/{permission_id}", response_model=PermissionResponse)
async def get_permission(permission_id: int, db: AsyncSession = Depends(get_db)):
    service = PermissionAdminService(db)
    return await service.get_permission(permission_id)


@router.put("/{permission_id}", response_model=PermissionResponse)
async def update_permission(
    permission_id: int,
    payload: PermissionUpdate,
    db: AsyncSession = Depends(get_db),
):
    service = PermissionAdminService(db)
    return await service.update_permission(permission_id, payload)


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_permission(permission_id: int, db: AsyncSession = Depends(get_db)):
    service = PermissionAdminService(db)
    await service.delete_permission(permission_id)
