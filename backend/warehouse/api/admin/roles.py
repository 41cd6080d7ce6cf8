"""
Admin API endpoints for roles and their permission grants.

Grant changes take effect on the next request: the path interceptor reads
role grants from the database every time.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...dependencies import get_db
from ...models.permission import Permission
from ...models.role import Role
from ...schemas.permission import PermissionResponse
from ...schemas.role import (
    RoleCreate,
    RoleDetailResponse,
    RolePermissionsUpdate,
    RoleResponse,
    RoleUpdate,
)
from ...services.admin.role_service import RoleAdminService

router = APIRouter(prefix="/admin/roles", tags=["admin-roles"])


def _role_detail(role: Role, permissions: list[Permission]) -> RoleDetailResponse:
    return RoleDetailResponse(
        **RoleResponse.model_validate(role).model_dump(),
        permissions=[PermissionResponse.model_validate(p) for p in permissions],
    )


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    include_inactive: bool = Query(False, description="Include deactivated roles"),
    db: AsyncSession = Depends(get_db),
):
    service = RoleAdminService(db)
    return await service.list_roles(include_inactive=include_inactive)


@router.post("", response_model=RoleDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_role(payload: RoleCreate, db: AsyncSession = Depends(get_db)):
    service = RoleAdminService(db)
    role = await service.create_role(payload)
    return _role_detail(role, await service.get_role_permissions(role.id))


@router.get("/{role_id}", response_model=RoleDetailResponse)
async def get_role(role_id: int, db: AsyncSession = Depends(get_db)):
    service = RoleAdminService(db)
    role = await service.get_role(role_id)
    return _role_detail(role, await service.get_role_permissions(role.id))


@router.put("/{role_id}", response_model=RoleResponse)
async def update_role(role_id: int, payload: RoleUpdate, db: AsyncSession = Depends(get_db)):
    service = RoleAdminService(db)
    return await service.update_role(role_id, payload)


@router.get("/{role_id}/permissions", response_model=list[PermissionResponse])
async def get_role_permissions(role_id: int, db: AsyncSession = Depends(get_db)):
    service = RoleAdminService(db)
    return await service.get_role_permissions(role_id)


@router.put("/{role_id}/permissions", response_model=list[PermissionResponse])
async def replace_role_permissions(
    role_id: int,
    payload: RolePermissionsUpdate,
    db: AsyncSession = Depends(get_db),
):
    service = RoleAdminService(db)
    return await service.replace_permissions(role_id, payload.permission_ids)


@router.post(
    "/{role_id}/permissions/{permission_id}",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def grant_role_permission(
    role_id: int, permission_id: int, db: AsyncSession = Depends(get_db)
):
    service = RoleAdminService(db)
    return await service.grant_permission(role_id, permission_id)


@router.delete("/{role_id}/permissions/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_role_permission(
    role_id: int, permission_id: int, db: AsyncSession = Depends(get_db)
):
    service = RoleAdminService(db)
    await service.revoke_permission(role_id, permission_id)
