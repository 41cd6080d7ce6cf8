from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import get_current_user, get_db
from ..models.user import User
from ..schemas.permission import PermissionResponse
from ..schemas.role import RoleResponse
from ..schemas.user import CurrentUserResponse, UserResponse
from ..services.admin.user_service import UserAdminService

router = APIRouter(tags=["profile"])


@router.get("/me", response_model=CurrentUserResponse)
async def read_current_user(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return the caller, their role and the permissions it grants."""
    service = UserAdminService(db)
    role, permissions = await service.describe(current_user)
    return CurrentUserResponse(
        user=UserResponse.model_validate(current_user),
        role=RoleResponse.model_validate(role) if role else None,
        permissions=[PermissionResponse.model_validate(p) for p in permissions],
    )
