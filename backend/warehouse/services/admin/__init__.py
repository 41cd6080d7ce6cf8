from .permission_service import PermissionAdminService
from .role_service import RoleAdminService
from .user_service import UserAdminService

__all__ = ["PermissionAdminService", "RoleAdminService", "UserAdminService"]
