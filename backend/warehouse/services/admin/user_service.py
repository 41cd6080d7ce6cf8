"""Administrative operations on user accounts."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ...crud.permission import PermissionRepository
from ...crud.role import RoleRepository
from ...crud.user import UserRepository
from ...errors import ConflictError, NotFoundError, ValidationError
from ...models.permission import Permission
from ...models.role import Role
from ...models.user import User
from ...schemas.user import UserCreate, UserUpdate
from ...utils.security import hash_password

logger = logging.getLogger("warehouse.admin")


class UserAdminService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
        self.role_repo = RoleRepository(session)
        self.permission_repo = PermissionRepository(session)

    async def get_user(self, user_id: int) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def list_users(
        self, role_id: int | None = None, limit: int = 100, offset: int = 0
    ) -> list[User]:
        return await self.user_repo.list_all(role_id=role_id, limit=limit, offset=offset)

    async def _ensure_role_exists(self, role_id: int | None) -> None:
        if role_id is not None and await self.role_repo.get_by_id(role_id) is None:
            raise NotFoundError(f"Role {role_id} not found")

    async def create_user(self, payload: UserCreate) -> User:
        try:
            if await self.user_repo.find_conflicting(payload.username, payload.email) is not None:
                raise ConflictError("Username or email already in use")
            await self._ensure_role_exists(payload.role_id)
            user = await self.user_repo.create(
                User(
                    username=payload.username,
                    email=payload.email,
                    full_name=payload.full_name,
                    password_hash=hash_password(payload.password),
                    phone_number=payload.phone_number,
                    address=payload.address,
                    is_active=payload.is_active,
                    role_id=payload.role_id,
                )
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User created id=%s username=%s role_id=%s", user.id, user.username, user.role_id)
        return user

    async def update_user(self, user_id: int, payload: UserUpdate, *, actor: User | None = None) -> User:
        try:
            user = await self.get_user(user_id)
            changes = payload.model_dump(exclude_unset=True)

            if changes.get("email") and changes["email"] != user.email:
                conflict = await self.user_repo.find_conflicting(None, changes["email"], exclude_id=user.id)
                if conflict is not None:
                    raise ConflictError("Email already in use")
            if "role_id" in changes:
                await self._ensure_role_exists(changes["role_id"])
            if actor is not None and actor.id == user.id and changes.get("is_active") is False:
                raise ValidationError("Users cannot deactivate their own account")

            password = changes.pop("password", None)
            if password:
                user.password_hash = hash_password(password)
            for field, value in changes.items():
                if value is None and field not in {"full_name", "phone_number", "address", "role_id"}:
                    continue
                setattr(user, field, value)

            user = await self.user_repo.update(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return user

    async def delete_user(self, user_id: int, *, actor: User | None = None) -> None:
        try:
            user = await self.get_user(user_id)
            if actor is not None and actor.id == user.id:
                raise ValidationError("Users cannot delete their own account")
            await self.user_repo.delete(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("User deleted id=%s", user_id)

    async def describe(self, user: User) -> tuple[Role | None, list[Permission]]:
        """Return the user's role and the permissions it currently grants."""
        if user.role_id is None:
            return None, []
        role = await self.role_repo.get_by_id(user.role_id)
        if role is None:
            return None, []
        permissions = await self.permission_repo.get_active_role_permissions(role.id)
        return role, permissions
