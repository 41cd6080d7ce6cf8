import pytest

from db_helpers import add_role, add_user, sqlite_session_factory
from warehouse.errors import ConflictError, NotFoundError, ValidationError
from warehouse.schemas.permission import PermissionCreate, PermissionUpdate
from warehouse.schemas.role import RoleCreate
from warehouse.schemas.user import UserCreate, UserUpdate
from warehouse.services.admin import (
    PermissionAdminService,
    RoleAdminService,
    UserAdminService,
)


def _permission(name: str, api_path: str, http_method: str = "GET") -> PermissionCreate:
    return PermissionCreate(name=name, api_path=api_path, http_method=http_method, module="test")


class TestPermissionAdmin:
    @pytest.mark.anyio
    async def test_method_is_uppercased_and_pair_is_unique(self):
        async with sqlite_session_factory() as session_factory:
            async with session_factory() as session:
                service = PermissionAdminService(session)

                created = await service.create_permission(
                    _permission("report.view", "/api/reports/{id}", "get")
                )
                created_id, created_method = created.id, created.http_method
                with pytest.raises(ConflictError) as exc_info:
                    await service.create_permission(
                        _permission("report.read", "/api/reports/{id}", "GET")
                    )

        assert created_method == "GET"
        assert exc_info.value.details == {"permission_id": created_id}

    def test_invalid_pattern_is_rejected_by_schema(self):
        with pytest.raises(ValueError):
            _permission("broken", "/api/reports/")

    @pytest.mark.anyio
    async def test_update_to_taken_pattern_conflicts(self):
        async with sqlite_session_factory() as session_factory:
            async with session_factory() as session:
                service = PermissionAdminService(session)
                await service.create_permission(_permission("a", "/api/a"))
                second = await service.create_permission(_permission("b", "/api/b"))

                with pytest.raises(ConflictError):
                    await service.update_permission(second.id, PermissionUpdate(api_path="/api/a"))


class TestRoleAdmin:
    @pytest.mark.anyio
    async def test_create_role_with_unknown_permission_fails(self):
        async with sqlite_session_factory() as session_factory:
            async with session_factory() as session:
                service = RoleAdminService(session)

                with pytest.raises(NotFoundError) as exc_info:
                    await service.create_role(RoleCreate(name="auditor", permission_ids=[99]))

        assert exc_info.value.details == {"permission_ids": [99]}

    @pytest.mark.anyio
    async def test_grant_and_revoke_round_trip(self):
        async with sqlite_session_factory() as session_factory:
            async with session_factory() as session:
                permission = await PermissionAdminService(session).create_permission(
                    _permission("report.view", "/api/reports")
                )
                service = RoleAdminService(session)
                role = await service.create_role(RoleCreate(name="auditor"))
                # Failed calls roll back and expire loaded objects
                role_id, permission_id = role.id, permission.id

                await service.grant_permission(role_id, permission_id)
                with pytest.raises(ConflictError):
                    await service.grant_permission(role_id, permission_id)
                granted = [p.name for p in await service.get_role_permissions(role_id)]

                await service.revoke_permission(role_id, permission_id)
                with pytest.raises(NotFoundError):
                    await service.revoke_permission(role_id, permission_id)
                remaining = await service.get_role_permissions(role_id)

        assert granted == ["report.view"]
        assert remaining == []


class TestUserAdmin:
    @pytest.mark.anyio
    async def test_duplicate_username_conflicts(self):
        async with sqlite_session_factory() as session_factory:
            async with session_factory() as session:
                await add_user(session, "clerk")
                await session.commit()

                payload = UserCreate(
                    username="clerk", email="other@example.com", password="correct-horse"
                )
                with pytest.raises(ConflictError):
                    await UserAdminService(session).create_user(payload)

    @pytest.mark.anyio
    async def test_unknown_role_is_not_found(self):
        async with sqlite_session_factory() as session_factory:
            async with session_factory() as session:
                payload = UserCreate(
                    username="clerk",
                    email="clerk@example.com",
                    password="correct-horse",
                    role_id=404,
                )
                with pytest.raises(NotFoundError):
                    await UserAdminService(session).create_user(payload)

    @pytest.mark.anyio
    async def test_password_is_stored_hashed(self):
        async with sqlite_session_factory() as session_factory:
            async with session_factory() as session:
                role = await add_role(session, "staff")
                await session.commit()

                user = await UserAdminService(session).create_user(
                    UserCreate(
                        username="clerk",
                        email="clerk@example.com",
                        password="correct-horse",
                        role_id=role.id,
                    )
                )

        assert user.role_id == role.id
        assert user.password_hash.startswith("pbkdf2_sha256$")
        assert "correct-horse" not in user.password_hash

    @pytest.mark.anyio
    async def test_users_cannot_deactivate_or_delete_themselves(self):
        async with sqlite_session_factory() as session_factory:
            async with session_factory() as session:
                admin = await add_user(session, "admin")
                await session.commit()
                service = UserAdminService(session)

                with pytest.raises(ValidationError):
                    await service.update_user(admin.id, UserUpdate(is_active=False), actor=admin)
                await session.refresh(admin)
                with pytest.raises(ValidationError):
                    await service.delete_user(admin.id, actor=admin)
