from __future__ import annotations

from typing import Protocol


class PermissionRecord(Protocol):
    id: int
    name: str
    api_path: str
    http_method: str
    module: str


class PermissionLookupPort(Protocol):
    async def find_by_path_and_method(
        self, api_path: str, http_method: str
    ) -> PermissionRecord | None:
        ...

    async def list_by_method(self, http_method: str) -> list[PermissionRecord]:
        ...


class RoleGrantPort(Protocol):
    async def role_has_permission(self, role_id: int, permission_id: int) -> bool:
        ...
