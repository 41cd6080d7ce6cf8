"""Declarative catalogue of API permissions and default role grants.

Each entry guards one ``(METHOD, path pattern)`` pair under ``/api``. The
seed script writes these rows; administrators may add more at runtime.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class PermissionSpec:
    name: str
    http_method: str
    api_path: str
    module: str
    description: str


PERMISSION_CATALOG: Final[tuple[PermissionSpec, ...]] = (
    # Profile
    PermissionSpec("profile.view", "GET", "/api/me", "profile", "View own profile and permissions"),
    # Users
    PermissionSpec("user.list", "GET", "/api/admin/users", "user", "List users"),
    PermissionSpec("user.create", "POST", "/api/admin/users", "user", "Create users"),
    PermissionSpec("user.view", "GET", "/api/admin/users/{id}", "user", "View a user"),
    PermissionSpec("user.update", "PUT", "/api/admin/users/{id}", "user", "Update a user"),
    PermissionSpec("user.delete", "DELETE", "/api/admin/users/{id}", "user", "Delete a user"),
    # Roles
    PermissionSpec("role.list", "GET", "/api/admin/roles", "role", "List roles"),
    PermissionSpec("role.create", "POST", "/api/admin/roles", "role", "Create roles"),
    PermissionSpec("role.view", "GET", "/api/admin/roles/{id}", "role", "View a role"),
    PermissionSpec("role.update", "PUT", "/api/admin/roles/{id}", "role", "Update a role"),
    PermissionSpec(
        "role.permissions.view", "GET", "/api/admin/roles/{id}/permissions", "role",
        "View permissions granted to a role",
    ),
    PermissionSpec(
        "role.permissions.replace", "PUT", "/api/admin/roles/{id}/permissions", "role",
        "Replace the permissions granted to a role",
    ),
    PermissionSpec(
        "role.permissions.grant", "POST", "/api/admin/roles/{id}/permissions/{permissionId}",
        "role", "Grant one permission to a role",
    ),
    PermissionSpec(
        "role.permissions.revoke", "DELETE", "/api/admin/roles/{id}/permissions/{permissionId}",
        "role", "Revoke one permission from a role",
    ),
    # Permissions
    PermissionSpec("permission.list", "GET", "/api/admin/permissions", "permission", "List permissions"),
    PermissionSpec("permission.create", "POST", "/api/admin/permissions", "permission", "Create permissions"),
    PermissionSpec("permission.view", "GET", "/api/admin/permissions/{id}", "permission", "View a permission"),
    PermissionSpec("permission.update", "PUT", "/api/admin/permissions/{id}", "permission", "Update a permission"),
    PermissionSpec("permission.delete", "DELETE", "/api/admin/permissions/{id}", "permission", "Delete a permission"),
    # Products
    PermissionSpec("product.list", "GET", "/api/products", "product", "List products"),
    PermissionSpec("product.create", "POST", "/api/products", "product", "Create products"),
    PermissionSpec("product.view", "GET", "/api/products/{productCode}", "product", "View a product"),
    PermissionSpec("product.update", "PUT", "/api/products/{productCode}", "product", "Update a product"),
    # Stock-in
    PermissionSpec("stock_in.list", "GET", "/api/stock-in", "stock_in", "List stock-in forms"),
    PermissionSpec("stock_in.create", "POST", "/api/stock-in", "stock_in", "Record a stock-in form"),
    PermissionSpec("stock_in.view", "GET", "/api/stock-in/{id}", "stock_in", "View a stock-in form"),
    # Stock-out
    PermissionSpec("stock_out.list", "GET", "/api/stock-out", "stock_out", "List stock-out forms"),
    PermissionSpec("stock_out.create", "POST", "/api/stock-out", "stock_out", "Record a stock-out form"),
    PermissionSpec("stock_out.view", "GET", "/api/stock-out/{id}", "stock_out", "View a stock-out form"),
    # Snapshots
    PermissionSpec(
        "snapshot.list", "GET", "/api/inventory-snapshots", "inventory",
        "List monthly inventory snapshots",
    ),
    PermissionSpec(
        "snapshot.create", "POST", "/api/inventory-snapshots/{year}/{month}", "inventory",
        "Compute the inventory snapshot for a month",
    ),
)

_ALL_PERMISSIONS: Final[frozenset[str]] = frozenset(spec.name for spec in PERMISSION_CATALOG)

_INVENTORY_READ: Final[frozenset[str]] = frozenset({
    "product.list", "product.view",
    "stock_in.list", "stock_in.view",
    "stock_out.list", "stock_out.view",
    "snapshot.list",
})

DEFAULT_ROLE_PERMISSIONS: Final[dict[str, frozenset[str]]] = {
    "admin": _ALL_PERMISSIONS,
    "manager": _INVENTORY_READ | frozenset({
        "profile.view",
        "product.create", "product.update",
        "stock_in.create", "stock_out.create",
        "snapshot.create",
        "user.list", "user.view",
    }),
    "staff": _INVENTORY_READ | frozenset({
        "profile.view",
        "stock_in.create", "stock_out.create",
    }),
}

DEFAULT_ROLE_DESCRIPTIONS: Final[dict[str, str]] = {
    "admin": "Full access including user, role and permission administration",
    "manager": "Manages products, stock movements and monthly snapshots",
    "staff": "Records stock movements and reads inventory",
}
