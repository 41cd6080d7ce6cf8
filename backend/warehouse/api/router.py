from fastapi import APIRouter, Depends

from ..auth.dependencies import enforce_path_permission
from . import me, products, snapshots, stock
from .admin import permissions as admin_permissions
from .admin import roles as admin_roles
from .admin import users as admin_users

# Every /api route passes through the path permission check
router = APIRouter(prefix="/api", dependencies=[Depends(enforce_path_permission)])

_admin_routers = [
    admin_users.router,
    admin_roles.router,
    admin_permissions.router,
]

_inventory_routers = [
    products.router,
    stock.stock_in_router,
    stock.stock_out_router,
    snapshots.router,
]

for _router in [me.router, *_admin_routers, *_inventory_routers]:
    router.include_router(_router)
