from .base import Base
from .user import User
from .role import Role
from .permission import Permission
from .role_permission import RolePermission
from .product import Product
from .stock_in import StockInForm, StockInItem
from .stock_out import StockOutForm, StockOutItem
from .inventory_snapshot import InventorySnapshot

__all__ = [
    "Base",
    "User",
    "Role",
    "Permission",
    "RolePermission",
    "Product",
    "StockInForm",
    "StockInItem",
    "StockOutForm",
    "StockOutItem",
    "InventorySnapshot",
]
