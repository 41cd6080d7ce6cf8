from .product_service import ProductService
from .snapshot_service import InventorySnapshotService
from .stock_service import StockService

__all__ = ["InventorySnapshotService", "ProductService", "StockService"]
