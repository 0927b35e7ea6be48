from store_sales.models.sale import Sale
from store_sales.models.store import Store

__all__ = ["Sale", "Store"]
