from store_sales.routers.api import router as api_router
from store_sales.routers.auth import router as auth_router
from store_sales.routers.dashboard import router as dashboard_router
from store_sales.routers.health import router as health_router
from store_sales.routers.reports import router as reports_router
from store_sales.routers.sales import router as sales_router
from store_sales.routers.stores import router as stores_router

__all__ = [
    "api_router",
    "auth_router",
    "dashboard_router",
    "health_router",
    "reports_router",
    "sales_router",
    "stores_router",
]
