from store_sales.services.dashboard_service import build_dashboard_report, sales_page, sales_view
from store_sales.services.forms import submit_sale_batch, submit_store

__all__ = [
    "build_dashboard_report",
    "sales_page",
    "sales_view",
    "submit_sale_batch",
    "submit_store",
]
