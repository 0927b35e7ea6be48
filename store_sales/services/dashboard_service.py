from store_sales.schemas.sale import SaleWithStore
from store_sales.services import report_queries, sale_service, store_service
from store_sales.services.aggregation import (
    monthly_time_series,
    product_performance,
    store_performance_summary,
    summarize,
)
from store_sales.services.filtering import SaleFilters, filter_sales, page_bounds, total_pages


def build_dashboard_report(db, filters: SaleFilters) -> dict:
    stores = store_service.get_stores(db)
    sales = sale_service.get_sales(db, store_id=filters.store_id)
    performance = report_queries.store_performance(db)

    date_filters = SaleFilters(start_date=filters.start_date, end_date=filters.end_date)
    filtered = filter_sales(sales, date_filters)

    return {
        "summary": summarize(filtered, total_stores=len(stores)),
        "stores": [
            {"id": store.id, "name": store.name, "location": store.location}
            for store in stores
        ],
        "time_series": monthly_time_series(filtered),
        "products": product_performance(filtered),
        "store_performance": store_performance_summary(performance),
    }


def sales_page(db, filters: SaleFilters, page: int, page_size: int) -> dict:
    offset, limit = page_bounds(page, page_size)
    rows, total = sale_service.query_sales(db, filters, offset=offset, limit=limit)
    return {
        "data": [SaleWithStore.model_validate(row) for row in rows],
        "pagination": {
            "page": page,
            "page_size": page_size,
            "total": total,
            "total_pages": total_pages(total, page_size),
        },
    }


def sales_view(db, filters: SaleFilters, view: str):
    """Unpaginated ``monthly`` / ``items`` rollups over every matching sale."""
    sales = filter_sales(sale_service.get_sales(db, store_id=filters.store_id), filters)
    if view == "monthly":
        return monthly_time_series(sales)
    if view == "items":
        return product_performance(sales)
    raise ValueError("Unknown view: {}".format(view))


__all__ = ["build_dashboard_report", "sales_page", "sales_view"]
