"""Grouping of sale records into report buckets.

Functions here accept "sale-like" records: mappings or objects exposing
``month``, ``quantity``, ``price``, ``item_name`` and ``store_id``. Input is
assumed to be valid already; quantities and prices are summed as given.
"""

from store_sales.core.constants import TOP_PRODUCTS_LIMIT
from store_sales.core.dates import month_key


def _value(record, field):
    if isinstance(record, dict):
        return record.get(field)
    return getattr(record, field, None)


def sale_revenue(record) -> float:
    return _value(record, "quantity") * _value(record, "price")


def monthly_time_series(sales, descending=False):
    buckets = {}
    for sale in sales:
        key = month_key(_value(sale, "month"))
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = {"month": key, "count": 0, "items": 0, "revenue": 0.0}
        bucket["count"] += 1
        bucket["items"] += _value(sale, "quantity")
        bucket["revenue"] += sale_revenue(sale)
    # "YYYY-MM" keys sort chronologically
    return [buckets[key] for key in sorted(buckets, reverse=descending)]


def product_performance(sales):
    products = {}
    for sale in sales:
        name = _value(sale, "item_name")
        entry = products.get(name)
        if entry is None:
            entry = products[name] = {"item": name, "quantity": 0, "revenue": 0.0}
        entry["quantity"] += _value(sale, "quantity")
        entry["revenue"] += sale_revenue(sale)
    # dicts keep first-seen order and sorted() is stable, so ties keep input order
    return sorted(products.values(), key=lambda entry: entry["revenue"], reverse=True)


def top_products(sales, limit=TOP_PRODUCTS_LIMIT):
    return product_performance(sales)[:limit]


def store_performance_summary(rows):
    """Reshape backend store-performance rows; the backend has already grouped them."""
    return [
        {
            "id": row["store_id"],
            "name": row["store_name"],
            "sales": row["total_quantity"] or 0,
            "revenue": row["total_revenue"] or 0.0,
        }
        for row in rows
    ]


def store_totals(sales):
    total_sales = 0
    total_items = 0
    total_revenue = 0.0
    for sale in sales:
        total_sales += 1
        total_items += _value(sale, "quantity")
        total_revenue += sale_revenue(sale)
    return {
        "total_sales": total_sales,
        "total_items": total_items,
        "total_revenue": total_revenue,
    }


def summarize(sales, total_stores):
    totals = store_totals(sales)
    return {
        "total_stores": total_stores,
        "total_sales": totals["total_sales"],
        "total_items": totals["total_items"],
        "total_revenue": totals["total_revenue"],
    }


__all__ = [
    "monthly_time_series",
    "product_performance",
    "sale_revenue",
    "store_performance_summary",
    "store_totals",
    "summarize",
    "top_products",
]
