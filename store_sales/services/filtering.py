import math
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from store_sales.core.dates import normalize_date


def _value(record, name):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def _parse_bound(value, label):
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    parsed = normalize_date(value)
    if parsed is None:
        raise ValueError("{} must be an ISO date (YYYY-MM-DD).".format(label))
    return parsed


@dataclass(frozen=True)
class SaleFilters:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    store_id: Optional[int] = None
    item: Optional[str] = None

    @classmethod
    def from_params(cls, start_date=None, end_date=None, store_id=None, item=None):
        item_text = str(item).strip() if item is not None else ""
        return cls(
            start_date=_parse_bound(start_date, "startDate"),
            end_date=_parse_bound(end_date, "endDate"),
            store_id=store_id,
            item=item_text or None,
        )

    def matches(self, sale) -> bool:
        month = normalize_date(_value(sale, "month"))
        if self.start_date is not None and (month is None or month < self.start_date):
            return False
        if self.end_date is not None and (month is None or month > self.end_date):
            return False
        if self.store_id is not None and _value(sale, "store_id") != self.store_id:
            return False
        if self.item:
            name = _value(sale, "item_name") or ""
            if self.item.lower() not in name.lower():
                return False
        return True


def filter_sales(sales, filters: SaleFilters):
    return [sale for sale in sales if filters.matches(sale)]


@dataclass
class Page:
    page: int
    page_size: int
    total: int
    total_pages: int
    data: list = field(default_factory=list)


def page_bounds(page: int, page_size: int) -> tuple[int, int]:
    if page < 1:
        raise ValueError("page must be >= 1.")
    if page_size < 1:
        raise ValueError("pageSize must be >= 1.")
    return (page - 1) * page_size, page_size


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total else 0


def paginate(items, page: int = 1, page_size: int = 50) -> Page:
    offset, limit = page_bounds(page, page_size)
    items = list(items)
    return Page(
        page=page,
        page_size=page_size,
        total=len(items),
        total_pages=total_pages(len(items), page_size),
        data=items[offset:offset + limit],
    )


__all__ = ["Page", "SaleFilters", "filter_sales", "page_bounds", "paginate", "total_pages"]
