from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from store_sales.schemas.sale import SaleWithStore


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReportSummary(CamelModel):
    total_stores: int
    total_sales: int
    total_items: int
    total_revenue: float


class StoreListing(CamelModel):
    id: int
    name: str
    location: str


class MonthlyBucket(CamelModel):
    month: str
    count: int
    items: int
    revenue: float


class ProductSummary(CamelModel):
    item: str
    quantity: int
    revenue: float


class StoreSummary(CamelModel):
    id: int
    name: str
    sales: int
    revenue: float


class DashboardReport(CamelModel):
    summary: ReportSummary
    stores: List[StoreListing]
    time_series: List[MonthlyBucket]
    products: List[ProductSummary]
    store_performance: List[StoreSummary]


class Pagination(CamelModel):
    page: int
    page_size: int
    total: int
    total_pages: int


class SalesPage(CamelModel):
    data: List[SaleWithStore]
    pagination: Pagination
