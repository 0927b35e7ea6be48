import logging

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from store_sales.config import get_settings
from store_sales.core.constants import DEFAULT_REPORT_VIEW, REPORT_VIEWS
from store_sales.core.errors import error_body
from store_sales.database.session import get_db
from store_sales.schemas.report import DashboardReport, MonthlyBucket, ProductSummary, SalesPage
from store_sales.services import report_queries
from store_sales.services.dashboard_service import build_dashboard_report, sales_page, sales_view
from store_sales.services.filtering import SaleFilters

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Reports"])


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_body(message))


def _dump(model) -> JSONResponse:
    return JSONResponse(content=jsonable_encoder(model.model_dump(by_alias=True)))


@router.get("/dashboard")
def dashboard_report(
    store_id: int | None = Query(None, alias="storeId"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    try:
        filters = SaleFilters.from_params(start_date=start_date, end_date=end_date, store_id=store_id)
    except ValueError as exc:
        return _error(str(exc), 400)
    try:
        report = build_dashboard_report(db, filters)
    except SQLAlchemyError:
        logger.exception("Dashboard API error")
        return _error("Failed to fetch dashboard data", 500)
    return _dump(DashboardReport.model_validate(report))


@router.get("/sales")
def list_sales(
    store_id: int | None = Query(None, alias="storeId"),
    item: str | None = Query(None, description="Item name substring"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, alias="pageSize", ge=1),
    view: str = Query(DEFAULT_REPORT_VIEW, description="detailed | monthly | items"),
    db: Session = Depends(get_db),
):
    settings = get_settings()
    if view not in REPORT_VIEWS:
        return _error("view must be one of: {}".format(", ".join(REPORT_VIEWS)), 400)
    if page_size is None:
        page_size = settings.DEFAULT_PAGE_SIZE
    if page_size > settings.MAX_PAGE_SIZE:
        return _error("pageSize must be at most {}.".format(settings.MAX_PAGE_SIZE), 400)

    try:
        filters = SaleFilters.from_params(
            start_date=start_date, end_date=end_date, store_id=store_id, item=item
        )
    except ValueError as exc:
        return _error(str(exc), 400)

    try:
        if view == "detailed":
            return _dump(SalesPage.model_validate(sales_page(db, filters, page, page_size)))
        rows = sales_view(db, filters, view)
    except SQLAlchemyError:
        logger.exception("Sales API error")
        return _error("Failed to fetch sales", 500)

    model = MonthlyBucket if view == "monthly" else ProductSummary
    return JSONResponse(
        content=jsonable_encoder([model.model_validate(row).model_dump(by_alias=True) for row in rows])
    )


@router.get("/reports/monthly-sales")
def monthly_sales_report(db: Session = Depends(get_db)):
    try:
        return jsonable_encoder(report_queries.monthly_sales(db))
    except SQLAlchemyError:
        logger.exception("Monthly sales report error")
        return _error("Failed to fetch monthly sales", 500)


@router.get("/reports/top-items")
def top_items_report(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    try:
        return jsonable_encoder(report_queries.top_items(db, limit=limit))
    except SQLAlchemyError:
        logger.exception("Top items report error")
        return _error("Failed to fetch top items", 500)


@router.get("/reports/store-performance")
def store_performance_report(db: Session = Depends(get_db)):
    try:
        return jsonable_encoder(report_queries.store_performance(db))
    except SQLAlchemyError:
        logger.exception("Store performance report error")
        return _error("Failed to fetch store performance", 500)
