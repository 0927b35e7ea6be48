import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from store_sales.core.auth import protected_page
from store_sales.core.templating import render, render_error
from store_sales.database.session import get_db
from store_sales.services.dashboard_service import build_dashboard_report
from store_sales.services.filtering import SaleFilters

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_class=HTMLResponse)
def dashboard_page(
    request: Request,
    store_id: int | None = Query(None, alias="storeId"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    def _page():
        params = {"storeId": store_id, "startDate": start_date or "", "endDate": end_date or ""}
        try:
            filters = SaleFilters.from_params(start_date=start_date, end_date=end_date, store_id=store_id)
        except ValueError as exc:
            return render(request, "dashboard.html", {"report": None, "params": params, "error": str(exc)}, status_code=400)
        try:
            report = build_dashboard_report(db, filters)
        except SQLAlchemyError:
            logger.exception("Dashboard page error")
            return render_error(request, "Failed to fetch dashboard data")
        return render(request, "dashboard.html", {"report": report, "params": params, "error": None})

    return protected_page(request, _page)
