import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from store_sales.core.auth import protected_page
from store_sales.core.dates import current_month_key
from store_sales.core.templating import flash, render, render_error
from store_sales.database.session import get_db
from store_sales.routers.stores import blank_entries, sales_recorded_message, zip_entries
from store_sales.services import sale_service, store_service
from store_sales.services.aggregation import monthly_time_series
from store_sales.services.forms import submit_sale_batch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.get("", response_class=HTMLResponse)
def sales_page(request: Request, db: Session = Depends(get_db)):
    try:
        sales = sale_service.get_sales(db)
    except SQLAlchemyError:
        logger.exception("Failed to load sales")
        return render_error(request, "Failed to load sales")
    return render(
        request,
        "sales/list.html",
        {"sales": sales, "months": monthly_time_series(sales, descending=True)},
    )


def _render_add_sales(request, db, entries, store_id, month, errors=None, error=None, status_code=200, default_store=False):
    stores = store_service.get_stores(db)
    if default_store and store_id in (None, "") and stores:
        store_id = stores[0].id
    return render(
        request,
        "sales/add.html",
        {
            "stores": stores,
            "store_id": store_id,
            "entries": entries,
            "month": month,
            "errors": errors or {},
            "error": error,
        },
        status_code=status_code,
    )


@router.get("/add", response_class=HTMLResponse)
def add_sales_page(request: Request, rows: int = 1, store_id: Optional[int] = None, db: Session = Depends(get_db)):
    def _page():
        try:
            return _render_add_sales(
                request, db, blank_entries(rows), store_id, current_month_key(), default_store=True
            )
        except SQLAlchemyError:
            logger.exception("Error fetching stores")
            return render_error(request, "Failed to load stores. Please try again.", "/sales", "Back to Sales")

    return protected_page(request, _page)


@router.post("/add", response_class=HTMLResponse)
def add_sales_submit(
    request: Request,
    store_id: str = Form(""),
    month: str = Form(""),
    item_name: Optional[List[str]] = Form(None),
    quantity: Optional[List[str]] = Form(None),
    price: Optional[List[str]] = Form(None),
    db: Session = Depends(get_db),
):
    entries = zip_entries(item_name, quantity, price)

    def _submit():
        try:
            result, created = submit_sale_batch(db, store_id, month, entries)
            if not result.is_valid:
                return _render_add_sales(
                    request, db, entries or blank_entries(1), store_id, month,
                    errors=result.field_errors, error=result.first_error, status_code=400,
                )
        except SQLAlchemyError:
            logger.exception("Error creating sales")
            return render_error(request, "Failed to record sales", "/sales/add", "Back")
        flash(request, sales_recorded_message(len(created)))
        return RedirectResponse(url="/sales", status_code=303)

    return protected_page(request, _submit)
