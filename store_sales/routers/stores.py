import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from store_sales.core.auth import protected_page
from store_sales.core.constants import MAX_ENTRY_ROWS
from store_sales.core.dates import current_month_key
from store_sales.core.templating import flash, render, render_error, render_not_found
from store_sales.database.session import get_db
from store_sales.services import sale_service, store_service
from store_sales.services.aggregation import monthly_time_series, store_totals, top_products
from store_sales.services.forms import submit_sale_batch, submit_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stores", tags=["Stores"])

_EMPTY_STORE_FORM = {"name": "", "location": "", "manager": "", "phone": "", "email": ""}


def blank_entries(rows: int) -> list[dict]:
    count = min(max(1, rows), MAX_ENTRY_ROWS)
    return [{"item_name": "", "quantity": 1, "price": 0} for _ in range(count)]


def zip_entries(item_name, quantity, price) -> list[dict]:
    names = item_name or []
    quantities = quantity or []
    prices = price or []
    entries = []
    for index in range(max(len(names), len(quantities), len(prices))):
        entries.append(
            {
                "item_name": names[index] if index < len(names) else "",
                "quantity": quantities[index] if index < len(quantities) else "",
                "price": prices[index] if index < len(prices) else "",
            }
        )
    return entries


def sales_recorded_message(count: int) -> str:
    return "{} {} recorded successfully!".format(count, "sale" if count == 1 else "sales")


@router.get("", response_class=HTMLResponse)
def stores_page(request: Request, db: Session = Depends(get_db)):
    try:
        stores = store_service.get_stores(db)
    except SQLAlchemyError:
        logger.exception("Failed to load stores")
        return render_error(request, "Failed to load stores")
    return render(request, "stores/list.html", {"stores": stores})


@router.get("/add", response_class=HTMLResponse)
def add_store_page(request: Request):
    return protected_page(
        request,
        lambda: render(request, "stores/add.html", {"form": dict(_EMPTY_STORE_FORM), "errors": {}, "error": None}),
    )


@router.post("/add", response_class=HTMLResponse)
def add_store_submit(
    request: Request,
    name: str = Form(""),
    location: str = Form(""),
    manager: str = Form(""),
    phone: str = Form(""),
    email: str = Form(""),
    db: Session = Depends(get_db),
):
    form = {"name": name, "location": location, "manager": manager, "phone": phone, "email": email}

    def _submit():
        try:
            result, store = submit_store(db, form)
        except SQLAlchemyError:
            logger.exception("Error creating store")
            return render(
                request,
                "stores/add.html",
                {"form": form, "errors": {}, "error": "Failed to create store"},
                status_code=500,
            )
        if not result.is_valid:
            return render(
                request,
                "stores/add.html",
                {"form": form, "errors": result.field_errors, "error": result.first_error},
                status_code=400,
            )
        flash(request, 'Store "{}" created successfully!'.format(store.name))
        return RedirectResponse(url="/stores", status_code=303)

    return protected_page(request, _submit)


@router.get("/{store_id}", response_class=HTMLResponse)
def store_detail_page(store_id: int, request: Request, db: Session = Depends(get_db)):
    try:
        store = store_service.get_store(db, store_id)
        sales = sale_service.get_sales(db, store_id=store_id) if store else []
    except SQLAlchemyError:
        logger.exception("Error fetching store %s", store_id)
        return render_error(request, "Failed to load store data", "/stores", "Back to Stores")
    if store is None:
        return render_not_found(request, "Store not found", "/stores", "Back to Stores")

    return render(
        request,
        "stores/detail.html",
        {
            "store": store,
            "totals": store_totals(sales),
            "months": monthly_time_series(sales, descending=True),
            "top_products": top_products(sales),
        },
    )


def _render_store_sales(request, db, store, entries, month, errors=None, error=None, status_code=200):
    sales = sale_service.get_sales(db, store_id=store.id)
    return render(
        request,
        "stores/sales.html",
        {
            "store": store,
            "sales": sales,
            "entries": entries,
            "month": month,
            "errors": errors or {},
            "error": error,
        },
        status_code=status_code,
    )


@router.get("/{store_id}/sales", response_class=HTMLResponse)
def store_sales_page(store_id: int, request: Request, rows: int = 1, db: Session = Depends(get_db)):
    def _page():
        try:
            store = store_service.get_store(db, store_id)
            if store is None:
                return render_not_found(request, "Store not found", "/stores", "Back to Stores")
            return _render_store_sales(request, db, store, blank_entries(rows), current_month_key())
        except SQLAlchemyError:
            logger.exception("Error fetching store %s", store_id)
            return render_error(request, "Failed to load store data", "/stores", "Back to Stores")

    return protected_page(request, _page)


@router.post("/{store_id}/sales", response_class=HTMLResponse)
def store_sales_submit(
    store_id: int,
    request: Request,
    month: str = Form(""),
    item_name: Optional[List[str]] = Form(None),
    quantity: Optional[List[str]] = Form(None),
    price: Optional[List[str]] = Form(None),
    db: Session = Depends(get_db),
):
    entries = zip_entries(item_name, quantity, price)

    def _submit():
        try:
            store = store_service.get_store(db, store_id)
            if store is None:
                return render_not_found(request, "Store not found", "/stores", "Back to Stores")
            result, created = submit_sale_batch(db, store_id, month, entries)
            if not result.is_valid:
                return _render_store_sales(
                    request, db, store, entries or blank_entries(1), month,
                    errors=result.field_errors, error=result.first_error, status_code=400,
                )
        except SQLAlchemyError:
            logger.exception("Error creating sales for store %s", store_id)
            return render_error(request, "Failed to record sales", "/stores/{}/sales".format(store_id), "Back")
        flash(request, sales_recorded_message(len(created)))
        return RedirectResponse(url="/stores/{}/sales".format(store_id), status_code=303)

    return protected_page(request, _submit)
