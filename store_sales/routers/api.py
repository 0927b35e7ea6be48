import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from store_sales.core.auth import require_login_api
from store_sales.core.errors import error_body
from store_sales.database.session import get_db
from store_sales.schemas.sale import SaleBatchCreate, SaleRead, SaleUpdate, SaleWithStore
from store_sales.schemas.store import StoreRead, StoreUpdate
from store_sales.services import sale_service, store_service
from store_sales.services.forms import FormResult, StoreRecordBuilder, submit_sale_batch, submit_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Records"])


def _invalid(result: FormResult) -> JSONResponse:
    return JSONResponse(status_code=400, content=error_body(result.first_error, result.field_errors))


def _write_failed(db: Session, message: str) -> JSONResponse:
    """Called from an ``except`` block: roll back, log the active error, answer 500."""
    db.rollback()
    logger.exception(message)
    return JSONResponse(status_code=500, content=error_body(message))


@router.get("/stores", response_model=list[StoreRead])
def list_stores(db: Session = Depends(get_db)):
    return store_service.get_stores(db)


@router.get("/stores/{store_id}", response_model=StoreRead)
def read_store(store_id: int, db: Session = Depends(get_db)):
    store = store_service.get_store(db, store_id)
    if store is None:
        raise HTTPException(status_code=404, detail="Store not found.")
    return store


@router.post("/stores", response_model=StoreRead, status_code=201)
def create_store(payload: dict, request: Request, db: Session = Depends(get_db)):
    require_login_api(request)
    try:
        result, store = submit_store(db, payload)
    except SQLAlchemyError:
        return _write_failed(db, "Failed to create store")
    if not result.is_valid:
        return _invalid(result)
    return store


@router.patch("/stores/{store_id}", response_model=StoreRead)
def update_store(store_id: int, payload: StoreUpdate, request: Request, db: Session = Depends(get_db)):
    require_login_api(request)
    changes = payload.model_dump(exclude_unset=True)
    for name in StoreRecordBuilder.OPTIONAL_FIELDS:
        # clearing an optional field stores NULL, not an empty string
        if name in changes and not changes[name]:
            changes[name] = None
    try:
        store = store_service.update_store(db, store_id, changes)
    except SQLAlchemyError:
        return _write_failed(db, "Failed to update store")
    if store is None:
        raise HTTPException(status_code=404, detail="Store not found.")
    return store


@router.delete("/stores/{store_id}")
def delete_store(store_id: int, request: Request, db: Session = Depends(get_db)):
    require_login_api(request)
    try:
        deleted = store_service.delete_store(db, store_id)
    except SQLAlchemyError:
        return _write_failed(db, "Failed to delete store")
    if not deleted:
        raise HTTPException(status_code=404, detail="Store not found.")
    return {"deleted": True}


@router.post("/sales/batch", response_model=list[SaleRead], status_code=201)
def create_sales_batch(payload: SaleBatchCreate, request: Request, db: Session = Depends(get_db)):
    require_login_api(request)
    try:
        result, created = submit_sale_batch(db, payload.store_id, payload.month, payload.items)
    except SQLAlchemyError:
        return _write_failed(db, "Failed to record sales")
    if not result.is_valid:
        return _invalid(result)
    return created


@router.get("/sales/{sale_id}", response_model=SaleWithStore)
def read_sale(sale_id: int, db: Session = Depends(get_db)):
    sale = sale_service.get_sale(db, sale_id)
    if sale is None:
        raise HTTPException(status_code=404, detail="Sale not found.")
    return sale


@router.patch("/sales/{sale_id}", response_model=SaleRead)
def update_sale(sale_id: int, payload: SaleUpdate, request: Request, db: Session = Depends(get_db)):
    require_login_api(request)
    try:
        sale = sale_service.update_sale(db, sale_id, payload.model_dump(exclude_unset=True))
    except SQLAlchemyError:
        return _write_failed(db, "Failed to update sale")
    if sale is None:
        raise HTTPException(status_code=404, detail="Sale not found.")
    return sale


@router.delete("/sales/{sale_id}")
def delete_sale(sale_id: int, request: Request, db: Session = Depends(get_db)):
    require_login_api(request)
    try:
        deleted = sale_service.delete_sale(db, sale_id)
    except SQLAlchemyError:
        return _write_failed(db, "Failed to delete sale")
    if not deleted:
        raise HTTPException(status_code=404, detail="Sale not found.")
    return {"deleted": True}
