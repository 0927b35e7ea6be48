import logging
from typing import Optional, cast

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from store_sales.core.dates import first_of_month
from store_sales.models.sale import Sale

logger = logging.getLogger(__name__)

_SALE_FIELDS = ("store_id", "item_name", "month", "quantity", "price")


def _sales_query(filters=None):
    stmt = select(Sale)
    if filters is None:
        return stmt
    if filters.store_id is not None:
        stmt = stmt.where(Sale.store_id == filters.store_id)
    if filters.start_date is not None:
        stmt = stmt.where(Sale.month >= filters.start_date)
    if filters.end_date is not None:
        stmt = stmt.where(Sale.month <= filters.end_date)
    if filters.item:
        stmt = stmt.where(func.lower(Sale.item_name).contains(filters.item.lower(), autoescape=True))
    return stmt


def get_sales(db: Session, store_id: Optional[int] = None) -> list[Sale]:
    stmt = select(Sale).options(joinedload(Sale.store)).order_by(Sale.month.desc(), Sale.id)
    if store_id is not None:
        stmt = stmt.where(Sale.store_id == store_id)
    sales = db.execute(stmt).scalars().all()
    return cast(list[Sale], list(sales))


def query_sales(db: Session, filters, offset: int, limit: int) -> tuple[list[Sale], int]:
    """One page of filtered sales plus the total number of matching rows."""
    base = _sales_query(filters)
    total = db.execute(select(func.count()).select_from(base.subquery())).scalar_one()
    rows = (
        db.execute(
            base.options(joinedload(Sale.store))
            .order_by(Sale.month.desc(), Sale.id)
            .offset(offset)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return cast(list[Sale], list(rows)), int(total)


def get_sale(db: Session, sale_id: int) -> Optional[Sale]:
    return db.get(Sale, sale_id)


def create_sale(db: Session, record: dict) -> Sale:
    values = {key: record[key] for key in _SALE_FIELDS if key in record}
    values["month"] = first_of_month(values.get("month"))
    sale = Sale(**values)
    db.add(sale)
    db.commit()
    db.refresh(sale)
    return sale


def update_sale(db: Session, sale_id: int, changes: dict) -> Optional[Sale]:
    sale = db.get(Sale, sale_id)
    if sale is None:
        return None
    for key, value in changes.items():
        if key not in _SALE_FIELDS:
            continue
        if key == "month":
            value = first_of_month(value)
        setattr(sale, key, value)
    db.commit()
    db.refresh(sale)
    return sale


def delete_sale(db: Session, sale_id: int) -> bool:
    sale = db.get(Sale, sale_id)
    if sale is None:
        return False
    db.delete(sale)
    db.commit()
    logger.info("Deleted sale %s", sale_id)
    return True


__all__ = [
    "create_sale",
    "delete_sale",
    "get_sale",
    "get_sales",
    "query_sales",
    "update_sale",
]
