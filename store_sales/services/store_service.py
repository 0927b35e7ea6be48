import logging
from typing import Optional, cast

from sqlalchemy import select
from sqlalchemy.orm import Session

from store_sales.models.store import Store

logger = logging.getLogger(__name__)

_STORE_FIELDS = ("name", "location", "manager", "phone", "email")


def get_stores(db: Session) -> list[Store]:
    stores = db.execute(select(Store).order_by(Store.name, Store.id)).scalars().all()
    return cast(list[Store], list(stores))


def get_store(db: Session, store_id: int) -> Optional[Store]:
    return db.get(Store, store_id)


def create_store(db: Session, record: dict) -> Store:
    store = Store(**{key: record[key] for key in _STORE_FIELDS if key in record})
    db.add(store)
    db.commit()
    db.refresh(store)
    logger.info("Created store %s (%s)", store.id, store.name)
    return store


def update_store(db: Session, store_id: int, changes: dict) -> Optional[Store]:
    store = db.get(Store, store_id)
    if store is None:
        return None
    for key, value in changes.items():
        if key in _STORE_FIELDS:
            setattr(store, key, value)
    db.commit()
    db.refresh(store)
    return store


def delete_store(db: Session, store_id: int) -> bool:
    store = db.get(Store, store_id)
    if store is None:
        return False
    db.delete(store)
    db.commit()
    logger.info("Deleted store %s", store_id)
    return True


__all__ = ["create_store", "delete_store", "get_store", "get_stores", "update_store"]
