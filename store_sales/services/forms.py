"""Validation and submission for the store and sale-batch forms.

Validation always runs to completion before any write. A sale batch is then
written one row at a time with a commit per row; if a write fails part way,
the rows already written stay in place.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from store_sales.core.dates import first_of_month
from store_sales.schemas.store import StoreCreate
from store_sales.services import sale_service, store_service

logger = logging.getLogger(__name__)

_MAX_INTEGER = 2**63 - 1


@dataclass
class FormResult:
    values: dict[str, Any]
    field_errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.field_errors

    @property
    def first_error(self) -> Optional[str]:
        return next(iter(self.field_errors.values()), None)


class StoreRecordBuilder:
    """Required store fields, with optional contact fields merged only when non-empty."""

    OPTIONAL_FIELDS = ("manager", "phone", "email")

    def __init__(self, name: str, location: str):
        self._record = {"name": name, "location": location}

    def with_optional(self, name: str, value) -> "StoreRecordBuilder":
        if name not in self.OPTIONAL_FIELDS:
            raise KeyError(name)
        if value is not None and str(value).strip() != "":
            self._record[name] = str(value).strip()
        return self

    def build(self) -> dict:
        return dict(self._record)

    @classmethod
    def from_schema(cls, store: StoreCreate) -> "StoreRecordBuilder":
        builder = cls(store.name, store.location)
        for name in cls.OPTIONAL_FIELDS:
            builder.with_optional(name, getattr(store, name))
        return builder


def field_errors_from(exc: ValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ())) or "form"
        errors.setdefault(loc, error.get("msg", "Invalid value"))
    return errors


def validate_store_form(data) -> FormResult:
    raw = data.model_dump() if isinstance(data, BaseModel) else dict(data)
    try:
        store = StoreCreate.model_validate(raw)
    except ValidationError as exc:
        return FormResult(values=raw, field_errors=field_errors_from(exc))
    return FormResult(values=StoreRecordBuilder.from_schema(store).build())


def _entry_value(entry, name, default=None):
    if isinstance(entry, dict):
        return entry.get(name, default)
    return getattr(entry, name, default)


def _to_float(value) -> float:
    """Number typed into a form field; unparseable or non-finite input reads as 0."""
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value) if isinstance(value, (int, float)) else float(str(value).strip())
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _to_int(value) -> int:
    if isinstance(value, bool):
        return int(value)
    number = value if isinstance(value, int) else int(_to_float(value))
    # out of range for an INTEGER column
    return number if abs(number) <= _MAX_INTEGER else 0


def _to_store_id(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def validate_sale_batch(store_id, month, entries) -> FormResult:
    errors: dict[str, str] = {}
    store_value = _to_store_id(store_id)
    month_value = first_of_month(month)

    if store_value is None:
        errors["store_id"] = "Please select a store"
    if month_value is None:
        errors["month"] = "Please select a month"

    entries = list(entries or [])
    if not entries:
        errors["items"] = "Add at least one item"

    items = []
    for index, entry in enumerate(entries):
        name = str(_entry_value(entry, "item_name") or "").strip()
        quantity = _to_int(_entry_value(entry, "quantity"))
        price = _to_float(_entry_value(entry, "price"))
        if not name:
            errors.setdefault("items.{}.item_name".format(index), "All items must have a name")
        if quantity <= 0:
            errors.setdefault("items.{}.quantity".format(index), "All quantities must be greater than zero")
        if price <= 0:
            errors.setdefault("items.{}.price".format(index), "All prices must be greater than zero")
        items.append({"item_name": name, "quantity": quantity, "price": price})

    return FormResult(
        values={"store_id": store_value, "month": month_value, "items": items},
        field_errors=errors,
    )


def submit_store(db, data):
    result = validate_store_form(data)
    if not result.is_valid:
        return result, None
    store = store_service.create_store(db, result.values)
    return result, store


def submit_sale_batch(db, store_id, month, entries):
    result = validate_sale_batch(store_id, month, entries)
    if not result.is_valid:
        return result, []

    values = result.values
    if store_service.get_store(db, values["store_id"]) is None:
        result.field_errors["store_id"] = "Store not found"
        return result, []

    created = []
    for item in values["items"]:
        try:
            sale = sale_service.create_sale(
                db,
                {
                    "store_id": values["store_id"],
                    "month": values["month"],
                    "item_name": item["item_name"],
                    "quantity": item["quantity"],
                    "price": item["price"],
                },
            )
        except SQLAlchemyError:
            db.rollback()
            logger.error(
                "Sale batch for store %s stopped after %d of %d rows.",
                values["store_id"],
                len(created),
                len(values["items"]),
            )
            raise
        created.append(sale)

    logger.info(
        "Recorded %d sales for store %s.",
        len(created),
        values["store_id"],
        extra={"store_id": values["store_id"], "sale_count": len(created)},
    )
    return result, created


__all__ = [
    "FormResult",
    "StoreRecordBuilder",
    "field_errors_from",
    "submit_sale_batch",
    "submit_store",
    "validate_sale_batch",
    "validate_store_form",
]
