from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from store_sales.schemas.store import StoreRef


class SaleRead(BaseModel):
    id: int
    store_id: int
    item_name: str
    month: date
    quantity: int
    price: float
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SaleWithStore(SaleRead):
    store: Optional[StoreRef] = None


class SaleUpdate(BaseModel):
    item_name: Optional[str] = Field(None, min_length=1)
    month: Optional[date] = None
    quantity: Optional[int] = Field(None, gt=0, le=2**63 - 1)
    price: Optional[float] = Field(None, gt=0, allow_inf_nan=False)

    # omitted fields are left alone; an explicit null would blank a required column
    @field_validator("item_name", "month", "quantity", "price", mode="before")
    @classmethod
    def _not_null(cls, value, info: ValidationInfo):
        if value is None:
            raise PydanticCustomError("null_value", "{field} cannot be empty", {"field": info.field_name})
        return value


class SaleLineItem(BaseModel):
    """One row of a batch form; deliberately loose, checked by the batch validator."""

    item_name: Optional[str] = ""
    quantity: Union[int, float, str, None] = 1
    price: Union[float, str, None] = 0


class SaleBatchCreate(BaseModel):
    store_id: Optional[int] = None
    month: Optional[str] = None
    items: List[SaleLineItem] = Field(default_factory=list)
