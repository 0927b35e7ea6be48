import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_core import PydanticCustomError

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _min_length(value, message):
    text = value.strip() if isinstance(value, str) else ""
    if len(text) < 2:
        raise PydanticCustomError("too_short", message)
    return text


def _blank_to_none(value):
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class StoreCreate(BaseModel):
    model_config = ConfigDict(validate_default=True)

    name: str = ""
    location: str = ""
    manager: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value):
        return _min_length(value, "Store name must be at least 2 characters")

    @field_validator("location", mode="before")
    @classmethod
    def _check_location(cls, value):
        return _min_length(value, "Location must be at least 2 characters")

    @field_validator("manager", "phone", mode="before")
    @classmethod
    def _optional_text(cls, value):
        return _blank_to_none(value)

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value):
        value = _blank_to_none(value)
        if value is not None and not EMAIL_REGEX.match(value):
            raise PydanticCustomError("email", "Please enter a valid email")
        return value


class StoreUpdate(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    manager: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value):
        return _min_length(value, "Store name must be at least 2 characters")

    @field_validator("location", mode="before")
    @classmethod
    def _check_location(cls, value):
        return _min_length(value, "Location must be at least 2 characters")

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value):
        if value is None or value == "":
            return value
        if not EMAIL_REGEX.match(str(value).strip()):
            raise PydanticCustomError("email", "Please enter a valid email")
        return str(value).strip()


class StoreRead(BaseModel):
    id: int
    name: str
    location: str
    manager: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StoreRef(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
