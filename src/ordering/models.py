"""Order records as they cross the store boundary."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from .days import as_local
from .errors import StoreError


def _check_items(items: list[str]) -> list[str]:
    cleaned = [item.strip() for item in items]
    if not cleaned or any(not item for item in cleaned):
        raise ValueError("items must be a non-empty list of labels")
    return cleaned


class Order(BaseModel):
    """One person's order for one day."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str = Field(min_length=1)
    items: list[str]
    timestamp: datetime

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("items")
    @classmethod
    def _validate_items(cls, value: list[str]) -> list[str]:
        return _check_items(value)

    @field_validator("timestamp")
    @classmethod
    def _localize(cls, value: datetime) -> datetime:
        return as_local(value)

    def to_record(self) -> dict:
        """JSON-safe dict, the shape stores and the feed exchange."""
        return {
            "id": self.id,
            "name": self.name,
            "items": list(self.items),
            "timestamp": self.timestamp.isoformat(),
        }


class OrderCreate(BaseModel):
    """Insert payload; the store assigns the id."""

    name: str = Field(min_length=1)
    items: list[str]
    timestamp: datetime

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("items")
    @classmethod
    def _validate_items(cls, value: list[str]) -> list[str]:
        return _check_items(value)

    @field_validator("timestamp")
    @classmethod
    def _localize(cls, value: datetime) -> datetime:
        return as_local(value)


class OrderPatch(BaseModel):
    """Update payload; unset fields are left alone."""

    items: Optional[list[str]] = None
    timestamp: Optional[datetime] = None

    @field_validator("items")
    @classmethod
    def _validate_items(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        return None if value is None else _check_items(value)

    @field_validator("timestamp")
    @classmethod
    def _localize(cls, value: Optional[datetime]) -> Optional[datetime]:
        return None if value is None else as_local(value)


def parse_order(payload: Any) -> Order:
    """Validate an untyped store payload into an Order.

    Raises:
        StoreError: the payload does not describe a valid order.
    """
    try:
        return Order.model_validate(payload)
    except PydanticValidationError as e:
        raise StoreError(f"Malformed order record: {e}") from e
