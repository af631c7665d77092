"""Inventory schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

BLANK_MEANS_UNCHANGED = ("quantity", "unit", "expiry_days", "expiry_date")


def _is_blank(value: Any) -> bool:
    return isinstance(value, str) and not value.strip()


def _blank_to_none(value: Any) -> Any:
    return None if _is_blank(value) else value


class InventoryItemCreate(BaseModel):
    """Create an inventory item.

    Either expiry_days or a printed expiry_date (DD-MM-YYYY) may be given;
    leaving both out creates an item that never expires.
    """

    name: str = Field(..., min_length=1, max_length=255)
    quantity: float | None = Field(None, ge=0)
    unit: str | None = Field(None, max_length=50)
    category: str | None = Field(None, max_length=100)
    expiry_days: int | None = Field(None, ge=0)
    expiry_date: str | None = Field(None, max_length=10)

    @field_validator("quantity", "unit", "expiry_days", "expiry_date", mode="before")
    @classmethod
    def blank_means_unset(cls, value: Any) -> Any:
        return _blank_to_none(value)


class InventoryItemUpdate(BaseModel):
    """Update an inventory item.

    Blank form fields leave the stored value alone. Sending expiry_days=null
    makes the item non-expiring.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    quantity: float | None = Field(None, ge=0)
    unit: str | None = Field(None, max_length=50)
    category: str | None = Field(None, max_length=100)
    expiry_days: int | None = Field(None, ge=0)
    expiry_date: str | None = Field(None, max_length=10)

    @model_validator(mode="before")
    @classmethod
    def drop_blank_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: value
                for key, value in data.items()
                if key not in BLANK_MEANS_UNCHANGED or not _is_blank(value)
            }
        return data


class InventoryItemResponse(BaseModel):
    """Inventory item response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: int
    name: str
    quantity: float
    unit: str
    category: str | None
    expiry_days: int | None
    status: str | None
    created_at: datetime
    updated_at: datetime


class InventoryBulkAddRequest(BaseModel):
    """Bulk add items (e.g. a batch of recognized products)."""

    items: list[InventoryItemCreate] = Field(..., min_length=1)


class InventoryBulkAddResponse(BaseModel):
    """Result of bulk adding to inventory."""

    added: int
    items: list[InventoryItemResponse]


class InventorySection(BaseModel):
    """Items sharing a display category."""

    title: str
    items: list[InventoryItemResponse]


class DecayResultResponse(BaseModel):
    """Outcome of a decay pass."""

    mutated: int
    failed_ids: list[str]


class InventoryStats(BaseModel):
    """Dashboard headline numbers."""

    total_items: int
    categories: int
    expiring_soon: int
    good_items: int


class DashboardResponse(BaseModel):
    """Everything the home screen shows, computed from one snapshot."""

    decay: DecayResultResponse
    stats: InventoryStats
    expiring: list[InventoryItemResponse]
    recent: list[InventoryItemResponse]
    categories: dict[str, int]
