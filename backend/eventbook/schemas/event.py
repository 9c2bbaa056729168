"""
Pydantic schemas for event-related request/response validation.

Numeric fields are coerced from strings, matching what a submitted form
sends: "30" becomes 30 and an empty price becomes 0.
"""

from datetime import date as date_type, datetime, time as time_type
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class PriceFilter(str, Enum):
    ALL = "all"
    FREE = "free"
    PAID = "paid"


class EventSort(str, Enum):
    DATE = "date"
    PRICE = "price"


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    date: date_type
    time: time_type
    location: str = Field(..., min_length=1, max_length=255)
    capacity: int = Field(..., ge=0, le=1_000_000)
    price: float = Field(default=0.0, ge=0)
    category_id: int
    image_url: Optional[str] = Field(None, max_length=500)

    @field_validator("price", mode="before")
    @classmethod
    def blank_price_is_free(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return 0.0
        return value


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    date: Optional[date_type] = None
    time: Optional[time_type] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    capacity: Optional[int] = Field(None, ge=0, le=1_000_000)
    price: Optional[float] = Field(None, ge=0)
    category_id: Optional[int] = None
    image_url: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None


class EventResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    date: date_type
    time: time_type
    location: str
    capacity: int
    remaining_spots: int
    price: float
    image_url: Optional[str]
    is_active: bool
    category_id: int
    organizer_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class EventListResponse(BaseModel):
    events: list[EventResponse]
    total: int
    page: int
    page_size: int
    cached: bool = False
