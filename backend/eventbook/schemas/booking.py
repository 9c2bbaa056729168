"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from pydantic import BaseModel

from eventbook.models.booking import BookingStatus


class BookingCreate(BaseModel):
    event_id: int


class BookingResponse(BaseModel):
    id: int
    event_id: int
    attendee_id: int
    attendee_name: str
    attendee_email: str
    status: BookingStatus
    booking_date: datetime
    total_amount: float

    model_config = {"from_attributes": True}


class BookingCancelResponse(BaseModel):
    message: str
    booking_id: int
    status: BookingStatus
