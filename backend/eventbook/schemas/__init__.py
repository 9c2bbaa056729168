from eventbook.schemas.user import UserCreate, UserResponse, UserLogin, AccessToken
from eventbook.schemas.category import CategoryCreate, CategoryResponse
from eventbook.schemas.event import (
    EventCreate, EventUpdate, EventResponse, EventListResponse, EventSort, PriceFilter,
)
from eventbook.schemas.booking import BookingCreate, BookingResponse, BookingCancelResponse

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "AccessToken",
    "CategoryCreate", "CategoryResponse",
    "EventCreate", "EventUpdate", "EventResponse", "EventListResponse", "EventSort", "PriceFilter",
    "BookingCreate", "BookingResponse", "BookingCancelResponse",
]
