from eventbook.models.user import User
from eventbook.models.category import Category
from eventbook.models.event import Event
from eventbook.models.booking import Booking, BookingStatus

__all__ = ["User", "Category", "Event", "Booking", "BookingStatus"]
