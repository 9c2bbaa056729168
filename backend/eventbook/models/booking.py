"""
Booking model representing a user's reservation for an event.

Key design decisions:
- Uniqueness of (attendee, event) only covers live bookings: a partial
  unique index skips CANCELLED rows, so cancelling frees the user to book again
- Status field allows cancellation without deleting records
- total_amount is captured at booking time from the event price
"""

import enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
    text,
)
from sqlalchemy.orm import relationship

from eventbook.db.base import Base, TimestampMixin


class BookingStatus(str, enum.Enum):
    CONFIRMED = "CONFIRMED"
    PENDING = "PENDING"
    CANCELLED = "CANCELLED"
    WAITLIST = "WAITLIST"


# Partial index predicate; the status column stores enum names
LIVE_BOOKING = text("status <> 'CANCELLED'")


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    attendee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    attendee_name = Column(String(255), nullable=False)
    attendee_email = Column(String(255), nullable=False)
    status = Column(
        Enum(BookingStatus, name="booking_status", native_enum=False, length=20),
        nullable=False,
        default=BookingStatus.CONFIRMED,
    )
    booking_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    total_amount = Column(Float, nullable=False, default=0.0)

    event = relationship("Event", back_populates="bookings")
    attendee = relationship("User", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="check_total_amount_non_negative"),
        Index("ix_bookings_attendee_event", "attendee_id", "event_id"),
        Index(
            "uq_bookings_live_attendee_event",
            "attendee_id",
            "event_id",
            unique=True,
            postgresql_where=LIVE_BOOKING,
            sqlite_where=LIVE_BOOKING,
        ),
    )

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, attendee={self.attendee_id}, event={self.event_id}, status={self.status})>"
