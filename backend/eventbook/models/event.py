"""
Event model with a live remaining-spots counter.

Key design decisions:
- `remaining_spots` is denormalized (avoids COUNT over bookings) and only
  moves through conditional UPDATEs in the catalog store
- CHECK constraints keep 0 <= remaining_spots <= capacity at the DB level
- `date` and `time` are stored separately, as organizers enter them
- Composite index on (category_id, date) for the category-filtered listing
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Time,
)
from sqlalchemy.orm import relationship

from eventbook.db.base import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(String(2000), nullable=True)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    location = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)
    remaining_spots = Column(Integer, nullable=False)
    price = Column(Float, nullable=False, default=0.0)
    image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    organizer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    category = relationship("Category", back_populates="events")
    organizer = relationship("User", back_populates="events")
    bookings = relationship("Booking", back_populates="event", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("capacity >= 0", name="check_capacity_non_negative"),
        CheckConstraint("remaining_spots >= 0", name="check_remaining_spots_non_negative"),
        CheckConstraint("remaining_spots <= capacity", name="check_remaining_lte_capacity"),
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        Index("ix_events_date", "date"),
        Index("ix_events_category_date", "category_id", "date"),
    )

    @property
    def taken_spots(self) -> int:
        return self.capacity - self.remaining_spots

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, remaining={self.remaining_spots}/{self.capacity})>"
