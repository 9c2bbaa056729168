"""Event booking service: categories, events and capacity-bounded bookings."""
