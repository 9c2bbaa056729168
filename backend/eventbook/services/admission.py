"""
Booking admission check.

Decides whether a booking request may proceed, given a snapshot of the event
and the caller's existing bookings. Pure: no I/O, no mutation.

Branches are evaluated in a fixed order:
  1. no identity            -> REJECT(not authenticated)
  2. remaining_spots <= 0   -> REJECT(sold out)
  3. live booking for event -> REJECT(already booked)
  4. otherwise              -> ADMIT

The decision is made against a snapshot, so ADMIT is advisory: the store's
conditional decrement has the final word on the last spot.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from eventbook.models.booking import BookingStatus


class RejectReason(str, Enum):
    NOT_AUTHENTICATED = "not authenticated"
    SOLD_OUT = "sold out"
    ALREADY_BOOKED = "already booked"


@dataclass(frozen=True)
class AdmissionDecision:
    reason: Optional[RejectReason] = None

    @property
    def admitted(self) -> bool:
        return self.reason is None

    @property
    def outcome(self) -> str:
        """Metric/log label: 'admit' or the reason in snake_case."""
        if self.reason is None:
            return "admit"
        return self.reason.name.lower()


ADMIT = AdmissionDecision()


def reject(reason: RejectReason) -> AdmissionDecision:
    return AdmissionDecision(reason=reason)


def check_admission(event, user_id: Optional[int], user_bookings: Iterable) -> AdmissionDecision:
    """
    Decide whether `user_id` may book `event`.

    Args:
        event: anything with `id` and `remaining_spots`
        user_id: the caller, or None when unauthenticated
        user_bookings: the caller's bookings (any events); cancelled ones are ignored
    """
    if user_id is None:
        return reject(RejectReason.NOT_AUTHENTICATED)

    if event.remaining_spots <= 0:
        return reject(RejectReason.SOLD_OUT)

    if any(
        b.event_id == event.id and b.status != BookingStatus.CANCELLED
        for b in user_bookings
    ):
        return reject(RejectReason.ALREADY_BOOKED)

    return ADMIT
