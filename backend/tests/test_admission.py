"""
Unit tests for the pure booking admission check.
"""

from types import SimpleNamespace

from eventbook.models.booking import BookingStatus
from eventbook.services.admission import RejectReason, check_admission


def _event(event_id=1, remaining_spots=10):
    return SimpleNamespace(id=event_id, remaining_spots=remaining_spots)


def _booking(event_id=1, status=BookingStatus.CONFIRMED):
    return SimpleNamespace(event_id=event_id, status=status)


def test_admits_when_spots_left_and_no_booking():
    decision = check_admission(_event(), user_id=7, user_bookings=[])
    assert decision.admitted
    assert decision.reason is None
    assert decision.outcome == "admit"


def test_rejects_missing_identity():
    decision = check_admission(_event(), user_id=None, user_bookings=[])
    assert not decision.admitted
    assert decision.reason == RejectReason.NOT_AUTHENTICATED


def test_unauthenticated_rejected_regardless_of_capacity():
    for remaining in (0, 1, 500):
        decision = check_admission(_event(remaining_spots=remaining), None, [])
        assert decision.reason == RejectReason.NOT_AUTHENTICATED


def test_rejects_sold_out():
    decision = check_admission(_event(remaining_spots=0), user_id=7, user_bookings=[])
    assert decision.reason == RejectReason.SOLD_OUT
    assert decision.reason.value == "sold out"


def test_negative_counter_is_treated_as_sold_out():
    decision = check_admission(_event(remaining_spots=-1), user_id=7, user_bookings=[])
    assert decision.reason == RejectReason.SOLD_OUT


def test_rejects_existing_booking_for_same_event():
    decision = check_admission(_event(), user_id=7, user_bookings=[_booking()])
    assert decision.reason == RejectReason.ALREADY_BOOKED
    assert decision.outcome == "already_booked"


def test_bookings_for_other_events_do_not_block():
    decision = check_admission(_event(event_id=1), 7, [_booking(event_id=2)])
    assert decision.admitted


def test_cancelled_booking_does_not_block():
    decision = check_admission(_event(), 7, [_booking(status=BookingStatus.CANCELLED)])
    assert decision.admitted


def test_pending_and_waitlist_bookings_block():
    for status in (BookingStatus.PENDING, BookingStatus.WAITLIST):
        decision = check_admission(_event(), 7, [_booking(status=status)])
        assert decision.reason == RejectReason.ALREADY_BOOKED


def test_sold_out_checked_before_already_booked():
    decision = check_admission(_event(remaining_spots=0), 7, [_booking()])
    assert decision.reason == RejectReason.SOLD_OUT


def test_authentication_checked_first():
    decision = check_admission(_event(remaining_spots=0), None, [_booking()])
    assert decision.reason == RejectReason.NOT_AUTHENTICATED
