import pytest
from datetime import timedelta
from unittest.mock import MagicMock
from campus_booking.errors import (
    CheckInNotAllowed,
    CheckOutNotAllowed,
    InvalidTransition,
    MissingActor,
    NotFound,
)
from campus_booking.services.notification_service import BOOKING_CANCELLED, BOOKING_CONFIRMED
from conftest import MONDAY, at


@pytest.fixture
def pending(service, boardroom):
    return service.create_booking(boardroom.id, "u-1", at(MONDAY, 10), at(MONDAY, 11), "Standup", 3)[0]


@pytest.fixture
def confirmed(service, pending):
    return service.transition_booking(pending.id, 'confirmed', actor_id="admin")


def test_pending_to_confirmed(service, pending):
    booking = service.transition_booking(pending.id, 'confirmed', actor_id="admin")
    assert booking.status == 'confirmed'


def test_pending_to_completed_is_not_allowed(service, pending):
    with pytest.raises(InvalidTransition) as exc:
        service.transition_booking(pending.id, 'completed', actor_id="admin")

    assert exc.value.source == 'pending'
    assert exc.value.target == 'completed'
    assert service.get_booking(pending.id).status == 'pending'


def test_confirmed_to_completed(service, confirmed):
    booking = service.transition_booking(confirmed.id, 'completed', actor_id="admin")
    assert booking.status == 'completed'


@pytest.mark.parametrize("terminal", ['cancelled', 'completed'])
@pytest.mark.parametrize("target", ['pending', 'confirmed', 'cancelled', 'completed'])
def test_terminal_states_have_no_exits(service, confirmed, terminal, target):
    service.transition_booking(confirmed.id, terminal, actor_id="admin")

    with pytest.raises(InvalidTransition):
        service.transition_booking(confirmed.id, target, actor_id="admin")


def test_unknown_target_status(service, pending):
    with pytest.raises(InvalidTransition):
        service.transition_booking(pending.id, 'archived', actor_id="admin")


def test_transition_requires_actor(service, pending):
    with pytest.raises(MissingActor):
        service.transition_booking(pending.id, 'cancelled', actor_id=None)


def test_transition_missing_booking(service, boardroom):
    with pytest.raises(NotFound):
        service.transition_booking(404, 'confirmed', actor_id="admin")


def test_cancellation_records_actor_reason_and_time(service, pending):
    booking = service.transition_booking(
        pending.id, 'cancelled', actor_id="u-7", reason="Double booked", now=at(MONDAY, 8)
    )

    assert booking.status == 'cancelled'
    assert booking.cancelled_by == "u-7"
    assert booking.cancellation_reason == "Double booked"
    assert booking.cancellation_time == at(MONDAY, 8)
    assert booking.to_dict()['cancellation']['cancelled_by'] == "u-7"


def test_cancellation_reason_is_optional(service, pending):
    booking = service.transition_booking(pending.id, 'cancelled', actor_id="u-1")
    assert booking.cancellation_reason is None
    assert booking.cancellation_time is not None


def test_cancelling_frees_the_slot(service, boardroom, confirmed):
    service.transition_booking(confirmed.id, 'cancelled', actor_id="u-1")

    again = service.create_booking(boardroom.id, "u-2", at(MONDAY, 10), at(MONDAY, 11), "Retro", 2)
    assert again[0].status == 'pending'


def test_completing_frees_the_slot(service, boardroom, confirmed):
    service.transition_booking(confirmed.id, 'completed', actor_id="admin")

    assert service.active_intervals(boardroom.id, at(MONDAY, 0), at(MONDAY, 23)) == []


def test_confirm_and_cancel_notify(service, pending):
    service.notifier = MagicMock()

    service.transition_booking(pending.id, 'confirmed', actor_id="admin")
    service.transition_booking(pending.id, 'cancelled', actor_id="admin")

    events = [call.args[0] for call in service.notifier.notify.call_args_list]
    assert events == [BOOKING_CONFIRMED, BOOKING_CANCELLED]


def test_failed_transition_does_not_notify(service, pending):
    service.notifier = MagicMock()

    with pytest.raises(InvalidTransition):
        service.transition_booking(pending.id, 'completed', actor_id="admin")
    service.notifier.notify.assert_not_called()


# --- Check-in / check-out ---

def test_check_in_and_out(service, confirmed):
    booking = service.check_in(confirmed.id, "u-1", at(MONDAY, 10, 5))
    assert booking.check_in_time == at(MONDAY, 10, 5)
    assert booking.checked_in_by == "u-1"

    booking = service.check_out(confirmed.id, "u-2", at(MONDAY, 10, 55))
    assert booking.check_out_time == at(MONDAY, 10, 55)
    assert booking.checked_out_by == "u-2"
    assert booking.status == 'confirmed'


@pytest.mark.parametrize("minute_offset", [0, 60])
def test_check_in_accepts_interval_edges(service, confirmed, minute_offset):
    booking = service.check_in(confirmed.id, "u-1", at(MONDAY, 10) + timedelta(minutes=minute_offset))
    assert booking.check_in_time is not None


@pytest.mark.parametrize("when", [at(MONDAY, 9, 59), at(MONDAY, 11, 1)])
def test_check_in_outside_interval(service, confirmed, when):
    with pytest.raises(CheckInNotAllowed):
        service.check_in(confirmed.id, "u-1", when)


def test_check_in_requires_confirmed(service, pending):
    with pytest.raises(CheckInNotAllowed, match="pending"):
        service.check_in(pending.id, "u-1", at(MONDAY, 10, 5))


def test_check_in_twice(service, confirmed):
    service.check_in(confirmed.id, "u-1", at(MONDAY, 10, 5))
    with pytest.raises(CheckInNotAllowed):
        service.check_in(confirmed.id, "u-1", at(MONDAY, 10, 6))


def test_check_out_requires_check_in(service, confirmed):
    with pytest.raises(CheckOutNotAllowed):
        service.check_out(confirmed.id, "u-1", at(MONDAY, 10, 30))


def test_check_out_before_check_in(service, confirmed):
    service.check_in(confirmed.id, "u-1", at(MONDAY, 10, 30))
    with pytest.raises(CheckOutNotAllowed):
        service.check_out(confirmed.id, "u-1", at(MONDAY, 10, 15))


def test_check_out_twice(service, confirmed):
    service.check_in(confirmed.id, "u-1", at(MONDAY, 10, 5))
    service.check_out(confirmed.id, "u-1", at(MONDAY, 10, 50))
    with pytest.raises(CheckOutNotAllowed):
        service.check_out(confirmed.id, "u-1", at(MONDAY, 10, 55))


# --- Active / upcoming ---

def test_is_active_and_is_upcoming(pending, confirmed):
    assert confirmed.is_upcoming(at(MONDAY, 9))
    assert not confirmed.is_active(at(MONDAY, 9))

    assert confirmed.is_active(at(MONDAY, 10))
    assert confirmed.is_active(at(MONDAY, 11))
    assert not confirmed.is_upcoming(at(MONDAY, 10))

    assert not confirmed.is_active(at(MONDAY, 11, 1))


def test_pending_is_neither_active_nor_upcoming(pending):
    assert not pending.is_active(at(MONDAY, 10, 30))
    assert not pending.is_upcoming(at(MONDAY, 9))
