import uuid
from datetime import date, datetime, timedelta

from flask import current_app

from campus_booking.extensions import db
from campus_booking.errors import (
    BookingNotEditable,
    CapacityExceeded,
    CheckInNotAllowed,
    CheckOutNotAllowed,
    InvalidAttendees,
    InvalidChanges,
    InvalidInterval,
    InvalidPurpose,
    InvalidTransition,
    MissingActor,
    NotFound,
    Overlap,
)
from campus_booking.models import Booking
from campus_booking.models.booking import (
    ACTIVE_STATUSES,
    CANCELLED,
    COMPLETED,
    CONFIRMED,
    PENDING,
)
from campus_booking.services.catalog import ResourceCatalog
from campus_booking.services.interval_index import Interval, IntervalIndex
from campus_booking.services.locks import ResourceLockRegistry
from campus_booking.services.notification_service import (
    BOOKING_CANCELLED,
    BOOKING_CONFIRMED,
    NotificationService,
)
from campus_booking.services.recurrence import Recurrence, expand
from campus_booking.utils.timeutils import local_now

# pending -> completed is deliberately absent: a booking must be confirmed first
TRANSITIONS = {
    PENDING: (CONFIRMED, CANCELLED),
    CONFIRMED: (COMPLETED, CANCELLED),
    CANCELLED: (),
    COMPLETED: (),
}

EDITABLE_FIELDS = ('start_time', 'end_time', 'purpose', 'attendees', 'notes')


class BookingService:
    """
    Owns the booking lifecycle for every boardroom.

    Each mutation that can change which intervals hold a boardroom runs inside
    that boardroom's lock: the overlap check, the database commit and the
    interval index update form one unit. A failure rolls the session back
    before the lock is released, so nothing is half-written.
    """

    def __init__(self, index=None, locks=None, notifier=None,
                 enforce_capacity=False, max_occurrences=366):
        self.index = index or IntervalIndex()
        self.locks = locks or ResourceLockRegistry()
        self.notifier = notifier or NotificationService()
        self.enforce_capacity = enforce_capacity
        self.max_occurrences = max_occurrences

    @classmethod
    def from_config(cls, config):
        return cls(
            locks=ResourceLockRegistry(timeout=config['LOCK_TIMEOUT_SECONDS']),
            notifier=NotificationService(
                webhook_url=config.get('NOTIFY_WEBHOOK_URL'),
                timeout=config['NOTIFY_TIMEOUT_SECONDS'],
            ),
            enforce_capacity=config['ENFORCE_CAPACITY'],
            max_occurrences=config['MAX_RECURRENCE_OCCURRENCES'],
        )

    # --- Validation helpers ---

    @staticmethod
    def _validate_interval(start_time: datetime, end_time: datetime):
        if start_time is None or end_time is None:
            raise InvalidInterval("Both start and end time are required.")
        if end_time <= start_time:
            raise InvalidInterval(
                "End time must be after start time.",
                start_time=start_time.isoformat(),
                end_time=end_time.isoformat(),
            )

    @staticmethod
    def _validate_attendees(attendees):
        if not isinstance(attendees, int) or isinstance(attendees, bool) or attendees < 1:
            raise InvalidAttendees(attendees)

    @staticmethod
    def _validate_purpose(purpose):
        if not isinstance(purpose, str) or not purpose.strip():
            raise InvalidPurpose(purpose)
        return purpose.strip()

    def _check_capacity(self, boardroom, attendees):
        if attendees <= boardroom.capacity:
            return
        if self.enforce_capacity:
            raise CapacityExceeded(boardroom.capacity, attendees)
        current_app.logger.warning(
            f"Boardroom {boardroom.id} holds {boardroom.capacity}, booking requests {attendees} attendees."
        )

    # --- Interval index access (caller holds the resource lock) ---

    def _ensure_loaded(self, resource_id):
        if self.index.is_loaded(resource_id):
            return
        rows = db.session.query(Booking.id, Booking.start_time, Booking.end_time).filter(
            Booking.boardroom_id == resource_id,
            Booking.status.in_(ACTIVE_STATUSES)
        ).all()
        self.index.load(resource_id, (Interval(r.start_time, r.end_time, r.id) for r in rows))

    def _check_free(self, resource_id, start_time, end_time, excluding=None):
        # (StartA < EndB) and (EndA > StartB)
        conflicts = self.index.query_overlap(resource_id, start_time, end_time, excluding=excluding)
        if conflicts:
            current_app.logger.info(
                f"Rejected {start_time.isoformat()} - {end_time.isoformat()} on boardroom {resource_id}: "
                f"overlaps booking {conflicts[0].booking_id}"
            )
            raise Overlap(conflicts[0], start_time, end_time)

    def active_intervals(self, resource_id, start_time, end_time):
        """Intervals of pending/confirmed bookings intersecting [start, end)."""
        with self.locks.hold(resource_id):
            self._ensure_loaded(resource_id)
            return self.index.query_overlap(resource_id, start_time, end_time)

    @staticmethod
    def _commit():
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    # --- Queries ---

    @staticmethod
    def get_booking(booking_id) -> Booking:
        booking = db.session.get(Booking, booking_id)
        if not booking:
            raise NotFound(booking_id)
        return booking

    @staticmethod
    def get_user_bookings(user_id, upcoming_only=True, now=None):
        """Bookings of a user ordered by start time; by default only those still ahead."""
        query = Booking.query.filter(Booking.user_id == user_id)
        if upcoming_only:
            query = query.filter(
                Booking.status.in_(ACTIVE_STATUSES),
                Booking.end_time > (now or local_now())
            )
        return query.order_by(Booking.start_time).all()

    @staticmethod
    def get_boardroom_bookings(boardroom_id, day: date):
        """Pending/confirmed bookings of a boardroom touching the given day."""
        day_start = datetime.combine(day, datetime.min.time())
        day_end = day_start + timedelta(days=1)
        return Booking.query.filter(
            Booking.boardroom_id == boardroom_id,
            Booking.status.in_(ACTIVE_STATUSES),
            Booking.start_time < day_end,
            Booking.end_time > day_start
        ).order_by(Booking.start_time).all()

    # --- Commands ---

    def create_booking(self, boardroom_id, user_id, start_time, end_time, purpose,
                       attendees=1, recurrence=None, notes=None):
        """
        Book a boardroom, or every occurrence of a recurring request.

        Either all occurrences are persisted (status pending, sharing one
        series id) or none are. Returns the created bookings in
        chronological order.
        """
        if not user_id:
            raise MissingActor()
        self._validate_interval(start_time, end_time)
        self._validate_attendees(attendees)
        purpose = self._validate_purpose(purpose)
        recurrence = Recurrence.from_dict(recurrence)

        boardroom = ResourceCatalog.get_resource(boardroom_id)
        self._check_capacity(boardroom, attendees)

        occurrences = expand(recurrence, start_time, end_time, self.max_occurrences)
        series_id = str(uuid.uuid4()) if recurrence.is_recurring else None

        with self.locks.hold(boardroom.id):
            self._ensure_loaded(boardroom.id)
            for occurrence in occurrences:
                self._check_free(boardroom.id, occurrence.start, occurrence.end)

            bookings = [
                Booking(
                    boardroom_id=boardroom.id,
                    user_id=str(user_id),
                    start_time=occurrence.start,
                    end_time=occurrence.end,
                    purpose=purpose,
                    attendees=attendees,
                    notes=notes,
                    status=PENDING,
                    is_recurring=recurrence.is_recurring,
                    frequency=recurrence.frequency,
                    recurrence_end_date=recurrence.end_date,
                    series_id=series_id
                )
                for occurrence in occurrences
            ]
            db.session.add_all(bookings)
            self._commit()

            for booking in bookings:
                self.index.insert(boardroom.id, Interval(booking.start_time, booking.end_time, booking.id))

        current_app.logger.info(
            f"User {user_id} booked boardroom {boardroom.id}: "
            f"{len(bookings)} occurrence(s) from {start_time.isoformat()}"
        )
        return bookings

    def update_booking(self, booking_id, changes):
        """Apply a partial update; status is never changed here, see transition_booking."""
        rejected = set(changes) - set(EDITABLE_FIELDS)
        if rejected:
            raise InvalidChanges(rejected)
        if 'purpose' in changes:
            changes = dict(changes, purpose=self._validate_purpose(changes['purpose']))

        booking = self.get_booking(booking_id)
        resource_id = booking.boardroom_id

        with self.locks.hold(resource_id):
            db.session.refresh(booking)
            if not booking.holds_slot():
                raise BookingNotEditable(booking.id, booking.status)

            start_time = changes.get('start_time', booking.start_time)
            end_time = changes.get('end_time', booking.end_time)
            self._validate_interval(start_time, end_time)
            if 'attendees' in changes:
                self._validate_attendees(changes['attendees'])
                self._check_capacity(booking.boardroom, changes['attendees'])

            moved = start_time != booking.start_time or end_time != booking.end_time
            if moved:
                self._ensure_loaded(resource_id)
                # The booking's own current interval never counts as a conflict
                self._check_free(resource_id, start_time, end_time, excluding=booking.id)

            for field in EDITABLE_FIELDS:
                if field in changes:
                    setattr(booking, field, changes[field])
            self._commit()

            if moved:
                self.index.remove(resource_id, booking.id)
                self.index.insert(resource_id, Interval(booking.start_time, booking.end_time, booking.id))

        current_app.logger.info(f"Booking {booking.id} updated: {', '.join(sorted(changes))}")
        return booking

    def transition_booking(self, booking_id, target_status, actor_id, reason=None, now=None):
        """
        Move a booking along the lifecycle. This is the only path that
        changes a booking's status.
        """
        if not actor_id:
            raise MissingActor()
        booking = self.get_booking(booking_id)
        resource_id = booking.boardroom_id

        with self.locks.hold(resource_id):
            db.session.refresh(booking)
            source = booking.status
            if target_status not in TRANSITIONS.get(source, ()):
                raise InvalidTransition(source, target_status)

            booking.status = target_status
            if target_status == CANCELLED:
                booking.cancelled_by = str(actor_id)
                booking.cancellation_reason = reason
                booking.cancellation_time = now or local_now()
            self._commit()

            if target_status not in ACTIVE_STATUSES:
                self.index.remove(resource_id, booking.id)

        current_app.logger.info(f"Booking {booking.id}: {source} -> {target_status} by {actor_id}")

        if target_status == CONFIRMED:
            self.notifier.notify(BOOKING_CONFIRMED, booking)
        elif target_status == CANCELLED:
            self.notifier.notify(BOOKING_CANCELLED, booking)
        return booking

    def check_in(self, booking_id, actor_id, time=None):
        if not actor_id:
            raise MissingActor()
        booking = self.get_booking(booking_id)
        time = time or local_now()

        with self.locks.hold(booking.boardroom_id):
            db.session.refresh(booking)
            if booking.status != CONFIRMED:
                raise CheckInNotAllowed(
                    f"Only confirmed bookings can be checked in, booking is {booking.status}.",
                    booking_id=booking.id, status=booking.status)
            if booking.check_in_time is not None:
                raise CheckInNotAllowed("Booking is already checked in.", booking_id=booking.id)
            # Both edges inclusive
            if not booking.start_time <= time <= booking.end_time:
                raise CheckInNotAllowed(
                    "Check-in time is outside the booked interval.",
                    booking_id=booking.id, time=time.isoformat())

            booking.check_in_time = time
            booking.checked_in_by = str(actor_id)
            self._commit()

        current_app.logger.info(f"Booking {booking.id} checked in by {actor_id}")
        return booking

    def check_out(self, booking_id, actor_id, time=None):
        if not actor_id:
            raise MissingActor()
        booking = self.get_booking(booking_id)
        time = time or local_now()

        with self.locks.hold(booking.boardroom_id):
            db.session.refresh(booking)
            if booking.check_in_time is None:
                raise CheckOutNotAllowed("Booking has not been checked in.", booking_id=booking.id)
            if booking.check_out_time is not None:
                raise CheckOutNotAllowed("Booking is already checked out.", booking_id=booking.id)
            if time < booking.check_in_time:
                raise CheckOutNotAllowed(
                    "Check-out time is before check-in time.",
                    booking_id=booking.id, time=time.isoformat())

            booking.check_out_time = time
            booking.checked_out_by = str(actor_id)
            self._commit()

        current_app.logger.info(f"Booking {booking.id} checked out by {actor_id}")
        return booking


def get_booking_service() -> BookingService:
    return current_app.extensions['booking_service']
