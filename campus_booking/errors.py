"""
Error kinds raised by the booking core.

Every error is a synchronous, local failure: nothing is retried and nothing
is written when one is raised. The API layer turns them into JSON responses
through ``BookingError.to_dict``.
"""


class BookingError(Exception):
    code = 'BookingError'
    status_code = 400

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        payload = {'error': self.code, 'message': self.message}
        payload.update(self.details)
        return payload


class NotFound(BookingError):
    code = 'NotFound'
    status_code = 404

    def __init__(self, booking_id):
        super().__init__(f"Booking {booking_id} not found.", booking_id=booking_id)


class ResourceNotFound(BookingError):
    code = 'ResourceNotFound'
    status_code = 404

    def __init__(self, resource_id):
        super().__init__(f"Boardroom {resource_id} not found.", resource_id=resource_id)


class ResourceInactive(BookingError):
    code = 'ResourceInactive'
    status_code = 409

    def __init__(self, resource_id):
        super().__init__(f"Boardroom {resource_id} is not active.", resource_id=resource_id)


class ResourceClosed(BookingError):
    code = 'ResourceClosed'
    status_code = 409

    def __init__(self, resource_id, day):
        super().__init__(
            f"Boardroom {resource_id} is not operational on {day.strftime('%A')}.",
            resource_id=resource_id,
            date=day.isoformat(),
        )


class ResourceBusy(BookingError):
    code = 'ResourceBusy'
    status_code = 409

    def __init__(self, resource_id):
        super().__init__(
            f"Boardroom {resource_id} is busy with another booking request, try again.",
            resource_id=resource_id,
        )


class InvalidInterval(BookingError):
    code = 'InvalidInterval'


class InvalidAttendees(BookingError):
    code = 'InvalidAttendees'

    def __init__(self, attendees):
        super().__init__("Attendee count must be at least 1.", attendees=attendees)


class InvalidPurpose(BookingError):
    code = 'InvalidPurpose'

    def __init__(self, purpose):
        super().__init__("A booking needs a non-empty purpose.", purpose=purpose)


class CapacityExceeded(BookingError):
    code = 'CapacityExceeded'

    def __init__(self, capacity, attendees):
        super().__init__(
            f"Boardroom capacity error: holds {capacity}, requested {attendees}.",
            capacity=capacity,
            attendees=attendees,
        )


class Overlap(BookingError):
    code = 'Overlap'
    status_code = 409

    def __init__(self, conflict, start_time, end_time):
        super().__init__(
            "Booking overlaps with an existing booking.",
            conflicting_booking_id=conflict.booking_id,
            conflicting_start_time=conflict.start.isoformat(),
            conflicting_end_time=conflict.end.isoformat(),
            requested_start_time=start_time.isoformat(),
            requested_end_time=end_time.isoformat(),
        )
        self.conflict = conflict


class InvalidTransition(BookingError):
    code = 'InvalidTransition'
    status_code = 409

    def __init__(self, source, target):
        super().__init__(
            f"Cannot move booking from '{source}' to '{target}'.",
            source=source,
            target=target,
        )
        self.source = source
        self.target = target


class InvalidRecurrence(BookingError):
    code = 'InvalidRecurrence'


class RecurrenceFieldMissing(BookingError):
    code = 'RecurrenceFieldMissing'

    def __init__(self, field):
        super().__init__(f"Recurring bookings require '{field}'.", field=field)


class InvalidChanges(BookingError):
    code = 'InvalidChanges'

    def __init__(self, fields):
        fields = sorted(fields)
        super().__init__(
            f"These fields cannot be updated: {', '.join(fields)}.", fields=fields
        )


class BookingNotEditable(BookingError):
    code = 'BookingNotEditable'
    status_code = 409

    def __init__(self, booking_id, status):
        super().__init__(
            f"Booking {booking_id} is {status} and can no longer be edited.",
            booking_id=booking_id,
            status=status,
        )


class CheckInNotAllowed(BookingError):
    code = 'CheckInNotAllowed'
    status_code = 409


class CheckOutNotAllowed(BookingError):
    code = 'CheckOutNotAllowed'
    status_code = 409


class MissingActor(BookingError):
    code = 'MissingActor'

    def __init__(self):
        super().__init__("An actor id is required for this operation.")
