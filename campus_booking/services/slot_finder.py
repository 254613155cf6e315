from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List

from campus_booking.errors import InvalidInterval, ResourceClosed
from campus_booking.services.catalog import ResourceCatalog


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime

    def to_dict(self):
        return {'start_time': self.start.isoformat(), 'end_time': self.end.isoformat()}


def find_available_slots(booking_service, resource_id, day: date, duration_minutes) -> List[Slot]:
    """
    Tile the day's operating window into back-to-back slots of
    `duration_minutes` and keep those no active booking touches.
    Slots are computed fresh on every call.
    """
    if duration_minutes is None or duration_minutes <= 0:
        raise InvalidInterval("Slot duration must be a positive number of minutes.",
                              duration_minutes=duration_minutes)

    boardroom = ResourceCatalog.get_resource(resource_id)
    window = ResourceCatalog.operating_window(boardroom, day)
    if window is None:
        raise ResourceClosed(resource_id, day)
    opens, closes = window

    bookings = booking_service.active_intervals(resource_id, opens, closes)
    step = timedelta(minutes=duration_minutes)

    slots = []
    cursor = opens
    while cursor + step <= closes:
        slot_end = cursor + step
        if not any(interval.overlaps(cursor, slot_end) for interval in bookings):
            slots.append(Slot(cursor, slot_end))
        cursor = slot_end
    return slots
