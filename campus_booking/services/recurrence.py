"""
Expansion of recurring booking requests into concrete occurrences.

Monthly recurrences keep the day-of-month of the first occurrence. In a
month that is too short the occurrence falls on that month's last day, and
the following months go back to the original day (Jan 31, Feb 29, Mar 31).
"""
import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional

from campus_booking.errors import InvalidRecurrence, RecurrenceFieldMissing
from campus_booking.models.booking import FREQUENCIES
from campus_booking.services.interval_index import Interval


@dataclass(frozen=True)
class Recurrence:
    is_recurring: bool = False
    frequency: Optional[str] = None
    end_date: Optional[date] = None

    @classmethod
    def from_dict(cls, data):
        """Build and validate a descriptor from a request payload."""
        if data is None:
            return cls()
        if isinstance(data, cls):
            data.validate()
            return data
        if not isinstance(data, dict):
            raise InvalidRecurrence("Recurrence must be an object.")

        end_date = data.get('end_date')
        if isinstance(end_date, datetime):
            end_date = end_date.date()
        elif isinstance(end_date, str):
            try:
                end_date = date.fromisoformat(end_date[:10])
            except ValueError:
                raise InvalidRecurrence(f"Invalid recurrence end date: {end_date!r}.")

        recurrence = cls(
            is_recurring=bool(data.get('is_recurring', False)),
            frequency=data.get('frequency'),
            end_date=end_date,
        )
        recurrence.validate()
        return recurrence

    def validate(self):
        if not self.is_recurring:
            if self.frequency is not None or self.end_date is not None:
                raise InvalidRecurrence("Frequency and end date are only allowed on recurring bookings.")
            return
        if not self.frequency:
            raise RecurrenceFieldMissing('frequency')
        if self.end_date is None:
            raise RecurrenceFieldMissing('end_date')
        if self.frequency not in FREQUENCIES:
            raise InvalidRecurrence(
                f"Unknown frequency '{self.frequency}', expected one of {', '.join(FREQUENCIES)}.",
                frequency=self.frequency,
            )


def _add_months(value: datetime, months: int, anchor_day: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(anchor_day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def expand(recurrence: Recurrence, base_start: datetime, base_end: datetime, max_occurrences=None) -> List[Interval]:
    """
    Concrete occurrences of a booking, in chronological order.
    A non-recurring descriptor yields only the base interval.
    """
    if not recurrence.is_recurring:
        return [Interval(base_start, base_end)]

    recurrence.validate()
    if recurrence.end_date < base_start.date():
        raise InvalidRecurrence(
            "Recurrence end date is before the first occurrence.",
            end_date=recurrence.end_date.isoformat(),
        )

    span = base_end - base_start
    occurrences = []
    step = 0
    while True:
        if recurrence.frequency == 'daily':
            start = base_start + timedelta(days=step)
        elif recurrence.frequency == 'weekly':
            start = base_start + timedelta(weeks=step)
        else:
            start = _add_months(base_start, step, base_start.day)

        if start.date() > recurrence.end_date:
            break
        if occurrences and start < occurrences[-1].end:
            raise InvalidRecurrence("Booking is longer than its repeat interval, occurrences would overlap.")
        if max_occurrences is not None and len(occurrences) >= max_occurrences:
            raise InvalidRecurrence(
                f"Recurrence expands to more than {max_occurrences} occurrences.",
                max_occurrences=max_occurrences,
            )
        occurrences.append(Interval(start, start + span))
        step += 1

    return occurrences
