"""
In-memory index of the time intervals currently holding each boardroom.

Only pending and confirmed bookings live here. Per boardroom the intervals
are kept sorted by start time; because active intervals never overlap, they
are sorted by end time as well, which lets overlap queries stop early.

The index is not thread-safe on its own. Callers mutate and query a given
resource while holding that resource's lock (see ``locks.py``).
"""
from bisect import bisect_left, insort
from operator import attrgetter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional


@dataclass(frozen=True, order=True)
class Interval:
    start: datetime
    end: datetime
    booking_id: Optional[int] = field(default=None, compare=True)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        # Half-open [start, end): touching edges do not overlap
        return self.start < end and self.end > start


class IntervalIndex:

    def __init__(self):
        self._intervals: Dict[int, List[Interval]] = {}

    def is_loaded(self, resource_id) -> bool:
        return resource_id in self._intervals

    def load(self, resource_id, intervals: Iterable[Interval]):
        """Replace everything known about a resource."""
        self._intervals[resource_id] = sorted(intervals)

    def intervals(self, resource_id) -> List[Interval]:
        return list(self._intervals.get(resource_id, ()))

    def insert(self, resource_id, interval: Interval):
        insort(self._intervals.setdefault(resource_id, []), interval)

    def remove(self, resource_id, booking_id) -> Optional[Interval]:
        bucket = self._intervals.get(resource_id, [])
        for position, interval in enumerate(bucket):
            if interval.booking_id == booking_id:
                return bucket.pop(position)
        return None

    def query_overlap(self, resource_id, start: datetime, end: datetime, excluding=None) -> List[Interval]:
        """Every active interval intersecting [start, end), ordered by start."""
        bucket = self._intervals.get(resource_id)
        if not bucket:
            return []

        # Intervals at position >= hi start at or after `end` and cannot overlap
        hi = bisect_left(bucket, end, key=attrgetter('start'))
        conflicts = []
        position = hi - 1
        while position >= 0:
            interval = bucket[position]
            if interval.end <= start:
                break
            if interval.booking_id != excluding:
                conflicts.append(interval)
            position -= 1
        conflicts.reverse()
        return conflicts
