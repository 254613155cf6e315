from datetime import date, datetime, time
from campus_booking.extensions import db
from campus_booking.errors import ResourceNotFound, ResourceInactive
from campus_booking.models import Boardroom
from campus_booking.models.boardroom import WEEKDAYS


class ResourceCatalog:
    """Read-only access to boardrooms and their weekly operating hours."""

    @staticmethod
    def get_resource(resource_id, require_active=True) -> Boardroom:
        boardroom = db.session.get(Boardroom, resource_id)
        if not boardroom:
            raise ResourceNotFound(resource_id)
        if require_active and not boardroom.is_active:
            raise ResourceInactive(resource_id)
        return boardroom

    @staticmethod
    def _parse_clock(value):
        hour, minute = value.split(':')
        return time(int(hour), int(minute))

    @staticmethod
    def operating_window(boardroom: Boardroom, day: date):
        """
        (open, close) datetimes for the given day, or None when the
        boardroom is closed on that weekday.
        """
        hours = (boardroom.operating_hours or {}).get(WEEKDAYS[day.weekday()])
        if not hours or not hours.get('open') or not hours.get('close'):
            return None

        opens = datetime.combine(day, ResourceCatalog._parse_clock(hours['open']))
        closes = datetime.combine(day, ResourceCatalog._parse_clock(hours['close']))
        if closes <= opens:
            return None
        return opens, closes
