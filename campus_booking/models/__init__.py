from campus_booking.models.boardroom import Boardroom
from campus_booking.models.booking import Booking

__all__ = ['Boardroom', 'Booking']
