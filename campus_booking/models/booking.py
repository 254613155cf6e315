from campus_booking.extensions import db
from campus_booking.utils.timeutils import local_now
from datetime import datetime

PENDING = 'pending'
CONFIRMED = 'confirmed'
CANCELLED = 'cancelled'
COMPLETED = 'completed'

STATUSES = (PENDING, CONFIRMED, CANCELLED, COMPLETED)
# Statuses that hold their time slot on the boardroom
ACTIVE_STATUSES = (PENDING, CONFIRMED)

FREQUENCIES = ('daily', 'weekly', 'monthly')


class Booking(db.Model):
    __tablename__ = 'bookings'

    id = db.Column(db.Integer, primary_key=True)
    boardroom_id = db.Column(db.Integer, db.ForeignKey('boardrooms.id'), nullable=False)
    user_id = db.Column(db.String(64), nullable=False)

    start_time = db.Column(db.DateTime, nullable=False)
    end_time = db.Column(db.DateTime, nullable=False)

    purpose = db.Column(db.String(255), nullable=False)
    attendees = db.Column(db.Integer, nullable=False, default=1)
    status = db.Column(db.String(20), nullable=False, default=PENDING, index=True)
    notes = db.Column(db.Text)

    cancellation_reason = db.Column(db.String(255))
    cancelled_by = db.Column(db.String(64))
    cancellation_time = db.Column(db.DateTime)

    is_recurring = db.Column(db.Boolean, nullable=False, default=False)
    frequency = db.Column(db.String(10))
    recurrence_end_date = db.Column(db.Date)
    series_id = db.Column(db.String(36), index=True)

    check_in_time = db.Column(db.DateTime)
    checked_in_by = db.Column(db.String(64))
    check_out_time = db.Column(db.DateTime)
    checked_out_by = db.Column(db.String(64))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    boardroom = db.relationship('Boardroom', backref='bookings', lazy=True)

    __table_args__ = (
        db.CheckConstraint('end_time > start_time', name='check_booking_interval'),
        db.CheckConstraint('attendees >= 1', name='check_attendees_positive'),
        db.Index('ix_bookings_boardroom_start', 'boardroom_id', 'start_time'),
        db.Index('ix_bookings_user_start', 'user_id', 'start_time'),
    )

    def is_active(self, now=None):
        """Confirmed and currently running (both edges inclusive)."""
        now = now or local_now()
        return self.status == CONFIRMED and self.start_time <= now <= self.end_time

    def is_upcoming(self, now=None):
        now = now or local_now()
        return self.status == CONFIRMED and self.start_time > now

    def holds_slot(self):
        return self.status in ACTIVE_STATUSES

    def to_dict(self):
        return {
            'id': self.id,
            'boardroom_id': self.boardroom_id,
            'user_id': self.user_id,
            'start_time': self.start_time.isoformat(),
            'end_time': self.end_time.isoformat(),
            'purpose': self.purpose,
            'attendees': self.attendees,
            'status': self.status,
            'notes': self.notes,
            'cancellation': {
                'reason': self.cancellation_reason,
                'cancelled_by': self.cancelled_by,
                'time': _iso(self.cancellation_time),
            } if self.status == CANCELLED else None,
            'recurring': {
                'is_recurring': self.is_recurring,
                'frequency': self.frequency,
                'end_date': _iso(self.recurrence_end_date),
                'series_id': self.series_id,
            },
            'check_in': {
                'time': _iso(self.check_in_time),
                'checked_in_by': self.checked_in_by,
            },
            'check_out': {
                'time': _iso(self.check_out_time),
                'checked_out_by': self.checked_out_by,
            },
        }


def _iso(value):
    return value.isoformat() if value else None
