from campus_booking.extensions import db
from datetime import datetime

FACILITIES = (
    'projector',
    'whiteboard',
    'video_conference',
    'audio_system',
    'smart_board',
    'wifi',
    'air_conditioning',
    'telephone',
    'computer',
    'printer',
)

WEEKDAYS = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday')


class Boardroom(db.Model):
    __tablename__ = 'boardrooms'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), unique=True, nullable=False)
    code = db.Column(db.String(16), nullable=False)
    campus = db.Column(db.String(64))
    capacity = db.Column(db.Integer, nullable=False)
    facilities = db.Column(db.JSON, default=list) # e.g. ["projector", "whiteboard"]
    # {"monday": {"open": "08:00", "close": "17:00"}, "sunday": null, ...}
    operating_hours = db.Column(db.JSON, default=dict)
    description = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint('capacity > 0', name='check_capacity_positive'),
        db.UniqueConstraint('campus', 'code', name='uniq_campus_code'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'code': self.code,
            'campus': self.campus,
            'capacity': self.capacity,
            'facilities': self.facilities or [],
            'operating_hours': self.operating_hours or {},
            'description': self.description,
            'is_active': self.is_active
        }
