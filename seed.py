from campus_booking import create_app, db
from campus_booking.models import Boardroom

app = create_app()

WEEKDAY_HOURS = {"open": "08:00", "close": "17:00"}
OFFICE_WEEK = {
    "monday": WEEKDAY_HOURS,
    "tuesday": WEEKDAY_HOURS,
    "wednesday": WEEKDAY_HOURS,
    "thursday": WEEKDAY_HOURS,
    "friday": WEEKDAY_HOURS,
    "saturday": {"open": "09:00", "close": "13:00"},
    "sunday": None,
}

with app.app_context():
    db.create_all()

    boardrooms_data = [
        {"name": "Main Boardroom", "code": "MB01", "campus": "main", "capacity": 20,
         "facilities": ["projector", "video_conference", "wifi"]},
        {"name": "Library Meeting Room", "code": "LIB2", "campus": "main", "capacity": 8,
         "facilities": ["whiteboard", "wifi"]},
        {"name": "Senate Chamber", "code": "SEN1", "campus": "north", "capacity": 40,
         "facilities": ["audio_system", "smart_board", "air_conditioning"]},
        {"name": "Huddle Room", "code": "HUD1", "campus": "north", "capacity": 4,
         "facilities": ["telephone"]},
    ]

    for b_data in boardrooms_data:
        if not Boardroom.query.filter_by(name=b_data['name']).first():
            boardroom = Boardroom(operating_hours=OFFICE_WEEK, **b_data)
            db.session.add(boardroom)
            print(f"Boardroom {boardroom.name} created.")

    db.session.commit()
    print("Database seeded successfully.")
