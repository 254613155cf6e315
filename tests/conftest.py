import jwt
import pytest
from datetime import datetime
from campus_booking import create_app, db
from campus_booking.config import TestingConfig
from campus_booking.models import Boardroom
from campus_booking.services.booking_service import get_booking_service

OFFICE_HOURS = {"open": "09:00", "close": "17:00"}
WEEKDAYS_ONLY = {
    "monday": OFFICE_HOURS,
    "tuesday": OFFICE_HOURS,
    "wednesday": OFFICE_HOURS,
    "thursday": OFFICE_HOURS,
    "friday": OFFICE_HOURS,
    "saturday": None,
}

# 2024-01-01 is a Monday
MONDAY = datetime(2024, 1, 1)


def at(day, hour, minute=0):
    return day.replace(hour=hour, minute=minute)


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def service(app):
    return get_booking_service()


@pytest.fixture
def make_boardroom(app):
    def _make_boardroom(name="Main Boardroom", code="MB01", capacity=10,
                        operating_hours=None, is_active=True, facilities=None):
        boardroom = Boardroom(
            name=name,
            code=code,
            campus="main",
            capacity=capacity,
            facilities=facilities or [],
            operating_hours=WEEKDAYS_ONLY if operating_hours is None else operating_hours,
            is_active=is_active
        )
        db.session.add(boardroom)
        db.session.commit()
        return boardroom
    return _make_boardroom


@pytest.fixture
def boardroom(make_boardroom):
    return make_boardroom()


@pytest.fixture
def auth_headers(app):
    def _auth_headers(user_id="u-1", role="user"):
        token = jwt.encode({'user_id': user_id, 'role': role}, app.config['SECRET_KEY'], algorithm="HS256")
        return {'Authorization': f'Bearer {token}'}
    return _auth_headers
