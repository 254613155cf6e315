from flask import Blueprint, request, jsonify, current_app
from campus_booking.errors import BookingError
from campus_booking.services.booking_service import get_booking_service
from campus_booking.utils.decorators import token_required
from campus_booking.utils.timeutils import parse_datetime
import traceback

bookings_bp = Blueprint('bookings', __name__)


def _server_error(e):
    current_app.logger.error(f"Unexpected booking error: {e}\n{traceback.format_exc()}")
    return jsonify({'error': 'Server Error', 'details': str(e)}), 500


@bookings_bp.route('/', methods=['POST'])
@token_required
def create_booking(current_user):
    data = request.get_json(silent=True) or {}
    try:
        start = parse_datetime(data['start_time'])
        end = parse_datetime(data['end_time'])

        bookings = get_booking_service().create_booking(
            boardroom_id=data['boardroom_id'],
            user_id=current_user['id'],
            start_time=start,
            end_time=end,
            purpose=data.get('purpose', 'Meeting'),
            attendees=data.get('attendees', 1),
            recurrence=data.get('recurring'),
            notes=data.get('notes')
        )
        return jsonify([b.to_dict() for b in bookings]), 201
    except BookingError:
        raise
    except KeyError as e:
        return jsonify({'error': f"Missing field {e}"}), 400
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        return _server_error(e)


@bookings_bp.route('/<int:booking_id>', methods=['GET'])
@token_required
def get_booking(current_user, booking_id):
    booking = get_booking_service().get_booking(booking_id)
    return jsonify(booking.to_dict()), 200


@bookings_bp.route('/<int:booking_id>', methods=['PUT'])
@token_required
def update_booking(current_user, booking_id):
    data = request.get_json(silent=True) or {}
    try:
        changes = dict(data)
        for key in ('start_time', 'end_time'):
            if key in changes:
                changes[key] = parse_datetime(changes[key])

        booking = get_booking_service().update_booking(booking_id, changes)
        return jsonify(booking.to_dict()), 200
    except BookingError:
        raise
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        return _server_error(e)


@bookings_bp.route('/<int:booking_id>/transition', methods=['POST'])
@token_required
def transition_booking(current_user, booking_id):
    data = request.get_json(silent=True) or {}
    if not data.get('status'):
        return jsonify({'error': 'Missing field status'}), 400

    booking = get_booking_service().transition_booking(
        booking_id,
        data['status'],
        actor_id=current_user['id'],
        reason=data.get('reason')
    )
    return jsonify(booking.to_dict()), 200


def _event_time(data):
    return parse_datetime(data['time']) if data.get('time') else None


@bookings_bp.route('/<int:booking_id>/check-in', methods=['POST'])
@token_required
def check_in(current_user, booking_id):
    data = request.get_json(silent=True) or {}
    try:
        time = _event_time(data)
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    booking = get_booking_service().check_in(booking_id, current_user['id'], time)
    return jsonify(booking.to_dict()), 200


@bookings_bp.route('/<int:booking_id>/check-out', methods=['POST'])
@token_required
def check_out(current_user, booking_id):
    data = request.get_json(silent=True) or {}
    try:
        time = _event_time(data)
    except (ValueError, TypeError) as e:
        return jsonify({'error': str(e)}), 400
    booking = get_booking_service().check_out(booking_id, current_user['id'], time)
    return jsonify(booking.to_dict()), 200


@bookings_bp.route('/my_bookings', methods=['GET'])
@token_required
def get_my_bookings(current_user):
    upcoming_only = request.args.get('all') != '1'
    bookings = get_booking_service().get_user_bookings(current_user['id'], upcoming_only=upcoming_only)
    return jsonify([b.to_dict() for b in bookings])
