from flask import Blueprint, request, jsonify
from campus_booking.models import Boardroom
from campus_booking.services.booking_service import get_booking_service
from campus_booking.services.catalog import ResourceCatalog
from campus_booking.services.slot_finder import find_available_slots
from campus_booking.utils.decorators import token_required
from campus_booking.utils.timeutils import parse_date

boardrooms_bp = Blueprint('boardrooms', __name__)


def _has_facilities(boardroom, required):
    """True when the boardroom offers every required facility (case insensitive)."""
    if not boardroom.facilities:
        return False
    available = [f.lower() for f in boardroom.facilities]
    return all(item in available for item in required)


@boardrooms_bp.route('', methods=['GET'])
@token_required
def list_boardrooms(current_user):
    query = Boardroom.query.filter(Boardroom.is_active == True)
    if request.args.get('campus'):
        query = query.filter(Boardroom.campus == request.args['campus'])
    if request.args.get('min_capacity'):
        try:
            query = query.filter(Boardroom.capacity >= int(request.args['min_capacity']))
        except ValueError:
            return jsonify({'error': 'min_capacity must be an integer'}), 400

    boardrooms = query.order_by(Boardroom.capacity).all()

    # ?facilities=projector,wifi or ?facilities=projector&facilities=wifi
    required = [f.strip().lower() for raw in request.args.getlist('facilities') for f in raw.split(',') if f.strip()]
    if required:
        boardrooms = [b for b in boardrooms if _has_facilities(b, required)]

    return jsonify([b.to_dict() for b in boardrooms]), 200


@boardrooms_bp.route('/<int:boardroom_id>', methods=['GET'])
@token_required
def get_boardroom(current_user, boardroom_id):
    boardroom = ResourceCatalog.get_resource(boardroom_id, require_active=False)
    return jsonify(boardroom.to_dict()), 200


@boardrooms_bp.route('/<int:boardroom_id>/slots', methods=['GET'])
@token_required
def get_available_slots(current_user, boardroom_id):
    try:
        day = parse_date(request.args['date'])
        duration = int(request.args.get('duration', 60))
    except KeyError:
        return jsonify({'error': 'Missing query parameter date'}), 400
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    slots = find_available_slots(get_booking_service(), boardroom_id, day, duration)
    return jsonify({
        'boardroom_id': boardroom_id,
        'date': day.isoformat(),
        'duration_minutes': duration,
        'slots': [s.to_dict() for s in slots]
    }), 200


@boardrooms_bp.route('/<int:boardroom_id>/bookings', methods=['GET'])
@token_required
def get_boardroom_bookings(current_user, boardroom_id):
    try:
        day = parse_date(request.args['date'])
    except KeyError:
        return jsonify({'error': 'Missing query parameter date'}), 400
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    ResourceCatalog.get_resource(boardroom_id, require_active=False)
    bookings = get_booking_service().get_boardroom_bookings(boardroom_id, day)
    return jsonify([b.to_dict() for b in bookings]), 200
