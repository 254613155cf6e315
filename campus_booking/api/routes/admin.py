from flask import Blueprint, request, jsonify, current_app
from campus_booking.utils.decorators import token_required, admin_required
from campus_booking.models import Boardroom
from campus_booking.models.boardroom import FACILITIES, WEEKDAYS
from campus_booking.extensions import db
import re
import traceback

admin_bp = Blueprint('admin', __name__)

CLOCK = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


def _invalid_boardroom_fields(data):
    """Return an error message for malformed boardroom fields, or None."""
    if 'capacity' in data:
        capacity = data['capacity']
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity < 1:
            return 'Capacity must be a positive integer'

    unknown = set(data.get('facilities') or []) - set(FACILITIES)
    if unknown:
        return f"Unknown facilities: {', '.join(sorted(unknown))}"

    hours = data.get('operating_hours') or {}
    if not isinstance(hours, dict):
        return 'Operating hours must map weekdays to opening times'
    for day, window in hours.items():
        if day not in WEEKDAYS:
            return f"Unknown weekday '{day}'"
        if window is None:
            continue
        if not CLOCK.match(str(window.get('open', ''))) or not CLOCK.match(str(window.get('close', ''))):
            return f"Opening times for {day} must be HH:MM"
        if window['close'] <= window['open']:
            return f"{day} closes before it opens"
    return None


# --- BOARDROOMS MANAGEMENT ---

@admin_bp.route('/boardrooms', methods=['GET'])
@token_required
@admin_required
def get_boardrooms(current_user):
    boardrooms = Boardroom.query.all()
    return jsonify([b.to_dict() for b in boardrooms]), 200


@admin_bp.route('/boardrooms', methods=['POST'])
@token_required
@admin_required
def create_boardroom(current_user):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'message': 'No input data provided'}), 400
    if not data.get('name') or not data.get('code') or 'capacity' not in data:
        return jsonify({'message': 'Name, code and capacity are required'}), 400

    problem = _invalid_boardroom_fields(data)
    if problem:
        return jsonify({'message': problem}), 400

    if Boardroom.query.filter_by(name=data.get('name')).first():
        return jsonify({'message': 'Boardroom name already exists'}), 400

    try:
        new_boardroom = Boardroom(
            name=data['name'],
            code=data['code'].strip().upper(),
            campus=data.get('campus'),
            capacity=data['capacity'],
            facilities=data.get('facilities', []),
            operating_hours=data.get('operating_hours', {}),
            description=data.get('description'),
            is_active=data.get('is_active', True)
        )
        db.session.add(new_boardroom)
        db.session.commit()
        return jsonify({'message': 'Boardroom created', 'boardroom': new_boardroom.to_dict()}), 201
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error creating boardroom: {e}\n{traceback.format_exc()}")
        return jsonify({'message': 'Cannot create boardroom', 'error': str(e)}), 400


@admin_bp.route('/boardrooms/<int:boardroom_id>', methods=['PUT'])
@token_required
@admin_required
def update_boardroom(current_user, boardroom_id):
    boardroom = db.session.get(Boardroom, boardroom_id)
    if not boardroom:
        return jsonify({'message': 'Boardroom not found'}), 404

    data = request.get_json(silent=True) or {}
    problem = _invalid_boardroom_fields(data)
    if problem:
        return jsonify({'message': problem}), 400

    for field in ('name', 'campus', 'capacity', 'facilities', 'operating_hours', 'description', 'is_active'):
        if field in data:
            setattr(boardroom, field, data[field])
    if 'code' in data:
        boardroom.code = data['code'].strip().upper()

    db.session.commit()
    return jsonify({'message': 'Boardroom updated', 'boardroom': boardroom.to_dict()}), 200


@admin_bp.route('/boardrooms/<int:boardroom_id>', methods=['DELETE'])
@token_required
@admin_required
def deactivate_boardroom(current_user, boardroom_id):
    boardroom = db.session.get(Boardroom, boardroom_id)
    if not boardroom:
        return jsonify({'message': 'Boardroom not found'}), 404

    # Bookings are never removed, so neither is the boardroom they reference
    boardroom.is_active = False
    db.session.commit()
    return jsonify({'message': 'Boardroom deactivated'}), 200
