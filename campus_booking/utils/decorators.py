from functools import wraps
from flask import request, jsonify, current_app
import jwt


def token_required(f):
    """
    Verify the bearer token issued by the identity service and pass the
    caller's claims to the view. User ids are opaque to this service.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        token = None
        if 'Authorization' in request.headers:
            # Bearer <token>
            auth_header = request.headers['Authorization']
            if auth_header.startswith("Bearer "):
                token = auth_header.split(" ")[1]

        if not token:
            return jsonify({'message': 'Token is missing!'}), 401

        try:
            data = jwt.decode(token, current_app.config['SECRET_KEY'], algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            return jsonify({'message': 'Token is invalid!', 'error': str(e)}), 401

        if not data.get('user_id'):
            return jsonify({'message': 'Token is invalid!', 'error': 'user_id claim missing'}), 401

        current_user = {'id': str(data['user_id']), 'role': data.get('role', 'user')}
        return f(current_user, *args, **kwargs)

    return decorated


def admin_required(f):
    # Must be stacked under @token_required, which passes current_user first
    @wraps(f)
    def decorated(*args, **kwargs):
        current_user = args[0]
        if current_user['role'] != 'admin':
            return jsonify({'message': 'Admin privilege required'}), 403
        return f(*args, **kwargs)
    return decorated
