import logging
from flask import Flask, jsonify
from campus_booking.config import DevelopmentConfig
from campus_booking.errors import BookingError
from campus_booking.extensions import db, migrate


def create_app(config_class=DevelopmentConfig):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    from campus_booking import models  # noqa: F401  register tables
    from campus_booking.services.booking_service import BookingService
    app.extensions['booking_service'] = BookingService.from_config(app.config)

    # Register Blueprints
    from campus_booking.api.routes.bookings import bookings_bp
    from campus_booking.api.routes.boardrooms import boardrooms_bp
    from campus_booking.api.routes.admin import admin_bp

    app.register_blueprint(bookings_bp, url_prefix='/api/bookings')
    app.register_blueprint(boardrooms_bp, url_prefix='/api/boardrooms')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    @app.errorhandler(BookingError)
    def handle_booking_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.route('/health')
    def health():
        return {"status": "ok", "app": "CampusBooking"}

    return app
