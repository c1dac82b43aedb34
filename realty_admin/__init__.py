import logging

from flask import Flask, jsonify, send_from_directory
from flask_cors import CORS

from realty_admin.config import Config
from realty_admin.extensions import db, jwt, migrate
from realty_admin.celery_app import init_celery
from realty_admin.errors import register_error_handlers


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'))
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    CORS(app)

    # Health check endpoint - register early so it's always available
    @app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({"success": True, "message": "Server is running"}), 200

    @app.route('/uploads/<path:filename>', methods=['GET'])
    def uploaded_file(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    # Import models so they are registered on the metadata
    from realty_admin import models  # noqa: F401

    # Register blueprints
    from realty_admin.api import auth
    app.register_blueprint(auth.bp, url_prefix='/api/auth')
    from realty_admin.api import admins
    app.register_blueprint(admins.bp, url_prefix='/api/admin')
    from realty_admin.api import users
    app.register_blueprint(users.bp, url_prefix='/api/admin/users')
    from realty_admin.api import dashboard
    app.register_blueprint(dashboard.bp, url_prefix='/api/admin/dashboard')
    from realty_admin.api import staff
    app.register_blueprint(staff.bp, url_prefix='/api/admin/staff')
    from realty_admin.api import subscriptions
    app.register_blueprint(subscriptions.bp, url_prefix='/api/admin/subscriptions')
    from realty_admin.api import payments
    app.register_blueprint(payments.bp, url_prefix='/api/admin/payments')
    from realty_admin.api import properties
    app.register_blueprint(properties.bp, url_prefix='/api/properties')
    from realty_admin.api import taxonomy
    app.register_blueprint(taxonomy.bp, url_prefix='/api')

    register_error_handlers(app)

    # JWT error handlers so token failures use the API error shape
    @jwt.unauthorized_loader
    def jwt_missing_token(err):
        return jsonify({"success": False, "message": "Access denied. No token provided."}), 401

    @jwt.invalid_token_loader
    def jwt_invalid_token(err):
        return jsonify({"success": False, "message": "Token is not valid"}), 401

    @jwt.expired_token_loader
    def jwt_expired_token(header, payload):
        return jsonify({"success": False, "message": "Token has expired"}), 401

    from realty_admin.commands import register_commands
    register_commands(app)

    init_celery(app)

    return app
