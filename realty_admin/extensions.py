from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate

"""
Flask Extensions - Initialized here, configured in realty_admin/__init__.py

Kept in a separate module so models, blueprints and tasks can import them
without importing the application factory.
"""
# Database ORM
# Usage: from realty_admin.extensions import db
db = SQLAlchemy()

# JWT Authentication - bearer tokens carrying {sub, type}
# Usage: from realty_admin.extensions import jwt
jwt = JWTManager()

# Alembic migrations through Flask-Migrate
migrate = Migrate()
