#!/usr/bin/env python
"""
Script to run database migrations before starting the server.
This ensures migrations run with proper Flask app context.
"""
import sys
import traceback

print("=" * 60)
print("DATABASE MIGRATION SCRIPT STARTING")
print("=" * 60)

try:
    from realty_admin import create_app
    from realty_admin.extensions import db
    from flask_migrate import upgrade

    app = create_app()
    print("✓ Flask app created successfully")

    with app.app_context():
        print(f"  Database: {app.config['SQLALCHEMY_DATABASE_URI'].rsplit('/', 1)[-1]}")

        print("\n" + "=" * 60)
        print("Testing database connection...")
        print("=" * 60)
        with db.engine.connect():
            print("✓ Database connection successful")

        print("\n" + "=" * 60)
        print("Running database migrations...")
        print("=" * 60)
        upgrade()
        print("✓ Migrations completed successfully!")

except Exception as e:
    print(f"\n✗ Migration failed: {e}")
    traceback.print_exc()
    sys.exit(1)

print("\n" + "=" * 60)
print("MIGRATION SCRIPT COMPLETED SUCCESSFULLY")
print("=" * 60)
