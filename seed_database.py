#!/usr/bin/env python
"""
Load the sample data set into the configured database.

Usage:
    python seed_database.py            # tables must exist (run_migrations.py)
    python seed_database.py --create   # create missing tables first
"""
import sys

from realty_admin import create_app
from realty_admin.extensions import db
from realty_admin.seeders import seed_database


def main():
    app = create_app()
    with app.app_context():
        if '--create' in sys.argv:
            db.create_all()

        print("=" * 60)
        print("Seeding database...")
        print("=" * 60)
        summary = seed_database()

        for name, count in summary.items():
            print(f"  • {count} {name.replace('_', ' ')}")

        print("\nLogin credentials:")
        print("  Admin: admin@example.com / admin123")
        print("  User:  tenant@example.com / password123")


if __name__ == '__main__':
    main()
