"""
Celery entry point for running worker commands.

Usage:
    celery -A celery_worker worker --loglevel=info --pool=solo
"""
from realty_admin import create_app
from realty_admin.celery_app import celery_app

# Binds the worker to the app config and app context
app = create_app()

# Import tasks so they're registered with Celery
from realty_admin.tasks import notification_tasks  # noqa: F401,E402

print(f"[CELERY WORKER] Registered tasks: {[name for name in celery_app.tasks if not name.startswith('celery.')]}")

if __name__ == '__main__':
    celery_app.start()
