"""
Celery tasks package.

Import directly from modules when needed:
  from realty_admin.tasks.notification_tasks import send_template_email_task
"""
