"""
Fire-and-forget notification emails queued on Celery.
"""
import logging

from flask import current_app
from kombu.exceptions import OperationalError

logger = logging.getLogger(__name__)


def queue_template_email(template_name, recipient_email, variables):
    """Queue a templated email. Returns True when the task was handed to the broker."""
    if not current_app.config.get('NOTIFICATIONS_ENABLED', True):
        logger.debug("Notifications disabled, skipping %s email to %s", template_name, recipient_email)
        return False

    if not recipient_email:
        return False

    from realty_admin.tasks.notification_tasks import send_template_email_task

    try:
        send_template_email_task.delay(template_name, recipient_email, variables)
    except OperationalError as e:
        logger.error("Could not queue %s email to %s: %s", template_name, recipient_email, e)
        return False

    logger.info("Queued %s email to %s", template_name, recipient_email)
    return True
