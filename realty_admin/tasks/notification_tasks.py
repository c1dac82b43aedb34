"""
Celery tasks for outbound notification emails.
"""
import logging
from typing import Dict, Any

from realty_admin.celery_app import celery_app
from realty_admin.services.email_sender import send_template_email

logger = logging.getLogger(__name__)


@celery_app.task(name='send_template_email')
def send_template_email_task(template_name: str, recipient_email: str, variables: Dict[str, Any]) -> Dict[str, Any]:
    """
    Render and send one templated email. Runs once; failures are logged
    and reported in the task result.
    """
    try:
        result = send_template_email(template_name, recipient_email, variables)
    except ValueError as e:
        logger.error("Notification email failed", extra={
            "template": template_name,
            "recipient": recipient_email,
            "error": str(e)
        })
        return {"success": False, "error": str(e)}

    return {"success": True, "message_id": result.get('message_id')}
