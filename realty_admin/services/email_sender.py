"""
Email Sender Service

Sends plain text / HTML email through AWS SES.
"""
import logging
import boto3
from botocore.exceptions import ClientError, BotoCoreError
from typing import Optional, Dict, Any

from flask import current_app

from realty_admin.services.email_templates import render_email

logger = logging.getLogger(__name__)

# Global SES client (initialized on first use)
_ses_client = None


def get_ses_client():
    """Get or create AWS SES client."""
    global _ses_client

    if _ses_client is not None:
        return _ses_client

    config = current_app.config
    if not config.get('AWS_ACCESS_KEY_ID') or not config.get('AWS_SECRET_ACCESS_KEY'):
        raise ValueError("AWS credentials not configured. Set AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY in environment.")

    try:
        _ses_client = boto3.client(
            'ses',
            aws_access_key_id=config['AWS_ACCESS_KEY_ID'],
            aws_secret_access_key=config['AWS_SECRET_ACCESS_KEY'],
            region_name=config.get('AWS_REGION', 'us-east-1')
        )
        logger.info("AWS SES client initialized", extra={"region": config.get('AWS_REGION')})
        return _ses_client
    except (ClientError, BotoCoreError) as e:
        logger.error("Failed to initialize AWS SES client", extra={"error": str(e)})
        raise ValueError(f"AWS SES configuration error: {str(e)}")


def send_email(
    recipient_email: str,
    subject: str,
    body: str,
    html: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Send email via AWS SES.

    Returns:
        Dict with 'message_id' and 'success' keys

    Raises:
        ValueError: If input is invalid or SES rejects the message
    """
    if not recipient_email or not recipient_email.strip():
        raise ValueError("Recipient email is required")

    if not subject or not subject.strip():
        raise ValueError("Email subject is required")

    config = current_app.config
    sender_address = config.get('SES_SENDER_EMAIL')
    if not sender_address:
        raise ValueError("Sender email not configured")
    sender = f"{config.get('FROM_NAME')} <{sender_address}>" if config.get('FROM_NAME') else sender_address

    message_body = {'Text': {'Data': body, 'Charset': 'UTF-8'}}
    if html:
        message_body['Html'] = {'Data': html, 'Charset': 'UTF-8'}

    try:
        response = get_ses_client().send_email(
            Source=sender,
            Destination={'ToAddresses': [recipient_email.strip()]},
            Message={
                'Subject': {'Data': subject, 'Charset': 'UTF-8'},
                'Body': message_body,
            }
        )
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        error_message = e.response.get('Error', {}).get('Message', str(e))
        logger.error("SES API error", extra={
            "error_code": error_code,
            "error_message": error_message,
            "recipient": recipient_email
        })
        raise ValueError(f"AWS SES error ({error_code}): {error_message}")
    except BotoCoreError as e:
        logger.error("Boto3 core error", extra={"error": str(e), "recipient": recipient_email})
        raise ValueError(f"AWS connection error: {str(e)}")

    message_id = response.get('MessageId')
    logger.info("Email sent successfully via SES", extra={"message_id": message_id, "recipient": recipient_email})
    return {'success': True, 'message_id': message_id}


def send_template_email(template_name: str, recipient_email: str, variables: Dict[str, Any]) -> Dict[str, Any]:
    subject, body, html = render_email(template_name, variables)
    return send_email(recipient_email, subject, body, html=html)
