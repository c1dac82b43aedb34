import pytest

from realty_admin.models.property import Property
from realty_admin.services import email_sender
from realty_admin.services.email_templates import render_email
from realty_admin.services.notifications import queue_template_email
from realty_admin.tasks import notification_tasks


class FakeSES:
    def __init__(self):
        self.calls = []

    def send_email(self, **kwargs):
        self.calls.append(kwargs)
        return {"MessageId": "ses-123"}


def test_render_email():
    subject, body, html = render_email('property_rejected', {
        "name": "Sarah", "property_title": "Sea View Flat", "reason": "Missing deed",
    })
    assert subject == 'Property Verification Update'
    assert 'Reason: Missing deed' in body
    assert '"Sea View Flat"' in html


def test_render_unknown_template():
    with pytest.raises(ValueError):
        render_email('newsletter', {})


def test_send_email_through_ses(app, monkeypatch):
    ses = FakeSES()
    monkeypatch.setattr(email_sender, '_ses_client', ses)

    with app.app_context():
        result = email_sender.send_template_email('welcome', 'new@example.com', {"name": "New", "email": "new@example.com"})

    assert result == {"success": True, "message_id": "ses-123"}
    sent = ses.calls[0]
    assert sent['Destination'] == {'ToAddresses': ['new@example.com']}
    assert sent['Source'] == 'Real Estate Admin <noreply@realestate.com>'
    assert sent['Message']['Subject']['Data'] == 'Welcome to Real Estate Platform'


def test_send_email_requires_recipient(app):
    with app.app_context():
        with pytest.raises(ValueError):
            email_sender.send_email(' ', 'Subject', 'Body')


def test_queue_skipped_when_disabled(app, monkeypatch):
    queued = []
    monkeypatch.setattr(notification_tasks.send_template_email_task, 'delay', lambda *args: queued.append(args))

    with app.app_context():
        assert queue_template_email('welcome', 'x@example.com', {}) is False
    assert queued == []


def test_queue_hands_task_to_celery(app, monkeypatch):
    queued = []
    monkeypatch.setattr(notification_tasks.send_template_email_task, 'delay', lambda *args: queued.append(args))
    app.config['NOTIFICATIONS_ENABLED'] = True

    with app.app_context():
        assert queue_template_email('welcome', 'x@example.com', {"name": "X"}) is True
        assert queue_template_email('welcome', None, {}) is False
    assert queued == [('welcome', 'x@example.com', {"name": "X"})]


def test_verifying_property_notifies_owner(app, client, admin_headers, lookup, monkeypatch):
    queued = []
    monkeypatch.setattr(notification_tasks.send_template_email_task, 'delay', lambda *args: queued.append(args))
    app.config['NOTIFICATIONS_ENABLED'] = True

    property_id = lookup(Property, 'property_id', title='Luxury 3BHK Apartment in Bandra')
    client.post(f'/api/properties/{property_id}/verify', headers=admin_headers)

    assert queued[0][0] == 'property_approved'
    assert queued[0][1] == 'landlord@example.com'
    assert queued[0][2]['property_title'] == 'Luxury 3BHK Apartment in Bandra'


def test_task_sends_email(app, sent_emails):
    result = notification_tasks.send_template_email_task('welcome', 'y@example.com', {"name": "Y"})
    assert result == {"success": True, "message_id": "test-message-id"}
    assert sent_emails[0]['to'] == 'y@example.com'


def test_task_reports_failures(app, monkeypatch):
    def failing_send(*args):
        raise ValueError("AWS SES error (MessageRejected): Email address is not verified.")

    monkeypatch.setattr(notification_tasks, 'send_template_email', failing_send)

    result = notification_tasks.send_template_email_task('welcome', 'z@example.com', {})
    assert result['success'] is False
    assert 'MessageRejected' in result['error']
