import re

import pytest

from realty_admin.models.payment import Payment
from realty_admin.models.subscription import SubscriptionPlan
from realty_admin.models.user import User

PAYMENTS_URL = '/api/admin/payments'


@pytest.fixture
def completed_payment(lookup):
    return lookup(Payment, 'payment_id', transaction_id='pay_SEED0001')


@pytest.fixture
def john_headers(client):
    """Admin role: payments and settings:read, no settings:update."""
    response = client.post('/api/auth/login', json={"email": "john@sunrise.com", "password": "admin123"})
    return {"Authorization": f"Bearer {response.get_json()['data']['access_token']}"}


def test_seeded_payment_ids(app):
    with app.app_context():
        for payment in Payment.query.all():
            assert re.fullmatch(r'PAY_\d{13}_[A-Z0-9]{6}', payment.payment_id)


def test_list_payments(client, admin_headers):
    body = client.get(PAYMENTS_URL, headers=admin_headers).get_json()
    assert body['pagination']['total'] == 4

    body = client.get(f'{PAYMENTS_URL}?status=completed&sort_by=amount&sort_order=desc', headers=admin_headers).get_json()
    assert [p['amount'] for p in body['data']] == [4999, 1999]

    body = client.get(f'{PAYMENTS_URL}?user_type=landlord&payment_method=razorpay', headers=admin_headers).get_json()
    assert [p['status'] for p in body['data']] == ['failed']

    body = client.get(f'{PAYMENTS_URL}?search=SEED0002', headers=admin_headers).get_json()
    assert [p['payment_method'] for p in body['data']] == ['stripe']


def test_list_payments_by_date(client, admin_headers):
    body = client.get(f'{PAYMENTS_URL}?end_date=2000-01-01', headers=admin_headers).get_json()
    assert body['pagination']['total'] == 0


def test_pending_and_failed(client, admin_headers):
    pending = client.get(f'{PAYMENTS_URL}/pending', headers=admin_headers).get_json()['data']
    assert [p['payment_method'] for p in pending] == ['bank_transfer']

    failed = client.get(f'{PAYMENTS_URL}/failed', headers=admin_headers).get_json()['data']
    assert [p['gateway_response'] for p in failed] == [{"error": "card_declined"}]


def test_refund_needs_update_permission(client, limited_admin_headers, john_headers, completed_payment):
    assert client.get(PAYMENTS_URL, headers=limited_admin_headers).status_code == 200

    response = client.post(f'{PAYMENTS_URL}/refund', headers=limited_admin_headers,
                           json={"payment_id": completed_payment, "reason": "Duplicate charge"})
    assert response.status_code == 403
    assert response.get_json()['message'] == 'Access denied. update permission required for payments module.'

    response = client.post(f'{PAYMENTS_URL}/refund', headers=john_headers,
                           json={"payment_id": completed_payment, "reason": "Duplicate charge"})
    assert response.status_code == 200


def test_get_payment(client, admin_headers, completed_payment):
    data = client.get(f'{PAYMENTS_URL}/{completed_payment}', headers=admin_headers).get_json()['data']
    assert data['payment_id'] == completed_payment
    assert data['plan']['name'] == 'Standard'
    assert data['user']['email'] == 'tenant@example.com'

    assert client.get(f'{PAYMENTS_URL}/PAY_missing', headers=admin_headers).status_code == 404


def test_record_payment(client, admin_headers, lookup):
    user_id = lookup(User, 'user_id', email='both@example.com')
    plan_id = lookup(SubscriptionPlan, 'plan_id', name='Starter')

    response = client.post(PAYMENTS_URL, headers=admin_headers, json={
        "user_id": user_id, "user_type": "tenant", "plan_id": plan_id, "amount": 999,
        "payment_method": "wallet", "status": "completed",
    })
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['payment_id'].startswith('PAY_')
    assert data['currency'] == 'INR'
    assert data['processed_by']['name'] == 'Super Admin'

    duplicate = client.post(PAYMENTS_URL, headers=admin_headers, json={
        "payment_id": data['payment_id'], "user_id": user_id, "user_type": "tenant", "plan_id": plan_id,
        "amount": 999, "payment_method": "wallet",
    })
    assert duplicate.status_code == 400
    assert duplicate.get_json()['message'] == 'Payment with this ID already exists'


def test_record_payment_unknown_plan(client, admin_headers, lookup):
    user_id = lookup(User, 'user_id', email='both@example.com')
    response = client.post(PAYMENTS_URL, headers=admin_headers, json={
        "user_id": user_id, "user_type": "tenant", "plan_id": "missing", "amount": 10, "payment_method": "wallet",
    })
    assert response.status_code == 404


def test_refund_only_completed_payments(client, admin_headers, lookup):
    pending = lookup(Payment, 'payment_id', status='pending')
    response = client.post(f'{PAYMENTS_URL}/refund', headers=admin_headers, json={"payment_id": pending})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Only completed payments can be refunded'


def test_refund_cannot_exceed_amount(client, admin_headers, completed_payment):
    response = client.post(f'{PAYMENTS_URL}/refund', headers=admin_headers,
                           json={"payment_id": completed_payment, "refund_amount": 5000})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Refund amount cannot exceed payment amount'


def test_refund(client, admin_headers, completed_payment):
    response = client.post(f'{PAYMENTS_URL}/refund', headers=admin_headers,
                           json={"payment_id": completed_payment, "refund_amount": 500, "reason": "Partial service"})
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['status'] == 'refunded'
    assert data['refund_amount'] == 500
    assert data['refund_reason'] == 'Partial service'
    assert data['refunded_at'] is not None

    again = client.post(f'{PAYMENTS_URL}/refund', headers=admin_headers, json={"payment_id": completed_payment})
    assert again.status_code == 400


def test_full_refund_by_default(client, admin_headers, completed_payment):
    response = client.post(f'{PAYMENTS_URL}/refund', headers=admin_headers, json={"payment_id": completed_payment})
    assert response.get_json()['data']['refund_amount'] == 1999


def test_update_status_keeps_notes(client, admin_headers, lookup):
    failed = lookup(Payment, 'payment_id', status='failed')
    response = client.post(f'{PAYMENTS_URL}/update-status', headers=admin_headers,
                           json={"payment_id": failed, "status": "cancelled", "notes": "User abandoned"})
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['status'] == 'cancelled'
    assert data['gateway_response'] == {"error": "card_declined", "admin_notes": "User abandoned"}

    response = client.post(f'{PAYMENTS_URL}/update-status', headers=admin_headers,
                           json={"payment_id": failed, "status": "lost"})
    assert response.status_code == 400


def test_generate_invoice(client, admin_headers, completed_payment):
    response = client.post(f'{PAYMENTS_URL}/generate-invoice', headers=admin_headers,
                           json={"payment_id": completed_payment})
    assert response.status_code == 200
    assert response.get_json()['data']['invoice_url'] == f'http://localhost/invoices/{completed_payment}.pdf'


def test_analytics(client, admin_headers):
    data = client.get(f'{PAYMENTS_URL}/analytics', headers=admin_headers).get_json()['data']
    assert data['total_payments'] == 4
    assert data['total_revenue'] == 6998
    assert data['average_payment'] == 3499
    assert data['success_rate'] == 50
    assert data['by_status']['failed'] == 1
    methods = {row['method']: row['revenue'] for row in data['by_method']}
    assert methods == {"razorpay": 1999, "stripe": 4999}
    assert [row['revenue'] for row in data['daily_revenue']] == [1999, 4999]


def test_gateway_settings_are_masked(client, admin_headers):
    response = client.post(f'{PAYMENTS_URL}/settings/update', headers=admin_headers, json={
        "razorpay_enabled": True, "razorpay_key_id": "rzp_live_key", "razorpay_key_secret": "secret-value-9876",
    })
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['razorpay_key_secret'] == '*************9876'
    assert data['razorpay_key_id'] == 'rzp_live_key'

    # Echoing the masked value back leaves the stored secret alone
    client.post(f'{PAYMENTS_URL}/settings/update', headers=admin_headers,
                json={"razorpay_key_secret": data['razorpay_key_secret'], "tax_rate": 18})

    data = client.get(f'{PAYMENTS_URL}/settings', headers=admin_headers).get_json()['data']
    assert data['razorpay_key_secret'] == '*************9876'
    assert data['tax_rate'] == 18
    assert data['currency'] == 'INR'


def test_settings_update_needs_permission(client, john_headers):
    assert client.get(f'{PAYMENTS_URL}/settings', headers=john_headers).status_code == 200
    response = client.post(f'{PAYMENTS_URL}/settings/update', headers=john_headers, json={"tax_rate": 5})
    assert response.status_code == 403
