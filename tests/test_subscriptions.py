from datetime import datetime

import pytest

from realty_admin.models.admin import Admin
from realty_admin.models.payment import Payment
from realty_admin.models.subscription import SubscriptionPlan, UserSubscription
from realty_admin.models.user import User

PLANS_URL = '/api/admin/subscriptions'


@pytest.fixture
def tenant_subscription(lookup):
    user_id = lookup(User, 'user_id', email='tenant@example.com')
    return lookup(UserSubscription, 'subscription_id', user_id=user_id)


def test_plans_in_display_order(client, admin_headers):
    data = client.get(f'{PLANS_URL}/plans', headers=admin_headers).get_json()['data']
    assert [p['name'] for p in data] == ['Starter', 'Standard', 'Priority', 'Premium']
    assert [p['visit_credits'] for p in data] == [5, 15, 25, 50]


def test_inactive_plans_hidden_by_default(client, admin_headers, lookup):
    plan_id = lookup(SubscriptionPlan, 'plan_id', name='Priority')
    client.post(f'{PLANS_URL}/update', headers=admin_headers, json={"plan_id": plan_id, "status": "inactive"})

    active = client.get(f'{PLANS_URL}/plans', headers=admin_headers).get_json()['data']
    assert 'Priority' not in [p['name'] for p in active]

    every = client.get(f'{PLANS_URL}/plans?status=all', headers=admin_headers).get_json()['data']
    assert len(every) == 4


def test_subscription_writes_need_permission(client, limited_admin_headers):
    assert client.get(f'{PLANS_URL}/plans', headers=limited_admin_headers).status_code == 200

    response = client.post(f'{PLANS_URL}/create', headers=limited_admin_headers,
                           json={"name": "Trial", "price": 0, "duration_days": 7, "visit_credits": 1})
    assert response.status_code == 403


def test_create_plan(client, admin_headers):
    payload = {"name": "Enterprise", "price": 9999, "duration_days": 90, "visit_credits": 200,
               "features": ["Dedicated Manager"], "sort_order": 5}
    response = client.post(f'{PLANS_URL}/create', headers=admin_headers, json=payload)
    assert response.status_code == 201
    assert response.get_json()['data']['status'] == 'active'

    duplicate = client.post(f'{PLANS_URL}/create', headers=admin_headers, json=payload)
    assert duplicate.status_code == 400
    assert duplicate.get_json()['message'] == 'Plan with this name already exists'


def test_update_plan(client, admin_headers, lookup):
    plan_id = lookup(SubscriptionPlan, 'plan_id', name='Starter')

    response = client.post(f'{PLANS_URL}/update', headers=admin_headers, json={"plan_id": plan_id, "price": 899})
    assert response.status_code == 200
    assert response.get_json()['data']['price'] == 899

    response = client.post(f'{PLANS_URL}/update', headers=admin_headers, json={"plan_id": plan_id, "name": "Premium"})
    assert response.status_code == 400

    response = client.post(f'{PLANS_URL}/update', headers=admin_headers, json={"plan_id": "missing", "price": 1})
    assert response.status_code == 404


def test_get_plan_counts_active_subscriptions(client, admin_headers, lookup):
    plan_id = lookup(SubscriptionPlan, 'plan_id', name='Standard')
    data = client.get(f'{PLANS_URL}/{plan_id}', headers=admin_headers).get_json()['data']
    assert data['name'] == 'Standard'
    assert data['active_subscriptions'] == 1


def test_plan_with_active_subscriptions_cannot_be_deleted(client, admin_headers, lookup):
    plan_id = lookup(SubscriptionPlan, 'plan_id', name='Premium')
    response = client.delete(f'{PLANS_URL}/{plan_id}', headers=admin_headers)
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Cannot delete plan. 1 active subscriptions exist.'


def test_delete_unused_plan(client, admin_headers):
    created = client.post(f'{PLANS_URL}/create', headers=admin_headers, json={
        "name": "Trial", "price": 0, "duration_days": 7, "visit_credits": 1,
    }).get_json()['data']

    assert client.delete(f"{PLANS_URL}/{created['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"{PLANS_URL}/{created['id']}", headers=admin_headers).status_code == 404


def test_delete_plan_with_payment_history(app, client, admin_headers, lookup):
    starter = lookup(SubscriptionPlan, 'plan_id', name='Starter')
    assert client.delete(f'{PLANS_URL}/{starter}', headers=admin_headers).status_code == 200

    with app.app_context():
        pending = Payment.query.filter_by(status='pending').first()
        assert pending.plan_id is None
        assert pending.to_dict()['plan'] is None


def test_delete_plan_with_cancelled_subscriptions(app, client, admin_headers, lookup):
    standard = lookup(SubscriptionPlan, 'plan_id', name='Standard')
    user_id = lookup(User, 'user_id', email='tenant@example.com')
    client.post(f'{PLANS_URL}/user-subscription/cancel', headers=admin_headers, json={"user_id": user_id})

    assert client.delete(f'{PLANS_URL}/{standard}', headers=admin_headers).status_code == 200

    with app.app_context():
        cancelled = UserSubscription.query.filter_by(user_id=user_id).one()
        assert cancelled.status == 'cancelled'
        assert cancelled.plan_id is None


def test_assign_subscription(client, admin_headers, lookup):
    user_id = lookup(User, 'user_id', email='lisa@example.com')
    plan_id = lookup(SubscriptionPlan, 'plan_id', name='Starter')
    payment_id = lookup(Payment, 'payment_id', status='pending')

    response = client.post(f'{PLANS_URL}/user-subscriptions', headers=admin_headers, json={
        "user_id": user_id, "plan_id": plan_id, "payment_id": payment_id, "start_date": "2030-01-01T00:00:00",
    })
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['remaining_credits'] == 5
    assert data['total_credits'] == 5
    assert data['start_date'] == '2030-01-01T00:00:00'
    assert data['end_date'] == '2030-01-31T00:00:00'

    again = client.post(f'{PLANS_URL}/user-subscriptions', headers=admin_headers,
                        json={"user_id": user_id, "plan_id": plan_id})
    assert again.status_code == 400
    assert again.get_json()['message'] == 'User already has an active subscription'


def test_assign_subscription_lookups(client, admin_headers, lookup):
    user_id = lookup(User, 'user_id', email='david@example.com')
    plan_id = lookup(SubscriptionPlan, 'plan_id', name='Priority')

    response = client.post(f'{PLANS_URL}/user-subscriptions', headers=admin_headers,
                           json={"user_id": "missing", "plan_id": plan_id})
    assert response.status_code == 404

    response = client.post(f'{PLANS_URL}/user-subscriptions', headers=admin_headers,
                           json={"user_id": user_id, "plan_id": plan_id, "payment_id": "PAY_missing"})
    assert response.status_code == 404

    client.post(f'{PLANS_URL}/update', headers=admin_headers, json={"plan_id": plan_id, "status": "inactive"})
    response = client.post(f'{PLANS_URL}/user-subscriptions', headers=admin_headers,
                           json={"user_id": user_id, "plan_id": plan_id})
    assert response.status_code == 400


def test_list_user_subscriptions(client, admin_headers, lookup):
    plan_id = lookup(SubscriptionPlan, 'plan_id', name='Premium')
    body = client.get(f'{PLANS_URL}/user-subscriptions?plan_id={plan_id}', headers=admin_headers).get_json()
    assert body['pagination']['total'] == 1
    assert body['data'][0]['user']['email'] == 'landlord@example.com'


def test_cancel_subscription(client, admin_headers, lookup):
    user_id = lookup(User, 'user_id', email='tenant@example.com')

    response = client.post(f'{PLANS_URL}/user-subscription/cancel', headers=admin_headers, json={"user_id": user_id})
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['status'] == 'cancelled'
    assert data['cancellation_reason'] == 'Cancelled by admin'
    assert data['cancelled_by'] == lookup(Admin, 'admin_id', email='admin@example.com')

    again = client.post(f'{PLANS_URL}/user-subscription/cancel', headers=admin_headers, json={"user_id": user_id})
    assert again.status_code == 404


def test_add_credits(client, admin_headers, tenant_subscription):
    response = client.post(f'{PLANS_URL}/add-credits', headers=admin_headers,
                           json={"subscription_id": tenant_subscription, "credits": 5})
    data = response.get_json()['data']
    assert data['remaining_credits'] == 20
    assert data['total_credits'] == 20

    response = client.post(f'{PLANS_URL}/add-credits', headers=admin_headers,
                           json={"subscription_id": tenant_subscription, "credits": 0})
    assert response.status_code == 400


def test_add_credits_by_user(client, admin_headers, lookup):
    user_id = lookup(User, 'user_id', email='tenant@example.com')
    response = client.post(f'{PLANS_URL}/user-subscription/add-credits', headers=admin_headers,
                           json={"user_id": user_id, "credits": 3, "reason": "Referral bonus"})
    assert response.status_code == 200
    body = response.get_json()
    assert body['message'] == '3 bonus credits added successfully'
    assert body['data']['remaining_credits'] == 18
    assert body['data']['reason'] == 'Referral bonus'

    lisa = lookup(User, 'user_id', email='lisa@example.com')
    response = client.post(f'{PLANS_URL}/user-subscription/add-credits', headers=admin_headers,
                           json={"user_id": lisa, "credits": 3})
    assert response.status_code == 404

    response = client.post(f'{PLANS_URL}/user-subscription/add-credits', headers=admin_headers, json={"credits": 3})
    assert response.status_code == 400


def test_suspend_and_restore_by_user(client, admin_headers, lookup):
    user_id = lookup(User, 'user_id', email='tenant@example.com')
    url = f'{PLANS_URL}/user-subscription/suspend'

    response = client.post(url, headers=admin_headers, json={"user_id": user_id, "action": "suspend"})
    assert response.get_json()['data']['status'] == 'suspended'

    response = client.post(url, headers=admin_headers, json={"user_id": user_id, "action": "restore"})
    assert response.get_json()['data']['status'] == 'active'


def test_suspend_and_restore(client, admin_headers, tenant_subscription):
    response = client.post(f'{PLANS_URL}/suspend', headers=admin_headers,
                           json={"subscription_id": tenant_subscription, "action": "suspend"})
    assert response.get_json()['data']['status'] == 'suspended'

    response = client.post(f'{PLANS_URL}/suspend', headers=admin_headers,
                           json={"subscription_id": tenant_subscription, "action": "restore"})
    assert response.get_json()['data']['status'] == 'active'

    response = client.post(f'{PLANS_URL}/suspend', headers=admin_headers,
                           json={"subscription_id": tenant_subscription, "action": "pause"})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Invalid action. Use suspend or restore'


def test_bulk_update(app, client, admin_headers):
    with app.app_context():
        ids = [s.subscription_id for s in UserSubscription.query.all()]

    response = client.post(f'{PLANS_URL}/bulk-update', headers=admin_headers,
                           json={"subscription_ids": ids + ['missing'], "status": "expired"})
    assert response.status_code == 200
    assert response.get_json()['data']['updated_count'] == 2

    with app.app_context():
        assert {s.status for s in UserSubscription.query.all()} == {'expired'}


def test_subscription_report(client, admin_headers):
    data = client.get(f'{PLANS_URL}/reports/subscriptions', headers=admin_headers).get_json()['data']
    assert data['total'] == 2
    assert data['by_status']['active'] == 2
    revenue = {row['plan']: row['revenue'] for row in data['revenue_by_plan']}
    assert revenue == {"Standard": 1999.0, "Premium": 4999.0}


def test_usage(client, admin_headers, tenant_subscription):
    data = client.get(f'{PLANS_URL}/usage/{tenant_subscription}', headers=admin_headers).get_json()['data']
    assert data['credits_used'] == 0
    assert data['credits_remaining'] == 15
    assert data['usage_percentage'] == 0
    assert 0 < data['days_remaining'] <= 25
    assert datetime.fromisoformat(data['subscription']['end_date']) > datetime.utcnow()
