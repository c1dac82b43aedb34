import io

from openpyxl import load_workbook

from realty_admin.models.payment import Payment
from realty_admin.models.subscription import UserSubscription
from realty_admin.models.user import User

NEW_USER = {
    "name": "Priya Sharma",
    "email": "priya@example.com",
    "phone": "9123456780",
    "password": "secret1",
    "user_type": "tenant",
}


def test_list_users_with_filters(client, admin_headers):
    response = client.get('/api/admin/users?user_type=landlord&sort_by=name&sort_order=asc', headers=admin_headers)
    assert response.status_code == 200
    body = response.get_json()
    assert [u['name'] for u in body['data']] == ['David Johnson', 'Sarah Landlord']
    assert body['pagination']['total'] == 2


def test_list_users_search_and_pagination(client, admin_headers):
    response = client.get('/api/admin/users?search=example.com&limit=2&page=2', headers=admin_headers)
    body = response.get_json()
    assert len(body['data']) == 2
    assert body['pagination'] == {"page": 2, "pages": 3, "total": 5, "limit": 2}


def test_limit_is_clamped(client, admin_headers):
    response = client.get('/api/admin/users?limit=1000&page=-3', headers=admin_headers)
    assert response.get_json()['pagination']['limit'] == 100
    assert response.get_json()['pagination']['page'] == 1


def test_create_user(client, admin_headers, lookup):
    response = client.post('/api/admin/users', headers=admin_headers, json=NEW_USER)
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['email'] == 'priya@example.com'
    assert data['created_by']['name'] == 'Super Admin'
    assert lookup(User, 'user_id', email='priya@example.com') == data['id']


def test_create_user_validation(client, admin_headers):
    response = client.post('/api/admin/users', headers=admin_headers,
                           json=dict(NEW_USER, phone='12345', password='abc'))
    assert response.status_code == 400
    errors = {e['field']: e for e in response.get_json()['errors']}
    assert errors['phone']['message'] == 'Please provide a valid 10-digit phone number'
    assert errors['phone']['value'] == '12345'
    assert 'password' in errors


def test_create_user_duplicate_phone(client, admin_headers):
    response = client.post('/api/admin/users', headers=admin_headers, json=dict(NEW_USER, phone='9876543210'))
    assert response.status_code == 400
    assert response.get_json()['message'] == 'User with this phone number already exists'


def test_update_user(client, admin_headers, lookup):
    user_id = lookup(User, 'user_id', email='lisa@example.com')
    response = client.put(f'/api/admin/users/{user_id}', headers=admin_headers,
                          json={"name": "Lisa S.", "user_type": "both"})
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['name'] == 'Lisa S.'
    assert data['user_type'] == 'both'


def test_status_and_block(client, admin_headers, lookup):
    user_id = lookup(User, 'user_id', email='david@example.com')

    response = client.patch(f'/api/admin/users/{user_id}/status', headers=admin_headers, json={"status": "pending"})
    assert response.status_code == 200
    assert response.get_json()['data']['status'] == 'pending'

    response = client.patch(f'/api/admin/users/{user_id}/status', headers=admin_headers, json={"status": "gone"})
    assert response.status_code == 400

    response = client.patch(f'/api/admin/users/{user_id}/block', headers=admin_headers, json={"is_blocked": True})
    assert response.get_json()['data']['is_blocked'] is True

    blocked = client.get('/api/admin/users?is_blocked=true', headers=admin_headers).get_json()
    assert [u['id'] for u in blocked['data']] == [user_id]


def test_user_stats(client, admin_headers):
    data = client.get('/api/admin/users/stats', headers=admin_headers).get_json()['data']
    assert data['total'] == 5
    assert data['by_type'] == {"tenant": 2, "landlord": 2, "both": 1}
    assert data['new_this_month'] == 5


def test_delete_and_bulk_delete(client, admin_headers, lookup):
    lisa = lookup(User, 'user_id', email='lisa@example.com')
    david = lookup(User, 'user_id', email='david@example.com')

    assert client.delete(f'/api/admin/users/{lisa}', headers=admin_headers).status_code == 200
    assert client.get(f'/api/admin/users/{lisa}', headers=admin_headers).status_code == 404

    response = client.post('/api/admin/users/bulk-delete', headers=admin_headers,
                           json={"user_ids": [david, 'missing-id']})
    assert response.status_code == 200
    assert response.get_json()['data']['deleted_count'] == 1


def test_deleting_user_keeps_payment_history(app, client, admin_headers, lookup):
    tenant = lookup(User, 'user_id', email='tenant@example.com')

    assert client.delete(f'/api/admin/users/{tenant}', headers=admin_headers).status_code == 200

    with app.app_context():
        payment = Payment.query.filter_by(transaction_id='pay_SEED0001').first()
        payment_id = payment.payment_id
        assert payment.user_id is None
        assert payment.status == 'completed'
        assert UserSubscription.query.filter_by(user_id=tenant).count() == 0

    listed = client.get(f'/api/admin/payments/{payment_id}', headers=admin_headers).get_json()['data']
    assert listed['user'] is None


def test_bulk_delete_requires_ids(client, admin_headers):
    response = client.post('/api/admin/users/bulk-delete', headers=admin_headers, json={"user_ids": []})
    assert response.status_code == 400


def test_export_users(client, admin_headers):
    response = client.get('/api/admin/users/export?user_type=tenant', headers=admin_headers)
    assert response.status_code == 200
    assert response.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

    sheet = load_workbook(io.BytesIO(response.data)).active
    rows = list(sheet.iter_rows(values_only=True))
    assert rows[0][0] == 'Name'
    assert {row[1] for row in rows[1:]} == {'tenant@example.com', 'lisa@example.com'}


def test_login_history(client, admin_headers, user_token, lookup):
    user_id = lookup(User, 'user_id', email='tenant@example.com')
    data = client.get(f'/api/admin/users/{user_id}/logins', headers=admin_headers).get_json()['data']
    assert data['last_login'] is not None
    assert len(data['history']) == 1
