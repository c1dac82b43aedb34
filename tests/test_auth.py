from datetime import datetime, timedelta

from flask_jwt_extended import decode_token

from realty_admin.extensions import db
from realty_admin.models.admin import Admin
from realty_admin.models.user import User


def test_health(client):
    response = client.get('/api/health')
    assert response.status_code == 200
    assert response.get_json()['success'] is True


def test_admin_login_returns_admin_token(app, client):
    response = client.post('/api/auth/login', json={"email": "ADMIN@example.com", "password": "admin123"})
    assert response.status_code == 200

    data = response.get_json()['data']
    assert data['user_type'] == 'admin'
    assert data['user']['email'] == 'admin@example.com'
    assert 'password_hash' not in data['user']

    with app.app_context():
        claims = decode_token(data['access_token'])
        admin = Admin.query.filter_by(email='admin@example.com').first()
        assert claims['sub'] == admin.admin_id
        assert claims['type'] == 'admin'
        assert admin.last_login is not None


def test_user_login_returns_user_token(app, client):
    response = client.post('/api/auth/login', json={"email": "tenant@example.com", "password": "password123"})
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['user_type'] == 'user'

    with app.app_context():
        assert decode_token(data['access_token'])['type'] == 'user'


def test_login_wrong_password(client):
    response = client.post('/api/auth/login', json={"email": "admin@example.com", "password": "nope"})
    assert response.status_code == 401
    body = response.get_json()
    assert body['success'] is False
    assert body['message'] == 'Invalid email or password'


def test_login_validation_errors(client):
    response = client.post('/api/auth/login', json={"email": "not-an-email"})
    assert response.status_code == 400
    body = response.get_json()
    assert body['success'] is False
    fields = {error['field'] for error in body['errors']}
    assert fields == {'email', 'password'}


def test_login_blocked_user(app, client):
    with app.app_context():
        user = User.query.filter_by(email='lisa@example.com').first()
        user.is_blocked = True
        db.session.commit()

    response = client.post('/api/auth/login', json={"email": "lisa@example.com", "password": "password123"})
    assert response.status_code == 401
    assert response.get_json()['message'] == 'Account has been blocked'


def test_login_inactive_admin(app, client):
    with app.app_context():
        admin = Admin.query.filter_by(email='john@sunrise.com').first()
        admin.status = 'inactive'
        db.session.commit()

    response = client.post('/api/auth/login', json={"email": "john@sunrise.com", "password": "admin123"})
    assert response.status_code == 401


def test_me_requires_token(client):
    response = client.get('/api/auth/me')
    assert response.status_code == 401
    assert response.get_json()['success'] is False


def test_me_rejects_garbage_token(client):
    response = client.get('/api/auth/me', headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401


def test_me_for_admin_and_user(client, admin_headers, user_headers):
    admin = client.get('/api/auth/me', headers=admin_headers).get_json()['data']
    assert admin['user_type'] == 'admin'
    assert admin['user']['is_super_admin'] is True

    user = client.get('/api/auth/me', headers=user_headers).get_json()['data']
    assert user['user_type'] == 'user'
    assert user['user']['email'] == 'tenant@example.com'


def test_deactivated_account_token_is_refused(app, client, user_headers):
    with app.app_context():
        user = User.query.filter_by(email='tenant@example.com').first()
        user.status = 'inactive'
        db.session.commit()

    response = client.get('/api/auth/me', headers=user_headers)
    assert response.status_code == 401
    assert response.get_json()['message'] == 'Account has been deactivated'


def test_update_profile(client, user_headers):
    response = client.put('/api/auth/profile', headers=user_headers,
                          json={"name": "John T.", "phone": "9000000001", "address": "1 New Road"})
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['name'] == 'John T.'
    assert data['phone'] == '9000000001'
    assert data['address'] == '1 New Road'


def test_update_profile_phone_taken(client, user_headers):
    response = client.put('/api/auth/profile', headers=user_headers, json={"phone": "9876543211"})
    assert response.status_code == 400


def test_change_password(client, user_headers):
    response = client.put('/api/auth/change-password', headers=user_headers,
                          json={"current_password": "wrong", "new_password": "secret99"})
    assert response.status_code == 401

    response = client.put('/api/auth/change-password', headers=user_headers,
                          json={"current_password": "password123", "new_password": "secret99"})
    assert response.status_code == 200

    login = client.post('/api/auth/login', json={"email": "tenant@example.com", "password": "secret99"})
    assert login.status_code == 200


def test_forgot_and_reset_password(client, sent_emails):
    response = client.post('/api/auth/forgot-password', json={"email": "landlord@example.com"})
    assert response.status_code == 200
    assert len(sent_emails) == 1
    assert sent_emails[0]['template'] == 'password_reset'
    token = sent_emails[0]['variables']['reset_token']

    response = client.post('/api/auth/reset-password',
                           json={"email": "landlord@example.com", "token": "wrong", "password": "newpass1"})
    assert response.status_code == 400

    response = client.post('/api/auth/reset-password',
                           json={"email": "landlord@example.com", "token": token, "password": "newpass1"})
    assert response.status_code == 200

    # Token is single use
    response = client.post('/api/auth/reset-password',
                           json={"email": "landlord@example.com", "token": token, "password": "newpass2"})
    assert response.status_code == 400

    login = client.post('/api/auth/login', json={"email": "landlord@example.com", "password": "newpass1"})
    assert login.status_code == 200


def test_reset_password_expired_token(app, client, sent_emails):
    client.post('/api/auth/forgot-password', json={"email": "admin@example.com"})
    token = sent_emails[0]['variables']['reset_token']

    with app.app_context():
        admin = Admin.query.filter_by(email='admin@example.com').first()
        admin.reset_password_expire = datetime.utcnow() - timedelta(minutes=1)
        db.session.commit()

    response = client.post('/api/auth/reset-password',
                           json={"email": "admin@example.com", "token": token, "password": "newpass1"})
    assert response.status_code == 400


def test_forgot_password_unknown_email(client, sent_emails):
    response = client.post('/api/auth/forgot-password', json={"email": "nobody@example.com"})
    assert response.status_code == 404
    assert sent_emails == []


def test_forgot_password_email_failure_clears_token(app, client, monkeypatch):
    def failing_send(*args, **kwargs):
        raise ValueError("AWS credentials not configured")

    monkeypatch.setattr('realty_admin.api.auth.send_template_email', failing_send)

    response = client.post('/api/auth/forgot-password', json={"email": "tenant@example.com"})
    assert response.status_code == 500
    assert response.get_json()['message'] == 'Email could not be sent'

    with app.app_context():
        user = User.query.filter_by(email='tenant@example.com').first()
        assert user.reset_password_token is None
        assert user.reset_password_expire is None
