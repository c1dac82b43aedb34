import pytest
from sqlalchemy import event

from realty_admin import create_app
from realty_admin.config import TestingConfig
from realty_admin.extensions import db
from realty_admin.seeders import seed_database


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


def _enforce_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FOREIGN KEY clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


@pytest.fixture
def app(tmp_path):
    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path / 'uploads')

    app = create_app(Config)

    with app.app_context():
        event.listen(db.engine, 'connect', _enforce_foreign_keys)
        db.create_all()
        seed_database()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outbound email instead of calling SES."""
    sent = []

    def fake_send(template_name, recipient_email, variables):
        sent.append({"template": template_name, "to": recipient_email, "variables": variables})
        return {"success": True, "message_id": "test-message-id"}

    monkeypatch.setattr('realty_admin.api.auth.send_template_email', fake_send)
    monkeypatch.setattr('realty_admin.tasks.notification_tasks.send_template_email', fake_send)
    return sent


def _login(client, email, password):
    response = client.post('/api/auth/login', json={"email": email, "password": password})
    assert response.status_code == 200, response.get_json()
    return response.get_json()['data']['access_token']


@pytest.fixture
def admin_token(client):
    """Super admin."""
    return _login(client, 'admin@example.com', 'admin123')


@pytest.fixture
def limited_admin_token(client):
    """Property Manager: properties and dashboard permissions only."""
    return _login(client, 'jane@sunrise.com', 'admin123')


@pytest.fixture
def user_token(client):
    return _login(client, 'tenant@example.com', 'password123')


@pytest.fixture
def admin_headers(admin_token):
    return auth_header(admin_token)


@pytest.fixture
def limited_admin_headers(limited_admin_token):
    return auth_header(limited_admin_token)


@pytest.fixture
def user_headers(user_token):
    return auth_header(user_token)


@pytest.fixture
def lookup(app):
    """Fetch a column value from the seeded data: lookup(Model, 'id_attr', email=...)."""
    def _lookup(model, attribute, **filters):
        with app.app_context():
            instance = model.query.filter_by(**filters).first()
            return getattr(instance, attribute) if instance else None
    return _lookup
