from realty_admin.models.admin import Admin
from realty_admin.models.permission import Permission
from realty_admin.models.role import Role


def test_list_admins(client, admin_headers):
    response = client.get('/api/admin/admins?search=sunrise', headers=admin_headers)
    assert response.status_code == 200
    body = response.get_json()
    emails = {admin['email'] for admin in body['data']}
    assert emails == {'john@sunrise.com', 'jane@sunrise.com'}
    assert body['pagination'] == {"page": 1, "pages": 1, "total": 2, "limit": 20}


def test_create_admin_with_roles_and_permissions(client, admin_headers, lookup):
    role_id = lookup(Role, 'role_id', slug='staff')
    permission_id = lookup(Permission, 'permission_id', module='payments', action='read')

    response = client.post('/api/admin/admins', headers=admin_headers, json={
        "name": "New Admin",
        "email": "New.Admin@Sunrise.com",
        "password": "secret1",
        "role_ids": [role_id],
        "permission_ids": [permission_id],
    })
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['email'] == 'new.admin@sunrise.com'
    assert [r['id'] for r in data['roles']] == [role_id]
    assert [p['id'] for p in data['permissions']] == [permission_id]

    login = client.post('/api/auth/login', json={"email": "new.admin@sunrise.com", "password": "secret1"})
    assert login.status_code == 200


def test_create_admin_duplicate_email(client, admin_headers):
    response = client.post('/api/admin/admins', headers=admin_headers,
                           json={"name": "Dup", "email": "john@sunrise.com", "password": "secret1"})
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Admin with this email already exists'


def test_create_admin_unknown_role(client, admin_headers):
    response = client.post('/api/admin/admins', headers=admin_headers, json={
        "name": "Bad Role", "email": "badrole@sunrise.com", "password": "secret1", "role_ids": ["missing"],
    })
    assert response.status_code == 400
    assert response.get_json()['errors'][0]['field'] == 'role_ids'


def test_update_admin(client, admin_headers, lookup):
    admin_id = lookup(Admin, 'admin_id', email='jane@sunrise.com')
    response = client.put(f'/api/admin/admins/{admin_id}', headers=admin_headers,
                          json={"name": "Jane M.", "status": "inactive"})
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['name'] == 'Jane M.'
    assert data['status'] == 'inactive'


def test_cannot_delete_super_admin(client, admin_headers, lookup):
    admin_id = lookup(Admin, 'admin_id', email='admin@example.com')
    response = client.delete(f'/api/admin/admins/{admin_id}', headers=admin_headers)
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Cannot delete super admin'


def test_delete_admin(client, admin_headers, lookup):
    admin_id = lookup(Admin, 'admin_id', email='john@sunrise.com')
    assert client.delete(f'/api/admin/admins/{admin_id}', headers=admin_headers).status_code == 200
    assert client.get(f'/api/admin/admins/{admin_id}', headers=admin_headers).status_code == 404


def test_roles(client, admin_headers, lookup):
    response = client.get('/api/admin/roles', headers=admin_headers)
    assert response.status_code == 200
    assert len(response.get_json()['data']) == 5

    permission_id = lookup(Permission, 'permission_id', module='staff', action='read')
    response = client.post('/api/admin/roles', headers=admin_headers,
                           json={"name": "Field Agent", "permission_ids": f"{permission_id}"})
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['slug'] == 'field-agent'
    assert len(data['permissions']) == 1

    duplicate = client.post('/api/admin/roles', headers=admin_headers, json={"name": "field agent"})
    assert duplicate.status_code == 400


def test_permissions_grouped(client, admin_headers):
    response = client.get('/api/admin/permissions', headers=admin_headers)
    assert response.status_code == 200
    data = response.get_json()['data']
    assert len(data['permissions']) == 25
    assert len(data['grouped']['users']) == 5
    assert len(data['grouped']['dashboard']) == 1


def test_create_permission(client, admin_headers):
    response = client.post('/api/admin/permissions', headers=admin_headers,
                           json={"name": "Create Blog Posts", "module": "blog", "action": "create"})
    assert response.status_code == 201

    duplicate = client.post('/api/admin/permissions', headers=admin_headers,
                            json={"name": "Another Name", "module": "blog", "action": "create"})
    assert duplicate.status_code == 400

    invalid = client.post('/api/admin/permissions', headers=admin_headers,
                          json={"name": "Bad", "module": "nope", "action": "create"})
    assert invalid.status_code == 400
