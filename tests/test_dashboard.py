from realty_admin.models.property import Property

DASHBOARD_URL = '/api/admin/dashboard'


def test_overview(client, admin_headers):
    data = client.get(f'{DASHBOARD_URL}/overview', headers=admin_headers).get_json()['data']
    assert data == {
        "total_properties": 5,
        "active_listings": 5,
        "active_leases": 0,
        "tenant_count": 3,
        "landlord_count": 3,
        "revenue": 6998.0,
        "admin_count": 3,
    }


def test_single_metrics(client, limited_admin_headers):
    response = client.get(f'{DASHBOARD_URL}/metrics/landlord-count', headers=limited_admin_headers)
    assert response.status_code == 200
    assert response.get_json()['data'] == {"value": 3}

    revenue = client.get(f'{DASHBOARD_URL}/metrics/revenue', headers=limited_admin_headers).get_json()
    assert revenue['data']['value'] == 6998


def test_dashboard_is_admin_only(client, user_headers):
    assert client.get(f'{DASHBOARD_URL}/overview').status_code == 401
    assert client.get(f'{DASHBOARD_URL}/overview', headers=user_headers).status_code == 403


def test_active_leases_count_rented_listings(client, admin_headers, limited_admin_headers, lookup):
    property_id = lookup(Property, 'property_id', title='Cozy 1BHK Apartment in Koramangala')
    client.patch(f'/api/properties/{property_id}/status', headers=limited_admin_headers, json={"status": "rented"})

    response = client.get(f'{DASHBOARD_URL}/metrics/active-leases', headers=admin_headers)
    assert response.get_json()['data']['value'] == 1

    lease = client.get(f'{DASHBOARD_URL}/charts/lease-status', headers=admin_headers).get_json()['data']
    assert lease == [{"status": "leased", "count": 1}, {"status": "available", "count": 3}]


def test_property_status_chart(client, admin_headers):
    data = client.get(f'{DASHBOARD_URL}/charts/property-status', headers=admin_headers).get_json()['data']
    counts = {row['status']: row['count'] for row in data}
    assert counts == {"draft": 0, "published": 5, "inactive": 0, "sold": 0, "rented": 0}


def test_trend_charts_cover_six_months(client, admin_headers):
    revenue = client.get(f'{DASHBOARD_URL}/charts/revenue-trend', headers=admin_headers).get_json()['data']
    assert len(revenue) == 6
    assert sum(point['value'] for point in revenue) == 6998

    growth = client.get(f'{DASHBOARD_URL}/charts/user-growth', headers=admin_headers).get_json()['data']
    assert len(growth) == 6
    assert growth[-1]['value'] == 5
    assert sum(point['value'] for point in growth) == 5


def test_recent_lists(client, admin_headers):
    properties = client.get(f'{DASHBOARD_URL}/recent/properties?limit=2', headers=admin_headers).get_json()['data']
    assert len(properties) == 2
    assert set(properties[0]) >= {"id", "title", "property_code", "main_image"}

    users = client.get(f'{DASHBOARD_URL}/recent/users', headers=admin_headers).get_json()['data']
    assert len(users) == 5


def test_recent_activities(client, admin_headers):
    data = client.get(f'{DASHBOARD_URL}/recent/activities?limit=3', headers=admin_headers).get_json()['data']
    assert len(data) == 3
    timestamps = [item['timestamp'] for item in data]
    assert timestamps == sorted(timestamps, reverse=True)
    assert {item['type'] for item in data} <= {"property", "user", "payment"}
