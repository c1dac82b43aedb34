import re

from werkzeug.datastructures import MultiDict

from realty_admin.extensions import db
from realty_admin.filters import FilterBuilder
from realty_admin.models.user import User
from realty_admin.pagination import get_page_params, get_sort, pagination_info
from realty_admin.utils import generate_property_code, generate_payment_id, make_slug, parse_bool


def test_pagination_info():
    assert pagination_info(1, 20, 0) == {"page": 1, "pages": 0, "total": 0, "limit": 20}
    assert pagination_info(2, 10, 21) == {"page": 2, "pages": 3, "total": 21, "limit": 10}


def test_page_params_are_clamped(app):
    with app.app_context():
        assert get_page_params(MultiDict()) == (1, 20)
        assert get_page_params(MultiDict({"page": "0", "limit": "500"})) == (1, 100)
        assert get_page_params(MultiDict({"page": "abc", "limit": "-1"})) == (1, 1)
        assert get_page_params(MultiDict({"limit": "0"})) == (1, 1)
        assert get_page_params(MultiDict({"limit": "ten"})) == (1, 20)
        assert get_page_params(MultiDict({"page": "3", "limit": "5"})) == (3, 5)


def test_zero_limit_is_clamped_on_list_endpoints(client, admin_headers):
    body = client.get('/api/admin/users?limit=0', headers=admin_headers).get_json()
    assert body['pagination'] == {"page": 1, "pages": 5, "total": 5, "limit": 1}
    assert len(body['data']) == 1


def test_unknown_sort_field_falls_back(app):
    with app.app_context():
        clause = get_sort(User, {'name'}, MultiDict({"sort_by": "password_hash", "sort_order": "sideways"}))
        assert str(clause) == str(User.created_at.desc())

        clause = get_sort(User, {'name'}, MultiDict({"sort_by": "name", "sort_order": "asc"}))
        assert str(clause) == str(User.name.asc())


def test_empty_filters_add_nothing():
    builder = (
        FilterBuilder()
        .search('  ', User.name)
        .equals(User.status, None)
        .equals(User.status, 'unknown', allowed=('active', 'inactive'))
        .flag(User.is_blocked, 'maybe')
        .number_range(User.name, '', None)
        .date_range(User.created_at, 'not-a-date', None)
    )
    assert builder.predicates == []


def test_filters_against_seeded_users(app):
    with app.app_context():
        query = (
            FilterBuilder()
            .search('example', User.name, User.email)
            .one_of(User.user_type, ['tenant', 'both'])
            .flag(User.is_blocked, 'false')
            .apply(User.query)
        )
        assert {u.email for u in query} == {'tenant@example.com', 'both@example.com', 'lisa@example.com'}

        query = FilterBuilder().date_range(User.created_at, None, '2000-01-01').apply(User.query)
        assert query.count() == 0


def test_generated_identifiers():
    assert re.fullmatch(r'PROP\d{6}[A-Z0-9]{3}', generate_property_code())
    assert re.fullmatch(r'PAY_\d{13}_[A-Z0-9]{6}', generate_payment_id())


def test_slug_and_bool_helpers():
    assert make_slug('Land/Plot') == 'land-plot'
    assert make_slug('Children Play Area') == 'children-play-area'
    assert parse_bool('TRUE') is True
    assert parse_bool('0') is False
    assert parse_bool('') is None


def test_search_wildcards_match_literally(app):
    with app.app_context():
        assert FilterBuilder().search('%', User.name).apply(User.query).count() == 0
        assert FilterBuilder().search('_', User.email).apply(User.query).count() == 0

        lisa = User.query.filter_by(email='lisa@example.com').first()
        lisa.name = 'Lisa 50%_Off'
        db.session.commit()

        matches = FilterBuilder().search('50%_', User.name).apply(User.query).all()
        assert [u.email for u in matches] == ['lisa@example.com']
        assert FilterBuilder().contains(User.name, '0%_o').apply(User.query).count() == 1
