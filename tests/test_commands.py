from realty_admin.models.property import Property
from realty_admin.models.user import User


def test_seed_command_resets_data(app, client, admin_headers, lookup):
    user_id = lookup(User, 'user_id', email='lisa@example.com')
    client.delete(f'/api/admin/users/{user_id}', headers=admin_headers)

    result = app.test_cli_runner().invoke(args=['seed'])
    assert result.exit_code == 0, result.output
    assert 'users: 5' in result.output
    assert 'properties: 5' in result.output

    with app.app_context():
        assert User.query.count() == 5
        assert Property.query.count() == 5
        assert User.query.filter_by(email='lisa@example.com').first() is not None
