import click

from realty_admin.extensions import db
from realty_admin.seeders import seed_database


def register_commands(app):

    @app.cli.command('seed')
    @click.option('--create-tables', is_flag=True, help='Create missing tables before seeding.')
    def seed(create_tables):
        """Replace all data with the sample data set."""
        if create_tables:
            db.create_all()
        summary = seed_database()

        click.echo('Database seeding completed:')
        for name, count in summary.items():
            click.echo(f'  {name}: {count}')
        click.echo('Admin login: admin@example.com / admin123')
        click.echo('User login: tenant@example.com / password123')
