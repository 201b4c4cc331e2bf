import click
from flask import current_app
from nested_backend import db
from nested_backend.models.property import Property

DEMO_PROPERTIES = [
    {
        'title': '3-Bedroom Apartment in Port Harcourt',
        'description': 'Spacious apartment located in the heart of Port Harcourt with modern amenities.',
        'price': 25000000,
        'address': 'Port Harcourt, Rivers State, Nigeria',
        'image': '/img/listing1.jpg',
    },
    {
        'title': 'Luxury Villa in Lagos',
        'description': 'A luxurious villa with sea view situated in Banana Island.',
        'price': 120000000,
        'address': 'Banana Island, Lagos, Nigeria',
        'image': '/img/listing2.jpg',
    },
]


def register_commands(app):
    @app.cli.command('init-db')
    def init_db():
        """Create any missing tables."""
        current_app.extensions['schema_guard'].ensure(db.engine)
        click.echo('Database schema is up to date.')

    @app.cli.command('seed-properties')
    def seed_properties():
        """Insert the demo listings when the properties table is empty."""
        current_app.extensions['schema_guard'].ensure(db.engine)
        if Property.query.first() is not None:
            click.echo('Properties already present, skipping seed.')
            return

        for data in DEMO_PROPERTIES:
            db.session.add(Property(**data))
        db.session.commit()
        click.echo(f'Seeded {len(DEMO_PROPERTIES)} properties.')
