import pytest

from nested_backend import create_app, db
from nested_backend.models import User, Property, PropertyLike


# ---------- APP FIXTURES ----------

@pytest.fixture
def app():
    """A fresh app backed by its own in-memory SQLite database."""
    app = create_app('testing')
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


# ---------- TEST DATA HELPERS ----------

@pytest.fixture
def make_user(app):
    def _make_user(username='alice', email=None, password='secret', name=None):
        user = User(username=username, email=email, name=name)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def make_property(app):
    def _make_property(title='Test Home', **fields):
        property = Property(title=title, **fields)
        db.session.add(property)
        db.session.commit()
        return property
    return _make_property


def like_rows(property_id=None, user_id=None):
    query = PropertyLike.query
    if property_id is not None:
        query = query.filter_by(property_id=property_id)
    if user_id is not None:
        query = query.filter_by(user_id=user_id)
    return query.all()
