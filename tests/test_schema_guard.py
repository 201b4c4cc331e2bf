import threading

import pytest
from sqlalchemy import create_engine, inspect

from nested_backend import create_app, db
from nested_backend.errors import StoreError
from nested_backend.models import Property
from nested_backend.services.schema_guard import SchemaGuard

EXPECTED_TABLES = {'users', 'properties', 'property_likes', 'contacts'}


def test_startup_creates_all_tables(app):
    assert app.extensions['schema_guard'].initialized
    assert EXPECTED_TABLES <= set(inspect(db.engine).get_table_names())


def test_property_likes_constraints(app):
    inspector = inspect(db.engine)

    uniques = inspector.get_unique_constraints('property_likes')
    assert any(sorted(u['column_names']) == ['property_id', 'user_id'] for u in uniques)

    fks = {fk['referred_table']: fk for fk in inspector.get_foreign_keys('property_likes')}
    assert fks['properties']['options'].get('ondelete') == 'CASCADE'
    assert fks['users']['options'].get('ondelete') == 'CASCADE'

    liked = next(c for c in inspector.get_columns('property_likes') if c['name'] == 'liked')
    assert liked['nullable'] is False


def test_provisioning_is_idempotent_and_non_destructive(app, make_property):
    make_property(title='Keep me')

    # A fresh guard against an existing schema must neither fail nor drop data
    SchemaGuard(db.metadata).ensure(db.engine)

    assert [p.title for p in Property.query.all()] == ['Keep me']


def test_lazy_provisioning_on_first_request(tmp_path):
    app = create_app('testing', {
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'lazy.db'}",
        'SCHEMA_PROVISION_ON_STARTUP': False,
    })
    guard = app.extensions['schema_guard']
    assert not guard.initialized

    r = app.test_client().get('/api/properties')
    assert r.status_code == 200
    assert r.get_json() == []
    assert guard.initialized

    with app.app_context():
        db.engine.dispose()


def test_concurrent_ensure_runs_once(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'guard.db'}")
    guard = SchemaGuard(db.metadata)
    calls = []
    original = guard._provision

    def counting_provision(target):
        calls.append(target)
        original(target)

    guard._provision = counting_provision
    threads = [threading.Thread(target=guard.ensure, args=(engine,)) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert guard.initialized
    assert EXPECTED_TABLES <= set(inspect(engine).get_table_names())
    engine.dispose()


def test_failure_surfaces_as_store_error(tmp_path):
    missing_dir = tmp_path / 'does-not-exist' / 'db.sqlite'
    engine = create_engine(f"sqlite:///{missing_dir}")
    guard = SchemaGuard(db.metadata)

    with pytest.raises(StoreError):
        guard.ensure(engine)
    assert not guard.initialized


def test_failure_on_request_is_a_server_error(tmp_path):
    missing_dir = tmp_path / 'does-not-exist' / 'db.sqlite'
    app = create_app('testing', {
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{missing_dir}",
        'SCHEMA_PROVISION_ON_STARTUP': False,
    })

    r = app.test_client().get('/api/properties')
    assert r.status_code == 500
    assert r.get_json()['error'] == 'store_error'
    assert not app.extensions['schema_guard'].initialized


def test_startup_failure_is_fatal(tmp_path):
    missing_dir = tmp_path / 'does-not-exist' / 'db.sqlite'
    with pytest.raises(StoreError):
        create_app('testing', {'SQLALCHEMY_DATABASE_URI': f"sqlite:///{missing_dir}"})
