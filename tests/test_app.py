from nested_backend import create_app, db
from nested_backend.cli import DEMO_PROPERTIES
from nested_backend.config import get_config, TestingConfig, Config
from nested_backend.models import Property


def test_health_check(client):
    r = client.get('/health')
    assert r.status_code == 200
    assert r.get_json() == {'status': 'healthy', 'service': 'nested-api'}


def test_unknown_route_is_json_404(client):
    r = client.get('/api/nowhere')
    assert r.status_code == 404
    assert r.is_json
    assert r.get_json()['error'] == 'not_found'


def test_unhandled_store_error_is_generic_500(app, client, monkeypatch):
    from sqlalchemy.exc import OperationalError
    import nested_backend.api.properties as properties_module

    class BrokenQuery:
        def order_by(self, *args):
            raise OperationalError('SELECT 1', {}, Exception('connection reset by peer'))

    monkeypatch.setattr(properties_module.Property, 'query', BrokenQuery())
    r = client.get('/api/properties')
    assert r.status_code == 500
    body = r.get_json()
    assert body == {'message': 'Internal server error', 'error': 'store_error'}
    assert 'connection reset' not in r.get_data(as_text=True)


def test_get_config_by_name():
    assert get_config('testing') is TestingConfig
    assert get_config('no-such-config') is Config


def test_config_overrides_win():
    app = create_app('testing', {'LOG_LEVEL': 'ERROR', 'BCRYPT_ROUNDS': 5})
    assert app.config['BCRYPT_ROUNDS'] == 5
    assert app.config['TESTING'] is True


def test_init_db_command(app):
    result = app.test_cli_runner().invoke(args=['init-db'])
    assert result.exit_code == 0
    assert 'up to date' in result.output


def test_seed_properties_command_is_idempotent(app):
    runner = app.test_cli_runner()
    first = runner.invoke(args=['seed-properties'])
    second = runner.invoke(args=['seed-properties'])

    assert first.exit_code == 0
    assert 'Seeded 2 properties' in first.output
    assert 'skipping' in second.output
    assert Property.query.count() == len(DEMO_PROPERTIES)
