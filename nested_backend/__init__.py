import os
import logging
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_talisman import Talisman
from sqlalchemy import event
from sqlalchemy.engine import Engine
from werkzeug.middleware.proxy_fix import ProxyFix

from nested_backend.config import get_config

db = SQLAlchemy()
migrate = Migrate()
limiter = Limiter(key_func=get_remote_address)


@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    if type(dbapi_connection).__module__.startswith('sqlite3'):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


def create_app(config_name=None, config_overrides=None):
    app = Flask(__name__)

    # Trust reverse proxy headers
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    # Configuration
    app.config.from_object(get_config(config_name))
    if config_overrides:
        app.config.update(config_overrides)

    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # CORS configuration
    CORS(app, resources={
        r"/api/*": {
            "origins": app.config['FRONTEND_URL'].split(','),
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type"]
        }
    })

    # Security headers (only in production)
    if app.config.get('FORCE_HTTPS') or os.getenv('FLASK_ENV') == 'production':
        Talisman(app, force_https=True, content_security_policy=None)

    # Register blueprints
    from nested_backend.api.auth import auth_bp
    from nested_backend.api.properties import properties_bp
    from nested_backend.api.contact import contact_bp

    app.register_blueprint(auth_bp, url_prefix='/api')
    app.register_blueprint(properties_bp, url_prefix='/api/properties')
    app.register_blueprint(contact_bp, url_prefix='/api/contact')

    # Error handlers
    from nested_backend.errors import register_error_handlers
    register_error_handlers(app, db)

    # CLI commands
    from nested_backend.cli import register_commands
    register_commands(app)

    # Health check endpoint
    @app.route('/health')
    @limiter.exempt
    def health_check():
        return {'status': 'healthy', 'service': 'nested-api'}, 200

    # Schema provisioning: once at startup, lazily on the first request otherwise
    from nested_backend.services.schema_guard import SchemaGuard
    guard = SchemaGuard(db.metadata)
    app.extensions['schema_guard'] = guard

    @app.before_request
    def provision_schema():
        guard.ensure(db.engine)

    if app.config['SCHEMA_PROVISION_ON_STARTUP']:
        with app.app_context():
            guard.ensure(db.engine)

    return app
