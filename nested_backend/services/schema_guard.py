"""
Idempotent schema provisioning.

Every table the API touches is created with ``CREATE TABLE IF NOT EXISTS``
so concurrent workers (or several processes sharing one database) can run
the guard at the same time without tripping over each other. Existing
tables are never dropped or altered.
"""
import logging
import threading

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateTable

from nested_backend.errors import StoreError

logger = logging.getLogger(__name__)


class SchemaGuard:
    """Runs schema provisioning once per process and remembers success."""

    def __init__(self, metadata):
        self.metadata = metadata
        self._lock = threading.Lock()
        self._initialized = False

    @property
    def initialized(self):
        return self._initialized

    def ensure(self, engine):
        """Create any missing tables. Cheap no-op after the first success."""
        if self._initialized:
            return
        with self._lock:
            if self._initialized:
                return
            self._provision(engine)
            self._initialized = True

    def _provision(self, engine):
        # Import models so every table is registered on the metadata
        import nested_backend.models  # noqa: F401

        tables = self.metadata.sorted_tables
        try:
            with engine.begin() as conn:
                for table in tables:
                    conn.execute(CreateTable(table, if_not_exists=True))
        except SQLAlchemyError as e:
            logger.error(f'Schema provisioning failed: {e}')
            raise StoreError('Database schema is unavailable') from e

        logger.info('Schema ensured for tables: %s', ', '.join(t.name for t in tables))
