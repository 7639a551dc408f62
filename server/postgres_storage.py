"""PostgreSQL storage implementation."""

import logging
import os

import psycopg2
from psycopg2.extras import Json, RealDictCursor

from core.errors import PersistenceError
from core.interfaces import Storage
from server.file_storage import DEFAULT_CONFIG_FILE, load_config_file, check_shape

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS vocab_store (
        key VARCHAR(255) PRIMARY KEY,
        value JSONB NOT NULL,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""


class PostgresStorage(Storage):
    """Keeps each storage key as one JSONB row in the vocab_store table."""

    def __init__(self, config_file: str = None, db_url: str = None):
        self.config_file = config_file or os.path.expanduser(DEFAULT_CONFIG_FILE)
        self.db_url = db_url or os.environ.get('DATABASE_URL', 'postgresql://localhost:5432/vocabtrack')
        self._conn = None

    @property
    def conn(self):
        """Open the connection and create the table on first use."""
        if self._conn is None or self._conn.closed:
            self._conn = psycopg2.connect(self.db_url)
            with self._conn, self._conn.cursor() as cur:
                cur.execute(SCHEMA)
            logger.info("Connected to PostgreSQL storage")
        return self._conn

    def close(self):
        if self._conn and not self._conn.closed:
            self._conn.close()

    def load_config(self) -> dict:
        return load_config_file(self.config_file)

    def _fetch(self, key: str, default):
        try:
            with self.conn as conn, conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("SELECT value FROM vocab_store WHERE key = %s", (key,))
                row = cur.fetchone()
        except psycopg2.Error as e:
            logger.error(f"Error loading {key}: {e}")
            raise PersistenceError(f"Could not load {key}: {e}") from e
        return row['value'] if row else default

    def _store(self, key: str, value) -> None:
        # psycopg2 serializes Json lazily, so TypeError surfaces inside execute
        try:
            with self.conn as conn, conn.cursor() as cur:
                cur.execute(
                    "INSERT INTO vocab_store (key, value) VALUES (%s, %s) "
                    "ON CONFLICT (key) DO UPDATE "
                    "SET value = EXCLUDED.value, updated_at = CURRENT_TIMESTAMP",
                    (key, Json(value))
                )
        except (psycopg2.Error, TypeError, ValueError) as e:
            logger.error(f"Error saving {key}: {e}")
            raise PersistenceError(f"Could not save {key}: {e}") from e

    def load_collection(self, key: str) -> list[dict]:
        return check_shape(key, self._fetch(key, []), list)

    def save_collection(self, key: str, items: list[dict]) -> None:
        self._store(key, items)

    def load_map(self, key: str) -> dict:
        return check_shape(key, self._fetch(key, {}), dict)

    def save_map(self, key: str, mapping: dict) -> None:
        self._store(key, mapping)

    def delete(self, key: str) -> bool:
        """Remove the row backing a key."""
        try:
            with self.conn as conn, conn.cursor() as cur:
                cur.execute("DELETE FROM vocab_store WHERE key = %s", (key,))
                return cur.rowcount > 0
        except psycopg2.Error as e:
            raise PersistenceError(f"Could not delete {key}: {e}") from e
