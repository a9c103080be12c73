"""SQLite access for the transaction store."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from config import Config, get_migrations_dir

# Seconds a connection waits on a lock held by another writer, e.g. a CLI
# write landing while `dashboard watch` is polling.
BUSY_TIMEOUT = 5.0


class DatabaseManager:
    """Opens connections to the transaction database named by the config.

    Every connection is short-lived and private to the calling thread; rows
    come back as sqlite3.Row so services can read columns by name.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config, timeout: float = BUSY_TIMEOUT):
        self.config = config
        self.timeout = timeout

    @contextmanager
    def connect(self):
        """Yield a new connection, creating the data directory if needed."""
        db_path = self.get_db_path()
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self) -> Path:
        return self.config.db_path

    def get_migrations_dir(self) -> Path:
        return get_migrations_dir()
