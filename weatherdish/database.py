import os
import sqlite3
from contextlib import contextmanager
import logging

logger = logging.getLogger(__name__)

# Determine database path
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if os.environ.get("VERCEL"):
    DATABASE = "/tmp/weatherdish.db"
else:
    DATABASE = os.path.join(BASE_DIR, "..", "weatherdish.db")

@contextmanager
def get_db(database=None):
    conn = sqlite3.connect(database or DATABASE)
    try:
        yield conn
    finally:
        conn.close()

def init_db(database=None):
    """Create the key-value and accounts tables if they do not already exist."""
    with get_db(database) as conn:
        # Device-local store: saved recipes and the current session user
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                namespace TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (namespace, key)
            )
            """
        )

        # Accounts table used when no remote account table is configured
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS accounts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
            """
        )

        conn.commit()
    logger.info(f"Database ready at {database or DATABASE}")
