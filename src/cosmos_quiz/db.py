"""Database initialization and connection management."""
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from cosmos_quiz.config import DEFAULT_DB_PATH

log = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS quizzes (
    id INTEGER PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT DEFAULT '',
    is_public INTEGER DEFAULT 0,
    created_by TEXT,
    categories TEXT DEFAULT '[]',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS cards (
    id INTEGER PRIMARY KEY,
    quiz_id INTEGER NOT NULL REFERENCES quizzes(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    term TEXT NOT NULL,
    definition TEXT NOT NULL,
    hint TEXT,
    image BLOB,
    term_formatting BLOB,
    definition_formatting BLOB
);

CREATE TABLE IF NOT EXISTS attempts (
    id INTEGER PRIMARY KEY,
    user_id TEXT NOT NULL,
    quiz_id INTEGER NOT NULL,
    mode TEXT NOT NULL,
    started_at TEXT NOT NULL,
    last_updated TEXT NOT NULL,
    is_completed INTEGER DEFAULT 0,
    current_index INTEGER DEFAULT 0,
    correct_count INTEGER DEFAULT 0,
    incorrect_count INTEGER DEFAULT 0,
    user_answers TEXT DEFAULT '{}',
    correct_cards TEXT DEFAULT '[]',
    UNIQUE(user_id, quiz_id, mode)
);

CREATE TABLE IF NOT EXISTS favorites (
    id INTEGER PRIMARY KEY,
    user_id TEXT NOT NULL,
    card_id INTEGER NOT NULL,
    quiz_id INTEGER NOT NULL,
    added_at TEXT NOT NULL,
    UNIQUE(user_id, card_id)
);

CREATE TABLE IF NOT EXISTS user_progress (
    user_id TEXT PRIMARY KEY,
    streak_days INTEGER DEFAULT 0,
    last_completed_date TEXT,
    total_completions INTEGER DEFAULT 0,
    weekly_completions TEXT DEFAULT '[]'
);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""


class PersistenceError(Exception):
    """A save, update or delete against the local store failed."""


class QuizNotFoundError(LookupError):
    pass


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_db(db_path: str = DEFAULT_DB_PATH):
    """Yield a connection that commits on success.

    Any ``sqlite3.Error`` rolls the transaction back and is re-raised as
    ``PersistenceError``.
    """
    conn = get_connection(db_path)
    try:
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        log.error("Database write failed on %s: %s", db_path, e)
        raise PersistenceError(str(e)) from e
    finally:
        conn.close()


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()
