"""Tests for database initialization and connection management."""
import sqlite3

import pytest

from cosmos_quiz.db import PersistenceError, get_connection, get_db, init_db


def test_init_db_creates_tables(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    )
    tables = {row[0] for row in cursor.fetchall()}
    expected = {"quizzes", "cards", "attempts", "favorites", "user_progress", "user_settings"}
    assert expected.issubset(tables)
    conn.close()


def test_init_db_is_idempotent(tmp_db):
    init_db(tmp_db)
    init_db(tmp_db)  # should not raise
    conn = get_connection(tmp_db)
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    assert len(cursor.fetchall()) > 0
    conn.close()


def test_init_db_creates_parent_directory(tmp_path):
    db_path = str(tmp_path / "nested" / "dir" / "quiz.db")
    init_db(db_path)
    assert (tmp_path / "nested" / "dir" / "quiz.db").exists()


def test_get_connection_returns_row_factory(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    conn.execute("INSERT INTO user_settings (key, value) VALUES ('test', 'val')")
    row = conn.execute("SELECT key, value FROM user_settings WHERE key='test'").fetchone()
    assert row["key"] == "test"
    conn.close()


def test_get_connection_enables_foreign_keys(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
    conn.close()


def test_get_db_commits_on_success(tmp_db):
    init_db(tmp_db)
    with get_db(tmp_db) as conn:
        conn.execute("INSERT INTO user_settings (key, value) VALUES ('a', '1')")
    conn = get_connection(tmp_db)
    assert conn.execute("SELECT value FROM user_settings WHERE key='a'").fetchone()["value"] == "1"
    conn.close()


def test_get_db_rolls_back_and_wraps_errors(tmp_db):
    init_db(tmp_db)
    with pytest.raises(PersistenceError) as excinfo:
        with get_db(tmp_db) as conn:
            conn.execute("INSERT INTO user_settings (key, value) VALUES ('b', '1')")
            conn.execute("INSERT INTO no_such_table VALUES (1)")
    assert isinstance(excinfo.value.__cause__, sqlite3.Error)
    conn = get_connection(tmp_db)
    assert conn.execute("SELECT COUNT(*) FROM user_settings WHERE key='b'").fetchone()[0] == 0
    conn.close()
