"""Attempt persistence: one resumable progress record per (user, quiz, mode)."""
import json
import logging
from typing import Optional

from cosmos_quiz.db import get_connection, get_db
from cosmos_quiz.models import Attempt, Mode, next_id

log = logging.getLogger(__name__)


def _row_to_attempt(row) -> Attempt:
    return Attempt(
        id=row["id"],
        user_id=row["user_id"],
        quiz_id=row["quiz_id"],
        mode=row["mode"],
        started_at=row["started_at"],
        last_updated=row["last_updated"],
        is_completed=bool(row["is_completed"]),
        current_index=row["current_index"],
        correct_count=row["correct_count"],
        incorrect_count=row["incorrect_count"],
        user_answers={int(k): v for k, v in json.loads(row["user_answers"] or "{}").items()},
        correct_cards=set(json.loads(row["correct_cards"] or "[]")),
    )


def get_attempt(db_path: str, quiz_id: int, mode: str, user_id: str) -> Optional[Attempt]:
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT * FROM attempts WHERE user_id = ? AND quiz_id = ? AND mode = ?",
        (user_id, quiz_id, Mode(mode).value),
    ).fetchone()
    conn.close()
    return _row_to_attempt(row) if row else None


def update_attempt(db_path: str, attempt: Attempt) -> None:
    """Upsert by (user_id, quiz_id, mode)."""
    with get_db(db_path) as conn:
        conn.execute(
            """INSERT INTO attempts (id, user_id, quiz_id, mode, started_at, last_updated,
                is_completed, current_index, correct_count, incorrect_count,
                user_answers, correct_cards)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, quiz_id, mode) DO UPDATE SET
                last_updated=excluded.last_updated,
                is_completed=excluded.is_completed,
                current_index=excluded.current_index,
                correct_count=excluded.correct_count,
                incorrect_count=excluded.incorrect_count,
                user_answers=excluded.user_answers,
                correct_cards=excluded.correct_cards""",
            (attempt.id, attempt.user_id, attempt.quiz_id, Mode(attempt.mode).value,
             attempt.started_at, attempt.last_updated, int(attempt.is_completed),
             attempt.current_index, attempt.correct_count, attempt.incorrect_count,
             json.dumps({str(k): v for k, v in attempt.user_answers.items()}),
             json.dumps(sorted(attempt.correct_cards))),
        )


def load_or_create_attempt(db_path: str, quiz_id: int, mode: str, user_id: str) -> Attempt:
    """Return the stored attempt, or create and store a zeroed one."""
    existing = get_attempt(db_path, quiz_id, mode, user_id)
    if existing is not None:
        return existing
    if not quiz_id:
        raise ValueError("cannot create an attempt for quiz id 0")
    attempt = Attempt(id=next_id(), user_id=user_id, quiz_id=quiz_id, mode=Mode(mode).value)
    update_attempt(db_path, attempt)
    log.info("Created %s attempt for quiz %s, user %s", attempt.mode, quiz_id, user_id)
    return attempt


def get_user_attempts(db_path: str, user_id: str) -> list[Attempt]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM attempts WHERE user_id = ? ORDER BY last_updated DESC", (user_id,)
    ).fetchall()
    conn.close()
    return [_row_to_attempt(r) for r in rows]
