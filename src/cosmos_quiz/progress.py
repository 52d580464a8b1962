"""User settings, daily streaks and weekly completion tracking."""
import json
import logging
from datetime import date
from typing import Optional

from cosmos_quiz.db import get_connection, get_db
from cosmos_quiz.models import UserProgress

log = logging.getLogger(__name__)


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    with get_db(db_path) as conn:
        conn.execute(
            "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
            (key, value, value),
        )


def update_user_progress(db_path: str, progress: UserProgress) -> None:
    with get_db(db_path) as conn:
        conn.execute(
            """INSERT INTO user_progress
            (user_id, streak_days, last_completed_date, total_completions, weekly_completions)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                streak_days=excluded.streak_days,
                last_completed_date=excluded.last_completed_date,
                total_completions=excluded.total_completions,
                weekly_completions=excluded.weekly_completions""",
            (progress.user_id, progress.streak_days, progress.last_completed_date,
             progress.total_completions, json.dumps(progress.weekly_completions)),
        )


def load_user_progress(db_path: str, user_id: str) -> UserProgress:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM user_progress WHERE user_id = ?", (user_id,)).fetchone()
    conn.close()
    if row is None:
        progress = UserProgress(user_id=user_id)
        update_user_progress(db_path, progress)
        return progress
    week = [bool(v) for v in json.loads(row["weekly_completions"] or "[]")]
    if len(week) != 7:
        week = [False] * 7
    return UserProgress(
        user_id=row["user_id"],
        streak_days=row["streak_days"],
        last_completed_date=row["last_completed_date"],
        total_completions=row["total_completions"],
        weekly_completions=week,
    )


def mark_session_complete(db_path: str, user_id: str, today: Optional[date] = None) -> UserProgress:
    progress = load_user_progress(db_path, user_id)
    progress.mark_completion(today)
    update_user_progress(db_path, progress)
    log.info("User %s streak is now %d day(s)", user_id, progress.streak_days)
    return progress


def reset_weekly(db_path: str, user_id: str) -> UserProgress:
    progress = load_user_progress(db_path, user_id)
    progress.reset_weekly()
    update_user_progress(db_path, progress)
    return progress


def reset_all_progress(db_path: str) -> None:
    """Full app data reset: attempts, favorites and streaks. Quizzes stay."""
    with get_db(db_path) as conn:
        conn.execute("DELETE FROM attempts")
        conn.execute("DELETE FROM favorites")
        conn.execute("DELETE FROM user_progress")
    log.warning("All progress data was reset")
