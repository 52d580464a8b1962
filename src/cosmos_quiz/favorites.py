"""Favorite cards per user."""
import logging

from cosmos_quiz.db import get_connection, get_db
from cosmos_quiz.models import Favorite, next_id

log = logging.getLogger(__name__)


def is_favorite(db_path: str, card_id: int, user_id: str) -> bool:
    conn = get_connection(db_path)
    count = conn.execute(
        "SELECT COUNT(*) FROM favorites WHERE user_id = ? AND card_id = ?", (user_id, card_id)
    ).fetchone()[0]
    conn.close()
    return count > 0


def add_favorite(db_path: str, card_id: int, quiz_id: int, user_id: str) -> Favorite:
    favorite = Favorite(id=next_id(), user_id=user_id, card_id=card_id, quiz_id=quiz_id)
    with get_db(db_path) as conn:
        conn.execute(
            """INSERT OR IGNORE INTO favorites (id, user_id, card_id, quiz_id, added_at)
            VALUES (?, ?, ?, ?, ?)""",
            (favorite.id, user_id, card_id, quiz_id, favorite.added_at),
        )
    log.info("User %s favorited card %s", user_id, card_id)
    return favorite


def remove_favorite(db_path: str, card_id: int, user_id: str) -> None:
    with get_db(db_path) as conn:
        conn.execute("DELETE FROM favorites WHERE user_id = ? AND card_id = ?", (user_id, card_id))


def get_favorites(db_path: str, user_id: str) -> list[dict]:
    """Favorites joined with their card text, newest first."""
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT f.id, f.card_id, f.quiz_id, f.added_at, c.term, c.definition, q.title AS quiz_title
        FROM favorites f
        JOIN cards c ON f.card_id = c.id
        JOIN quizzes q ON f.quiz_id = q.id
        WHERE f.user_id = ?
        ORDER BY f.added_at DESC, f.id DESC""",
        (user_id,),
    ).fetchall()
    conn.close()
    return [dict(r) for r in rows]
