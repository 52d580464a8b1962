"""Quiz and card persistence plus the per-mode catalog."""
import json
import logging
from typing import Optional

from cosmos_quiz.db import get_connection, get_db
from cosmos_quiz.models import Card, Quiz, next_id

log = logging.getLogger(__name__)


def _row_to_card(row) -> Card:
    return Card(
        id=row["id"],
        term=row["term"],
        definition=row["definition"],
        hint=row["hint"],
        image=row["image"],
        term_formatting=row["term_formatting"],
        definition_formatting=row["definition_formatting"],
    )


def _row_to_quiz(row, cards: list[Card]) -> Quiz:
    return Quiz(
        id=row["id"],
        title=row["title"],
        description=row["description"] or "",
        is_public=bool(row["is_public"]),
        created_by=row["created_by"],
        categories=json.loads(row["categories"] or "[]"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        cards=cards,
    )


def _insert_cards(conn, quiz: Quiz) -> None:
    for position, card in enumerate(quiz.cards):
        conn.execute(
            """INSERT INTO cards (id, quiz_id, position, term, definition, hint, image,
                term_formatting, definition_formatting)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (card.id, quiz.id, position, card.term, card.definition, card.hint,
             card.image, card.term_formatting, card.definition_formatting),
        )


def save_quiz(db_path: str, quiz: Quiz) -> Quiz:
    """Insert a quiz and its cards. A quiz id of 0 gets a fresh time-seeded id."""
    if not quiz.id:
        quiz.id = next_id()
    with get_db(db_path) as conn:
        conn.execute(
            """INSERT OR IGNORE INTO quizzes
            (id, title, description, is_public, created_by, categories, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (quiz.id, quiz.title, quiz.description, int(quiz.is_public), quiz.created_by,
             json.dumps(quiz.categories), quiz.created_at, quiz.updated_at),
        )
        existing = conn.execute("SELECT COUNT(*) FROM cards WHERE quiz_id = ?", (quiz.id,)).fetchone()[0]
        if not existing:
            _insert_cards(conn, quiz)
    log.info("Saved quiz %s (%d cards)", quiz.id, len(quiz.cards))
    return quiz


def update_quiz(db_path: str, quiz: Quiz) -> None:
    """Rewrite the quiz row and replace its card list."""
    with get_db(db_path) as conn:
        conn.execute(
            """UPDATE quizzes SET title=?, description=?, is_public=?, created_by=?,
            categories=?, updated_at=? WHERE id=?""",
            (quiz.title, quiz.description, int(quiz.is_public), quiz.created_by,
             json.dumps(quiz.categories), quiz.updated_at, quiz.id),
        )
        conn.execute("DELETE FROM cards WHERE quiz_id = ?", (quiz.id,))
        _insert_cards(conn, quiz)
    log.info("Updated quiz %s", quiz.id)


def delete_quiz(db_path: str, quiz: Quiz, user_id: str) -> bool:
    """Delete a quiz with its cards, attempts and favorites.

    Only the creator may delete; built-in quizzes are never deleted.
    """
    if quiz.is_builtin or quiz.created_by != user_id:
        log.warning("User %s may not delete quiz %s", user_id, quiz.id)
        return False
    with get_db(db_path) as conn:
        conn.execute("DELETE FROM attempts WHERE quiz_id = ?", (quiz.id,))
        conn.execute("DELETE FROM favorites WHERE quiz_id = ?", (quiz.id,))
        conn.execute("DELETE FROM quizzes WHERE id = ?", (quiz.id,))
    log.info("Deleted quiz %s", quiz.id)
    return True


def get_quiz(db_path: str, quiz_id: int) -> Optional[Quiz]:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM quizzes WHERE id = ?", (quiz_id,)).fetchone()
    if row is None:
        conn.close()
        return None
    card_rows = conn.execute(
        "SELECT * FROM cards WHERE quiz_id = ? ORDER BY position", (quiz_id,)
    ).fetchall()
    conn.close()
    return _row_to_quiz(row, [_row_to_card(r) for r in card_rows])


def list_quizzes(db_path: str, mode: str, user_id: str, search: str = "") -> list[Quiz]:
    """Quizzes tagged with ``mode``: own first, then built-in, then other users' public ones."""
    conn = get_connection(db_path)
    rows = conn.execute("SELECT id, categories, created_by, is_public FROM quizzes ORDER BY created_at DESC, id DESC").fetchall()
    conn.close()
    own, builtin, others = [], [], []
    for row in rows:
        if mode not in json.loads(row["categories"] or "[]"):
            continue
        if row["created_by"] == user_id:
            own.append(row["id"])
        elif row["created_by"] is None:
            builtin.append(row["id"])
        elif row["is_public"]:
            others.append(row["id"])
    quizzes = [get_quiz(db_path, quiz_id) for quiz_id in own + builtin + others]
    if search:
        needle = search.lower()
        quizzes = [q for q in quizzes if needle in q.title.lower()]
    return quizzes


def add_card(
    quiz: Quiz,
    term: str,
    definition: str,
    hint: Optional[str] = None,
    image: Optional[bytes] = None,
    term_formatting: Optional[bytes] = None,
    definition_formatting: Optional[bytes] = None,
) -> Card:
    """Append a new card to an in-memory quiz. Persist with save_quiz/update_quiz."""
    card = Card(
        id=next_id(), term=term, definition=definition, hint=hint, image=image,
        term_formatting=term_formatting, definition_formatting=definition_formatting,
    )
    quiz.cards.append(card)
    return card


def remove_card(quiz: Quiz, card_id: int) -> None:
    quiz.cards = [c for c in quiz.cards if c.id != card_id]
