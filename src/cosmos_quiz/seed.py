"""Seed the database with the built-in astronomy quizzes for every mode."""
import json
import logging
from pathlib import Path
from typing import Optional

from cosmos_quiz.db import get_connection
from cosmos_quiz.models import Card, Quiz, next_id, reserve_ids
from cosmos_quiz.progress import get_setting, set_setting
from cosmos_quiz.quizzes import save_quiz

log = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"
SEEDED_KEY = "has_inserted_samples"


def load_sample_quizzes() -> list[dict]:
    data = json.loads((CONTENT_DIR / "sample_quizzes.json").read_text(encoding="utf-8"))
    return data["quizzes"]


def is_seeded(db_path: str) -> bool:
    """True once samples were inserted, or if any built-in quiz already exists."""
    if get_setting(db_path, SEEDED_KEY) == "1":
        return True
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM quizzes WHERE created_by IS NULL").fetchone()[0]
    conn.close()
    return count > 0


def seed_sample_quizzes(db_path: str, base_id: Optional[int] = None) -> list[Quiz]:
    """Insert every sample quiz. Ids are ``base_id`` plus the offsets in the content file."""
    if base_id is None:
        base_id = next_id()
    entries = load_sample_quizzes()
    saved = []
    for entry in entries:
        quiz = Quiz(
            id=base_id + entry["offset"],
            title=entry["title"],
            description=entry.get("description", ""),
            is_public=False,
            created_by=None,
            categories=list(entry["categories"]),
            cards=[
                Card(id=base_id + c["offset"], term=c["term"], definition=c["definition"], hint=c.get("hint"))
                for c in entry["cards"]
            ],
        )
        saved.append(save_quiz(db_path, quiz))
    top = max(max([e["offset"]] + [c["offset"] for c in e["cards"]]) for e in entries)
    reserve_ids(base_id + top)
    log.info("Inserted %d sample quizzes", len(saved))
    return saved


def seed_all(db_path: str) -> None:
    """Insert the samples once per database."""
    if is_seeded(db_path):
        return
    seed_sample_quizzes(db_path)
    set_setting(db_path, SEEDED_KEY, "1")
