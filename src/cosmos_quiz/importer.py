"""Import a deck of cards from a file into a new quiz."""
import csv
import json
import logging
from pathlib import Path
from typing import Optional

import yaml

from cosmos_quiz.models import Mode, Quiz
from cosmos_quiz.quizzes import add_card, save_quiz

log = logging.getLogger(__name__)

TERM_KEYS = ("term", "front", "question")
DEFINITION_KEYS = ("definition", "back", "answer")


def _pick(entry: dict, keys: tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = entry.get(key)
        if value not in (None, ""):
            return str(value).strip()
    return None


def _normalize(entries) -> list[dict]:
    cards = []
    for entry in entries:
        if isinstance(entry, (list, tuple)):
            entry = dict(zip(("term", "definition", "hint"), entry))
        if not isinstance(entry, dict):
            continue
        entry = {str(k).strip().lower(): v for k, v in entry.items()}
        term = _pick(entry, TERM_KEYS)
        definition = _pick(entry, DEFINITION_KEYS)
        if not term or not definition:
            log.debug("Skipping incomplete card %r", entry)
            continue
        hint = entry.get("hint")
        cards.append({"term": term, "definition": definition, "hint": str(hint).strip() if hint else None})
    return cards


def _read_rows(path: Path, delimiter: str) -> list:
    with path.open(newline="", encoding="utf-8") as f:
        rows = [r for r in csv.reader(f, delimiter=delimiter) if any(cell.strip() for cell in r)]
    if rows and [c.strip().lower() for c in rows[0][:2]] in (["term", "definition"], ["front", "back"]):
        header = [c.strip().lower() for c in rows[0]]
        return [dict(zip(header, r)) for r in rows[1:]]
    return rows


def read_deck(file_path: str) -> list[dict]:
    """Parse a deck file into ``{"term", "definition", "hint"}`` dicts.

    JSON and YAML may hold a list of cards or a mapping with a ``cards`` list.
    CSV and tab-separated text hold one card per row, with an optional header.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
    elif suffix in (".yaml", ".yml"):
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    elif suffix == ".csv":
        data = _read_rows(path, ",")
    elif suffix in (".tsv", ".txt"):
        data = _read_rows(path, "\t")
    else:
        raise ValueError(f"Unsupported deck format: {suffix or path.name}")

    if isinstance(data, dict):
        data = data.get("cards", [])
    return _normalize(data or [])


def import_deck(
    db_path: str,
    file_path: str,
    user_id: str,
    title: Optional[str] = None,
    categories: Optional[list[str]] = None,
    is_public: bool = False,
) -> dict:
    """Create a quiz owned by ``user_id`` from a deck file."""
    cards = read_deck(file_path)
    if not cards:
        raise ValueError(f"No cards found in {Path(file_path).name}")
    quiz = Quiz(id=0, title=title or Path(file_path).stem, created_by=user_id)
    quiz.update(is_public=is_public, categories=[Mode(c).value for c in (categories or [Mode.FLASHCARDS])])
    for card in cards:
        add_card(quiz, card["term"], card["definition"], hint=card["hint"])
    save_quiz(db_path, quiz)
    log.info("Imported %d cards from %s into quiz %s", len(cards), file_path, quiz.id)
    return {"filename": Path(file_path).name, "quiz_id": quiz.id, "title": quiz.title, "cards": len(cards)}
