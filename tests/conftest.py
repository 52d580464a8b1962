import random

import pytest

from cosmos_quiz.db import init_db
from cosmos_quiz.models import Card, Quiz, next_id
from cosmos_quiz.quizzes import save_quiz

PLANETS = [
    ("Trái Đất", "Hành tinh thứ 3", "Hành tinh xanh"),
    ("Sao Hỏa", "Hành tinh Đỏ", "Có núi lửa lớn nhất"),
    ("Sao Mộc", "Hành tinh lớn nhất", "Có Vết Đỏ Lớn"),
]


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_quiz.db")
    return db_path


@pytest.fixture
def make_quiz(tmp_db):
    """Initialize the database and save a quiz built from (term, definition, hint) tuples."""
    init_db(tmp_db)

    def _make(cards=PLANETS, categories=None, created_by=None, title="Hành tinh", is_public=False):
        quiz = Quiz(
            id=next_id(),
            title=title,
            created_by=created_by,
            is_public=is_public,
            categories=categories or ["Flashcards", "Learn", "Test", "Blocks", "Blast", "Match"],
            cards=[Card(id=next_id(), term=t, definition=d, hint=h) for t, d, h in cards],
        )
        return save_quiz(tmp_db, quiz)

    return _make


@pytest.fixture
def rng():
    return random.Random(42)
