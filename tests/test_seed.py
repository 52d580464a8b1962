from cosmos_quiz.db import get_connection, init_db
from cosmos_quiz.models import Mode
from cosmos_quiz.progress import get_setting
from cosmos_quiz.quizzes import get_quiz, list_quizzes
from cosmos_quiz.seed import is_seeded, load_sample_quizzes, seed_all, seed_sample_quizzes


def test_sample_content_covers_every_mode():
    quizzes = load_sample_quizzes()
    assert len(quizzes) == 21
    modes = {c for q in quizzes for c in q["categories"]}
    assert modes == {m.value for m in Mode}
    assert all(q["cards"] for q in quizzes)


def test_seed_sample_quizzes_uses_offsets(tmp_db):
    init_db(tmp_db)
    seed_sample_quizzes(tmp_db, base_id=1_000_000)
    quiz = get_quiz(tmp_db, 1_000_001)
    assert quiz.title == "Hệ Mặt Trời"
    assert quiz.is_builtin
    assert not quiz.is_public
    assert [c.id for c in quiz.cards] == [1_000_011, 1_000_012, 1_000_013]
    assert quiz.cards[0].term == "Trái Đất"


def test_seeded_quizzes_listed_per_mode(tmp_db):
    init_db(tmp_db)
    seed_all(tmp_db)
    assert len(list_quizzes(tmp_db, "Flashcards", "u1")) == 4
    assert len(list_quizzes(tmp_db, "Match", "u1")) == 3


def test_is_seeded(tmp_db):
    init_db(tmp_db)
    assert not is_seeded(tmp_db)
    seed_all(tmp_db)
    assert is_seeded(tmp_db)
    assert get_setting(tmp_db, "has_inserted_samples") == "1"


def test_existing_builtin_counts_as_seeded(tmp_db, make_quiz):
    make_quiz()
    assert is_seeded(tmp_db)


def test_seed_all_idempotent(tmp_db):
    init_db(tmp_db)
    seed_all(tmp_db)
    seed_all(tmp_db)  # second call should be no-op
    conn = get_connection(tmp_db)
    assert conn.execute("SELECT COUNT(*) FROM quizzes").fetchone()[0] == 21
    assert conn.execute("SELECT COUNT(*) FROM cards").fetchone()[0] == 83
    conn.close()
