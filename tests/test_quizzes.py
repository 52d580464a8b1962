from cosmos_quiz.attempts import get_attempt, load_or_create_attempt
from cosmos_quiz.db import get_connection
from cosmos_quiz.favorites import add_favorite, is_favorite
from cosmos_quiz.models import Quiz
from cosmos_quiz.quizzes import (
    add_card, delete_quiz, get_quiz, list_quizzes, remove_card, save_quiz, update_quiz,
)


def test_save_and_get_quiz_keeps_card_order(tmp_db, make_quiz):
    quiz = make_quiz()
    loaded = get_quiz(tmp_db, quiz.id)
    assert loaded.title == "Hành tinh"
    assert [c.term for c in loaded.cards] == ["Trái Đất", "Sao Hỏa", "Sao Mộc"]
    assert loaded.cards[0].hint == "Hành tinh xanh"


def test_save_quiz_assigns_id(tmp_db, make_quiz):
    make_quiz()
    quiz = Quiz(id=0, title="Mới", created_by="u1", categories=["Learn"])
    add_card(quiz, "Vega", "Sao sáng trong Lyra")
    save_quiz(tmp_db, quiz)
    assert quiz.id > 0
    assert len(get_quiz(tmp_db, quiz.id).cards) == 1


def test_save_quiz_twice_does_not_duplicate(tmp_db, make_quiz):
    quiz = make_quiz()
    save_quiz(tmp_db, quiz)
    assert len(get_quiz(tmp_db, quiz.id).cards) == 3


def test_get_quiz_missing(tmp_db, make_quiz):
    make_quiz()
    assert get_quiz(tmp_db, 12345) is None


def test_update_quiz_replaces_cards(tmp_db, make_quiz):
    quiz = make_quiz(created_by="u1")
    remove_card(quiz, quiz.cards[0].id)
    add_card(quiz, "Sao Thổ", "Hành tinh có vành đai")
    quiz.update(title="Hành tinh (sửa)")
    update_quiz(tmp_db, quiz)
    loaded = get_quiz(tmp_db, quiz.id)
    assert loaded.title == "Hành tinh (sửa)"
    assert [c.term for c in loaded.cards] == ["Sao Hỏa", "Sao Mộc", "Sao Thổ"]


def test_list_quizzes_filters_by_mode(tmp_db, make_quiz):
    make_quiz(title="Chỉ Learn", categories=["Learn"])
    make_quiz(title="Chỉ Match", categories=["Match"])
    titles = [q.title for q in list_quizzes(tmp_db, "Learn", "u1")]
    assert titles == ["Chỉ Learn"]


def test_list_quizzes_ordering(tmp_db, make_quiz):
    make_quiz(title="Built-in cũ")
    make_quiz(title="Của người khác", created_by="u2", is_public=True)
    make_quiz(title="Riêng của người khác", created_by="u2", is_public=False)
    make_quiz(title="Của tôi", created_by="u1")
    make_quiz(title="Built-in mới")
    titles = [q.title for q in list_quizzes(tmp_db, "Flashcards", "u1")]
    assert titles == ["Của tôi", "Built-in mới", "Built-in cũ", "Của người khác"]


def test_list_quizzes_search(tmp_db, make_quiz):
    make_quiz(title="Các hành tinh")
    make_quiz(title="Các chòm sao")
    titles = [q.title for q in list_quizzes(tmp_db, "Flashcards", "u1", search="CHÒM")]
    assert titles == ["Các chòm sao"]


def test_delete_quiz_only_by_creator(tmp_db, make_quiz):
    quiz = make_quiz(created_by="u1")
    assert not delete_quiz(tmp_db, quiz, "u2")
    assert get_quiz(tmp_db, quiz.id) is not None


def test_delete_builtin_quiz_refused(tmp_db, make_quiz):
    quiz = make_quiz()
    assert not delete_quiz(tmp_db, quiz, "u1")
    assert get_quiz(tmp_db, quiz.id) is not None


def test_delete_quiz_cascades(tmp_db, make_quiz):
    quiz = make_quiz(created_by="u1")
    load_or_create_attempt(tmp_db, quiz.id, "Learn", "u1")
    add_favorite(tmp_db, quiz.cards[0].id, quiz.id, "u1")
    assert delete_quiz(tmp_db, quiz, "u1")
    assert get_quiz(tmp_db, quiz.id) is None
    assert get_attempt(tmp_db, quiz.id, "Learn", "u1") is None
    assert not is_favorite(tmp_db, quiz.cards[0].id, "u1")
    conn = get_connection(tmp_db)
    assert conn.execute("SELECT COUNT(*) FROM cards WHERE quiz_id = ?", (quiz.id,)).fetchone()[0] == 0
    conn.close()
