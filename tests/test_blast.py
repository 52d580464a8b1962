import math

from cosmos_quiz.blast import FIELD_HEIGHT, FIELD_WIDTH, SIDE_MARGIN, TOP_MARGIN, BlastEngine


def test_options_placed_inside_field(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlastEngine(tmp_db, quiz.id, "u1", rng=rng)
    assert sorted(o.text for o in engine.floating_options) == sorted(c.definition for c in quiz.cards)
    for option in engine.floating_options:
        assert SIDE_MARGIN <= option.x <= FIELD_WIDTH - SIDE_MARGIN
        assert TOP_MARGIN <= option.y <= FIELD_HEIGHT / 2


def test_options_keep_their_distance_when_there_is_room(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlastEngine(tmp_db, quiz.id, "u1", rng=rng, min_distance=20)
    points = [(o.x, o.y) for o in engine.floating_options]
    for i, a in enumerate(points):
        for b in points[i + 1:]:
            assert math.hypot(a[0] - b[0], a[1] - b[1]) >= 20


def test_sampling_terminates_with_impossible_distance(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlastEngine(tmp_db, quiz.id, "u1", rng=rng, min_distance=10_000)
    assert len(engine.floating_options) == 3


def test_tap_correct_and_wrong(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlastEngine(tmp_db, quiz.id, "u1", rng=rng)
    right = next(o for o in engine.floating_options if o.text == "Hành tinh thứ 3")
    assert engine.tap_option(right) is True
    assert engine.current_card.term == "Sao Hỏa"
    assert engine.tap_option("Hành tinh lớn nhất") is False
    assert engine.correct_count == 1
    assert engine.incorrect_count == 1


def test_blast_completes(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlastEngine(tmp_db, quiz.id, "u1", rng=rng)
    while not engine.is_completed:
        engine.submit_answer(engine.current_card.definition)
    assert engine.correct_count == 3
    assert engine.tap_option("Hành tinh thứ 3") is None
