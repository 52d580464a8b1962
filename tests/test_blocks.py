from cosmos_quiz.blocks import GRID_SIZE, MAX_ATTEMPTS, BlocksEngine, empty_grid


def _place_single(engine, x, y):
    engine.current_shape = [[1]]
    return engine.place(x, y)


def test_new_engine_has_empty_grid_and_shape(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlocksEngine(tmp_db, quiz.id, "u1", rng=rng)
    assert engine.grid == empty_grid()
    size = len(engine.current_shape)
    assert 1 <= size <= 3
    assert all(len(row) == size for row in engine.current_shape)
    assert engine.placements_needed == 6
    assert engine.attempts_left == MAX_ATTEMPTS


def test_can_place_shape(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlocksEngine(tmp_db, quiz.id, "u1", rng=rng)
    engine.current_shape = [[1]]
    assert engine.can_place_shape(0, 0)
    assert engine.can_place_shape(GRID_SIZE - 1, GRID_SIZE - 1)
    engine.grid[0][0] = True
    assert not engine.can_place_shape(0, 0)


def test_out_of_bounds_rejected(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlocksEngine(tmp_db, quiz.id, "u1", rng=rng)
    engine.current_shape = [[1] * 3 for _ in range(3)]
    assert not engine.can_place_shape(GRID_SIZE - 2, 0)
    assert not engine.can_place_shape(-1, 0)
    assert not engine.can_place_shape(0, GRID_SIZE)
    assert engine.can_place_shape(GRID_SIZE - 3, GRID_SIZE - 3)


def test_place_fills_grid(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlocksEngine(tmp_db, quiz.id, "u1", rng=rng)
    engine.current_shape = [[1, 1], [1, 1]]
    assert engine.place(4, 5)
    assert engine.grid[5][4] and engine.grid[5][5] and engine.grid[6][4] and engine.grid[6][5]
    assert engine.place_count == 1
    assert not _place_single(engine, 4, 5)
    assert engine.place_count == 1


def test_question_every_second_placement(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlocksEngine(tmp_db, quiz.id, "u1", rng=rng)
    assert _place_single(engine, 0, 0)
    assert not engine.show_question
    assert _place_single(engine, 1, 0)
    assert engine.show_question
    assert engine.current_card in quiz.cards
    # no placing while a question is open
    assert not _place_single(engine, 2, 0)


def test_correct_answer_closes_question(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlocksEngine(tmp_db, quiz.id, "u1", rng=rng)
    _place_single(engine, 0, 0)
    _place_single(engine, 1, 0)
    answer = "  " + engine.current_card.definition.upper()
    assert engine.submit_answer(answer) is True
    assert not engine.show_question
    assert engine.correct_count == 1
    assert _place_single(engine, 2, 0)


def test_three_wrong_answers_reset_board(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlocksEngine(tmp_db, quiz.id, "u1", rng=rng)
    _place_single(engine, 0, 0)
    _place_single(engine, 1, 0)
    assert engine.submit_answer("sai") is False
    assert engine.attempts_left == 2
    assert engine.show_question
    engine.submit_answer("sai")
    engine.submit_answer("sai")
    assert engine.grid == empty_grid()
    assert engine.place_count == 0
    assert engine.attempts_left == MAX_ATTEMPTS
    assert not engine.show_question
    assert engine.incorrect_count == 3
    assert engine.attempt.current_index == 0


def test_submit_without_question_is_ignored(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlocksEngine(tmp_db, quiz.id, "u1", rng=rng)
    assert engine.submit_answer("Hành tinh thứ 3") is None
    assert engine.correct_count == 0


def test_game_completes_after_enough_placements(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlocksEngine(tmp_db, quiz.id, "u1", rng=rng)
    x = 0
    while not engine.is_completed:
        if engine.show_question:
            engine.submit_answer(engine.current_card.definition)
        else:
            assert _place_single(engine, x, 0)
            x += 1
    assert x <= engine.placements_needed
    assert engine.attempt.is_completed
    assert BlocksEngine(tmp_db, quiz.id, "u1", rng=rng).is_completed


def test_full_grid_is_cleared_for_next_shape(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlocksEngine(tmp_db, quiz.id, "u1", rng=rng)
    engine.grid = [[True] * GRID_SIZE for _ in range(GRID_SIZE)]
    engine.generate_next_shape()
    assert engine.grid == empty_grid()


def test_reset(tmp_db, make_quiz, rng):
    quiz = make_quiz()
    engine = BlocksEngine(tmp_db, quiz.id, "u1", rng=rng)
    _place_single(engine, 0, 0)
    _place_single(engine, 1, 0)
    engine.submit_answer("sai")
    engine.reset()
    assert engine.grid == empty_grid()
    assert engine.place_count == 0
    assert engine.incorrect_count == 0
    assert not engine.is_completed
