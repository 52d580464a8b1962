"""Blocks mode: place square blocks on a grid, answer a question every second placement."""
import logging
from typing import Optional

from cosmos_quiz.engine import ModeEngine
from cosmos_quiz.models import Mode
from cosmos_quiz.options import normalize_answer

log = logging.getLogger(__name__)

GRID_SIZE = 10
MAX_ATTEMPTS = 3
QUESTION_EVERY = 2


def empty_grid() -> list[list[bool]]:
    return [[False] * GRID_SIZE for _ in range(GRID_SIZE)]


class BlocksEngine(ModeEngine):
    """A question opens every second placement; the game ends after two
    placements per card. Answers only feed the Attempt counters."""

    mode = Mode.BLOCKS

    def __init__(self, db_path, quiz_id, user_id, rng=None):
        super().__init__(db_path, quiz_id, user_id, rng)
        self.grid = empty_grid()
        self.current_shape: list[list[int]] = []
        self.place_count = 0
        self.attempts_left = MAX_ATTEMPTS
        self.show_question = False
        self.load_current_card()
        self.generate_next_shape()

    @property
    def placements_needed(self) -> int:
        return len(self.cards) * QUESTION_EVERY

    @property
    def deck_size(self) -> int:
        return self.placements_needed

    def load_current_card(self) -> None:
        # Questions are drawn at random by place_shape, not by the cursor.
        if not self.cards or self.attempt.is_completed:
            self._complete()

    # -- grid ----------------------------------------------------------

    def generate_next_shape(self) -> None:
        size = self.rng.randint(1, 3)
        while size > 1 and not self._has_room(size):
            size -= 1
        if not self._has_room(size):
            log.info("Grid full, clearing it")
            self.grid = empty_grid()
        self.current_shape = [[1] * size for _ in range(size)]

    def _has_room(self, size: int) -> bool:
        shape = [[1] * size for _ in range(size)]
        return any(
            self._fits(shape, x, y)
            for y in range(GRID_SIZE - size + 1)
            for x in range(GRID_SIZE - size + 1)
        )

    def _fits(self, shape: list[list[int]], x: int, y: int) -> bool:
        if not shape or not shape[0]:
            return False
        h, w = len(shape), len(shape[0])
        if x < 0 or y < 0 or x + w > GRID_SIZE or y + h > GRID_SIZE:
            return False
        for dy in range(h):
            for dx in range(w):
                if shape[dy][dx] == 1 and self.grid[y + dy][x + dx]:
                    return False
        return True

    def can_place_shape(self, x: int, y: int) -> bool:
        return self._fits(self.current_shape, x, y)

    def place_shape_in_grid(self, x: int, y: int) -> None:
        for dy, row in enumerate(self.current_shape):
            for dx, cell in enumerate(row):
                if cell == 1:
                    self.grid[y + dy][x + dx] = True

    def place_shape(self) -> None:
        """Count a successful placement; every second one opens a question."""
        self.place_count += 1
        if self.place_count % QUESTION_EVERY == 0:
            self.show_question = True
            self.current_card = self.rng.choice(self.cards)
        if self.place_count >= self.placements_needed:
            self._complete()

    def place(self, x: int, y: int) -> bool:
        """Place the current shape at (x, y) if legal, then draw the next shape."""
        if self.is_completed or self.show_question or not self.can_place_shape(x, y):
            return False
        self.place_shape_in_grid(x, y)
        self.place_shape()
        self.generate_next_shape()
        return True

    # -- questions -----------------------------------------------------

    def submit_answer(self, answer: str) -> Optional[bool]:
        if not self.show_question or self.current_card is None:
            return None
        correct = normalize_answer(answer) == normalize_answer(self.current_card.definition)
        if correct:
            self._record(True, user_answer=answer)
            self.show_question = False
            self.current_card = None
        else:
            self._record(False, user_answer=answer, advance=False)
            self.attempts_left -= 1
            if self.attempts_left == 0:
                self._reset_grid_and_attempts()
        return correct

    def _reset_grid_and_attempts(self) -> None:
        self.grid = empty_grid()
        self.attempts_left = MAX_ATTEMPTS
        self.place_count = 0
        self.show_question = False
        self.current_card = None

    def reset(self) -> None:
        self._reset_grid_and_attempts()
        super().reset()
        self.generate_next_shape()
