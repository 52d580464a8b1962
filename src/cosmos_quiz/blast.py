"""Blast mode: tap the right definition among options scattered over the play field."""
import logging
import math
from typing import NamedTuple, Optional

from cosmos_quiz.engine import ModeEngine
from cosmos_quiz.models import Mode
from cosmos_quiz.options import generate_options

log = logging.getLogger(__name__)

FIELD_WIDTH = 390.0
FIELD_HEIGHT = 844.0
SIDE_MARGIN = 50.0
TOP_MARGIN = 150.0
MIN_DISTANCE = 100.0
MAX_TRIES = 200


class FloatingOption(NamedTuple):
    text: str
    x: float
    y: float


class BlastEngine(ModeEngine):
    mode = Mode.BLAST

    def __init__(self, db_path, quiz_id, user_id, rng=None,
                 width: float = FIELD_WIDTH, height: float = FIELD_HEIGHT,
                 min_distance: float = MIN_DISTANCE):
        super().__init__(db_path, quiz_id, user_id, rng)
        self.width = width
        self.height = height
        self.min_distance = min_distance
        self.floating_options: list[FloatingOption] = []
        self.load_current_card()

    def prepare_card(self) -> None:
        texts = generate_options(self.current_card, self.cards, self.rng)
        positions: list[tuple[float, float]] = []
        for _ in texts:
            positions.append(self._sample_point(positions))
        self.floating_options = [FloatingOption(t, x, y) for t, (x, y) in zip(texts, positions)]

    def _sample_point(self, placed: list[tuple[float, float]]) -> tuple[float, float]:
        """Rejection-sample a point at least ``min_distance`` from every placed one.

        After MAX_TRIES misses the distance is halved; below 1 the last
        candidate is taken as is.
        """
        distance = self.min_distance
        while True:
            for _ in range(MAX_TRIES):
                point = (
                    self.rng.uniform(SIDE_MARGIN, self.width - SIDE_MARGIN),
                    self.rng.uniform(TOP_MARGIN, self.height / 2),
                )
                if all(math.hypot(point[0] - px, point[1] - py) >= distance for px, py in placed):
                    return point
            distance /= 2
            log.debug("Relaxing option spacing to %.1f", distance)
            if distance < 1:
                return point

    def tap_option(self, option) -> Optional[bool]:
        if self.current_card is None:
            return None
        text = option.text if isinstance(option, FloatingOption) else option
        correct = text == self.current_card.definition
        self._record(correct)
        self.load_current_card()
        return correct

    def submit_answer(self, answer) -> Optional[bool]:
        return self.tap_option(answer)
