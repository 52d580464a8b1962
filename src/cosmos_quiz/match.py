"""Match mode: memory-pairs board of term and definition tiles."""
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from cosmos_quiz.engine import ModeEngine
from cosmos_quiz.models import Card, Mode

MAX_PAIRS = 8
MISMATCH_DELAY = 1.2  # seconds a wrong pair stays face up


class TileSide(str, Enum):
    TERM = "term"
    DEFINITION = "definition"


@dataclass(frozen=True)
class MatchItem:
    card_id: int
    text: str
    side: TileSide
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


class MatchEngine(ModeEngine):
    """Matched pairs are the attempt's correct cards, so a board can be resumed.

    The cursor advances once per matched pair; mismatches only count as
    incorrect.
    """

    mode = Mode.MATCH

    def __init__(self, db_path, quiz_id, user_id, rng=None,
                 clock: Callable[[], float] = time.monotonic):
        super().__init__(db_path, quiz_id, user_id, rng)
        self.clock = clock
        self.grid_items: list[MatchItem] = []
        self.selected_item1: Optional[MatchItem] = None
        self.selected_item2: Optional[MatchItem] = None
        self.matched_pairs: set[int] = set()
        self._clear_at: Optional[float] = None
        self.setup_grid()
        self.load_current_card()

    @property
    def total_pairs(self) -> int:
        return len(self.grid_items) // 2

    @property
    def deck_size(self) -> int:
        return self.total_pairs

    def _board_cards(self) -> list[Card]:
        if len(self.cards) >= MAX_PAIRS:
            return list(self.cards[:MAX_PAIRS])
        cards = list(self.cards)
        self.rng.shuffle(cards)
        return cards

    def setup_grid(self) -> None:
        items = []
        for card in self._board_cards():
            items.append(MatchItem(card.id, card.term, TileSide.TERM))
            items.append(MatchItem(card.id, card.definition, TileSide.DEFINITION))
        self.rng.shuffle(items)
        self.grid_items = items
        on_board = {item.card_id for item in items}
        self.matched_pairs = self.attempt.correct_cards & on_board
        self.clear_selection()

    def load_current_card(self) -> None:
        self.correct_count = self.attempt.correct_count
        self.incorrect_count = self.attempt.incorrect_count
        if self.attempt.is_completed or len(self.matched_pairs) >= self.total_pairs:
            self._complete()
        else:
            self.is_completed = False

    def clear_selection(self) -> None:
        self.selected_item1 = None
        self.selected_item2 = None
        self._clear_at = None

    def tick(self, now: Optional[float] = None) -> None:
        """Clear a mismatched pair once its delay has run out."""
        if self._clear_at is None:
            return
        if (self.clock() if now is None else now) >= self._clear_at:
            self.clear_selection()

    def select_item(self, item: MatchItem) -> Optional[bool]:
        """Select a tile. Returns the match result on the second pick, else None."""
        self.tick()
        if self.is_completed or item.card_id in self.matched_pairs:
            return None
        if self.selected_item1 is None:
            self.selected_item1 = item
            return None
        if self.selected_item2 is None and item.id != self.selected_item1.id:
            self.selected_item2 = item
            return self._check_match()
        return None

    def _check_match(self) -> bool:
        first, second = self.selected_item1, self.selected_item2
        is_match = first.card_id == second.card_id and first.side != second.side
        if is_match:
            self.matched_pairs.add(first.card_id)
            self._record(True, card_id=first.card_id)
            self.clear_selection()
            if len(self.matched_pairs) == self.total_pairs:
                self._complete()
        else:
            self._record(False, card_id=first.card_id, advance=False)
            self._clear_at = self.clock() + MISMATCH_DELAY
        return is_match

    def submit_answer(self, answer: MatchItem) -> Optional[bool]:
        return self.select_item(answer)

    def reset(self) -> None:
        self.attempt.reset()
        self._persist()
        self._session_marked = False
        self.setup_grid()
        self.load_current_card()

    def back_to_last(self) -> None:
        pass
