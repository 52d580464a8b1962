"""Learn mode: multiple choice with feedback before moving on."""
from typing import Optional

from cosmos_quiz.engine import ModeEngine
from cosmos_quiz.models import Mode
from cosmos_quiz.options import generate_options


class LearnEngine(ModeEngine):
    """Selecting an option scores it; ``next_card`` is a separate step so the
    player can see which option was right before advancing."""

    mode = Mode.LEARN

    def __init__(self, db_path, quiz_id, user_id, rng=None):
        super().__init__(db_path, quiz_id, user_id, rng)
        self.options: list[str] = []
        self.selected_option: Optional[str] = None
        self.show_hint = False
        self.load_current_card()

    def prepare_card(self) -> None:
        self.options = generate_options(self.current_card, self.cards, self.rng)
        self.selected_option = None
        self.show_hint = False

    @property
    def answered(self) -> bool:
        return self.selected_option is not None

    def select_option(self, option: str) -> Optional[bool]:
        if self.current_card is None or self.answered:
            return None
        self.selected_option = option
        correct = option == self.current_card.definition
        self._record(correct)
        return correct

    def dont_know(self) -> None:
        if self.current_card is None or self.answered:
            return
        self.selected_option = self.current_card.definition
        self._record(False)

    def next_card(self) -> None:
        self.selected_option = None
        self.load_current_card()

    def submit_answer(self, answer: str) -> Optional[bool]:
        return self.select_option(answer)
