"""Flashcards mode: flip each card and grade yourself."""
from cosmos_quiz.engine import ModeEngine
from cosmos_quiz.models import Mode


class FlashcardsEngine(ModeEngine):
    mode = Mode.FLASHCARDS

    def __init__(self, db_path, quiz_id, user_id, rng=None):
        super().__init__(db_path, quiz_id, user_id, rng)
        self.show_answer = False
        self.show_hint = False
        self.load_current_card()

    def prepare_card(self) -> None:
        self.show_answer = False
        self.show_hint = False

    def flip_card(self) -> None:
        self.show_answer = not self.show_answer

    def toggle_hint(self) -> None:
        self.show_hint = not self.show_hint

    def next_card(self, correct: bool) -> None:
        if self.current_card is None:
            return
        self._record(correct)
        self.load_current_card()

    def previous_card(self) -> None:
        self.back_to_last()

    def submit_answer(self, answer) -> None:
        self.next_card(bool(answer))
