"""Test mode: a mix of question types drawn per card."""
from enum import Enum
from typing import Optional

from cosmos_quiz.engine import ModeEngine
from cosmos_quiz.models import Mode
from cosmos_quiz.options import blank_term, generate_options, normalize_answer

TRUE_WORDS = {"true", "t", "yes", "y", "1", "đúng"}


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "Multiple Choice"
    TRUE_FALSE = "True or False"
    WRITTEN = "Written"
    FILL_IN_BLANK = "Fill in the Blank"


def _as_bool(answer) -> bool:
    if isinstance(answer, bool):
        return answer
    return normalize_answer(str(answer)) in TRUE_WORDS


class ExamEngine(ModeEngine):
    """Each card gets a question type drawn uniformly from ``selected_types``.

    Fill in the Blank masks a word of the term but is scored against the
    definition options, the same as Multiple Choice.
    """

    mode = Mode.TEST

    def __init__(self, db_path, quiz_id, user_id, rng=None):
        super().__init__(db_path, quiz_id, user_id, rng)
        self.selected_types: set[QuestionType] = set(QuestionType)
        self.current_type: Optional[QuestionType] = None
        self.options: list[str] = []
        self.displayed_definition = ""
        self.blanked_term = ""
        self.fill_options: list[str] = []
        self.load_current_card()

    def set_selected_types(self, types) -> None:
        types = {QuestionType(t) for t in types}
        if not types:
            raise ValueError("at least one question type must be enabled")
        self.selected_types = types

    def start_test(self) -> bool:
        """Restart the attempt with the current type selection."""
        if not self.selected_types:
            return False
        ModeEngine.reset(self)
        return True

    def prepare_card(self) -> None:
        enabled = [t for t in QuestionType if t in self.selected_types]
        self.current_type = self.rng.choice(enabled) if enabled else QuestionType.MULTIPLE_CHOICE
        self.options = []
        self.displayed_definition = ""
        self.blanked_term = ""
        self.fill_options = []

        if self.current_type == QuestionType.MULTIPLE_CHOICE:
            self.options = generate_options(self.current_card, self.cards, self.rng)
        elif self.current_type == QuestionType.TRUE_FALSE:
            self._generate_true_false()
        elif self.current_type == QuestionType.FILL_IN_BLANK:
            self.blanked_term = blank_term(self.current_card.term, self.rng)
            self.fill_options = generate_options(self.current_card, self.cards, self.rng)

    def _generate_true_false(self) -> None:
        correct = self.current_card.definition
        if self.rng.random() < 0.5:
            self.displayed_definition = correct
            return
        others = [c.definition for c in self.cards if c.id != self.current_card.id]
        self.displayed_definition = self.rng.choice(others) if others else correct

    def score(self, answer) -> tuple[bool, str]:
        """Return (correct, answer text to record) for the current question."""
        definition = self.current_card.definition
        text = "" if answer is None else str(answer)
        if self.current_type == QuestionType.TRUE_FALSE:
            return _as_bool(answer) == (self.displayed_definition == definition), text
        if self.current_type == QuestionType.WRITTEN:
            return normalize_answer(text) == normalize_answer(definition), text
        return text == definition, text

    def submit_answer(self, answer) -> Optional[bool]:
        if self.current_card is None:
            return None
        correct, text = self.score(answer)
        self._record(correct, user_answer=text)
        self.load_current_card()
        return correct

    def dont_know(self) -> None:
        if self.current_card is None:
            return
        self._record(False)
        self.load_current_card()

    def reset(self) -> None:
        self.selected_types = set(QuestionType)
        super().reset()
