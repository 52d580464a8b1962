"""Data classes for the quiz and progress domain model."""
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional


class Mode(str, Enum):
    FLASHCARDS = "Flashcards"
    LEARN = "Learn"
    TEST = "Test"
    BLOCKS = "Blocks"
    BLAST = "Blast"
    MATCH = "Match"


_last_id = 0


def next_id() -> int:
    """Time-seeded id (epoch milliseconds), strictly increasing within the process."""
    global _last_id
    candidate = int(time.time() * 1000)
    _last_id = max(candidate, _last_id + 1)
    return _last_id


def reserve_ids(upto: int) -> None:
    """Make sure later ``next_id()`` calls return values above ``upto``."""
    global _last_id
    _last_id = max(_last_id, upto)


def _now() -> str:
    return datetime.now().isoformat()


@dataclass
class Card:
    id: int
    term: str
    definition: str
    hint: Optional[str] = None
    image: Optional[bytes] = None
    term_formatting: Optional[bytes] = None
    definition_formatting: Optional[bytes] = None

    def update(
        self,
        term: str,
        definition: str,
        hint: Optional[str] = None,
        image: Optional[bytes] = None,
        term_formatting: Optional[bytes] = None,
        definition_formatting: Optional[bytes] = None,
    ) -> None:
        self.term = term
        self.definition = definition
        self.hint = hint
        self.image = image
        self.term_formatting = term_formatting
        self.definition_formatting = definition_formatting


@dataclass
class Quiz:
    id: int
    title: str
    description: str = ""
    is_public: bool = False
    created_by: Optional[str] = None  # None = built-in sample
    categories: list[str] = field(default_factory=list)
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)
    cards: list[Card] = field(default_factory=list)

    @property
    def is_builtin(self) -> bool:
        return self.created_by is None

    def update(
        self,
        title: Optional[str] = None,
        description: Optional[str] = None,
        is_public: Optional[bool] = None,
        categories: Optional[list[str]] = None,
    ) -> None:
        if title is not None:
            self.title = title
        if description is not None:
            self.description = description
        if is_public is not None:
            self.is_public = is_public
        if categories is not None:
            self.categories = sorted(str(c) for c in categories)
        self.updated_at = _now()


@dataclass
class Attempt:
    id: int
    user_id: str
    quiz_id: int
    mode: str
    started_at: str = field(default_factory=_now)
    last_updated: str = field(default_factory=_now)
    is_completed: bool = False
    current_index: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    user_answers: dict[int, str] = field(default_factory=dict)
    correct_cards: set[int] = field(default_factory=set)

    def update_progress(
        self,
        correct: bool,
        card_id: int,
        user_answer: Optional[str] = None,
        deck_size: Optional[int] = None,
        advance: bool = True,
    ) -> None:
        """Record one answer. The caller persists the attempt afterwards."""
        self.last_updated = _now()
        if correct:
            self.correct_count += 1
            self.correct_cards.add(card_id)
        else:
            self.incorrect_count += 1
        if user_answer is not None:
            self.user_answers[card_id] = user_answer
        if advance:
            self.current_index += 1
            if deck_size is not None:
                self.current_index = min(self.current_index, deck_size)
        if deck_size is not None and self.current_index >= deck_size:
            self.is_completed = True

    def step_back(self, deck_size: Optional[int] = None) -> bool:
        """Move the cursor back one card. Returns False when already at the start."""
        if self.current_index <= 0:
            return False
        self.current_index -= 1
        if deck_size is None or self.current_index < deck_size:
            self.is_completed = False
        self.last_updated = _now()
        return True

    def reset(self) -> None:
        self.is_completed = False
        self.current_index = 0
        self.correct_count = 0
        self.incorrect_count = 0
        self.user_answers = {}
        self.correct_cards = set()
        self.last_updated = _now()


@dataclass
class Favorite:
    id: int
    user_id: str
    card_id: int
    quiz_id: int
    added_at: str = field(default_factory=_now)


def _weekday_index(day: date) -> int:
    # Sunday = 0 ... Saturday = 6
    return (day.weekday() + 1) % 7


@dataclass
class UserProgress:
    user_id: str
    streak_days: int = 0
    last_completed_date: Optional[str] = None
    total_completions: int = 0
    weekly_completions: list[bool] = field(default_factory=lambda: [False] * 7)

    def mark_completion(self, today: Optional[date] = None) -> None:
        today = today or date.today()
        self.weekly_completions[_weekday_index(today)] = True

        last = date.fromisoformat(self.last_completed_date) if self.last_completed_date else None
        if last == today:
            return
        if last == today - timedelta(days=1):
            self.streak_days += 1
        else:
            self.streak_days = 1
        self.last_completed_date = today.isoformat()
        self.total_completions += 1

    def reset_weekly(self) -> None:
        self.weekly_completions = [False] * 7
