"""Shared state machine for the six game modes.

Every mode works the same way underneath: load the quiz snapshot, load or
create the player's Attempt for that mode, then for each answer update the
Attempt, save it, and move on to whatever card the cursor points at. Subclasses
decide what a "question" looks like and how an answer is scored.

Saves go through the attempts gateway. When one fails the engine keeps
playing on its in-memory state, flags itself ``dirty`` and keeps the error in
``last_error``; ``flush()`` retries and raises if the store is still failing.
"""
import logging
import random
from typing import Optional

from cosmos_quiz.attempts import load_or_create_attempt, update_attempt
from cosmos_quiz.db import PersistenceError, QuizNotFoundError
from cosmos_quiz.favorites import add_favorite, is_favorite, remove_favorite
from cosmos_quiz.models import Card, Mode
from cosmos_quiz.progress import mark_session_complete
from cosmos_quiz.quizzes import get_quiz

log = logging.getLogger(__name__)


class ModeEngine:
    mode: Mode = None

    def __init__(self, db_path: str, quiz_id: int, user_id: str, rng: Optional[random.Random] = None):
        quiz = get_quiz(db_path, quiz_id)
        if quiz is None:
            raise QuizNotFoundError(f"quiz {quiz_id} does not exist")
        self.db_path = db_path
        self.user_id = user_id
        self.rng = rng or random.Random()
        self.quiz_id = quiz.id
        self.quiz_title = quiz.title
        self.quiz_created_by = quiz.created_by
        self.cards: tuple[Card, ...] = tuple(quiz.cards)
        self.attempt = load_or_create_attempt(db_path, quiz.id, self.mode, user_id)

        self.current_card: Optional[Card] = None
        self.is_completed = False
        self.correct_count = self.attempt.correct_count
        self.incorrect_count = self.attempt.incorrect_count
        self.is_favorite = False
        self.dirty = False
        self.last_error: Optional[Exception] = None
        self._answered = False
        self._session_marked = False

    @property
    def total_count(self) -> int:
        return len(self.cards)

    @property
    def deck_size(self) -> int:
        """Cursor value at which the attempt counts as finished."""
        return len(self.cards)

    @property
    def can_edit(self) -> bool:
        return self.quiz_created_by is not None and self.quiz_created_by == self.user_id

    # -- card cursor ---------------------------------------------------

    def load_current_card(self) -> None:
        index = self.attempt.current_index
        if index >= self.deck_size:
            self.current_card = None
            self._complete()
            return
        self.current_card = self.cards[index]
        self.is_completed = False
        self.is_favorite = is_favorite(self.db_path, self.current_card.id, self.user_id)
        self.prepare_card()

    def prepare_card(self) -> None:
        """Hook: build the question for ``current_card``."""

    def submit_answer(self, answer):
        raise NotImplementedError

    def reset(self) -> None:
        self.attempt.reset()
        self._persist()
        self.is_completed = False
        self._session_marked = False
        self.correct_count = 0
        self.incorrect_count = 0
        self.load_current_card()

    def back_to_last(self) -> None:
        if self.attempt.step_back(self.deck_size):
            self._persist()
            self.load_current_card()

    def toggle_favorite(self) -> None:
        if self.current_card is None:
            return
        try:
            if self.is_favorite:
                remove_favorite(self.db_path, self.current_card.id, self.user_id)
            else:
                add_favorite(self.db_path, self.current_card.id, self.quiz_id, self.user_id)
        except PersistenceError as e:
            self.last_error = e
            log.warning("Could not update favorite for card %s: %s", self.current_card.id, e)
            return
        self.is_favorite = not self.is_favorite

    # -- progress ------------------------------------------------------

    def _record(self, correct: bool, card_id: Optional[int] = None,
                user_answer: Optional[str] = None, advance: bool = True) -> None:
        if card_id is None:
            card_id = self.current_card.id
        self.attempt.update_progress(
            correct, card_id, user_answer=user_answer, deck_size=self.deck_size, advance=advance,
        )
        self._answered = True
        self.correct_count = self.attempt.correct_count
        self.incorrect_count = self.attempt.incorrect_count
        self._persist()
        # the last answer finishes the session even if the player never advances past it
        if self.attempt.is_completed:
            self._mark_session()

    def _complete(self) -> None:
        self.is_completed = True
        self.correct_count = self.attempt.correct_count
        self.incorrect_count = self.attempt.incorrect_count
        if not self.attempt.is_completed:
            self.attempt.is_completed = True
            self._persist()
        self._mark_session()

    def _mark_session(self) -> None:
        if self._answered and not self._session_marked:
            self._session_marked = True
            try:
                mark_session_complete(self.db_path, self.user_id)
            except PersistenceError as e:
                self.last_error = e
                log.warning("Could not record completed session for %s: %s", self.user_id, e)

    def _persist(self) -> None:
        try:
            update_attempt(self.db_path, self.attempt)
        except PersistenceError as e:
            self.dirty = True
            self.last_error = e
            log.warning("%s progress for quiz %s kept in memory only: %s", self.attempt.mode, self.quiz_id, e)
        else:
            self.dirty = False
            self.last_error = None

    def flush(self) -> None:
        """Retry saving the attempt. Raises PersistenceError if it still fails."""
        update_attempt(self.db_path, self.attempt)
        self.dirty = False
        self.last_error = None
