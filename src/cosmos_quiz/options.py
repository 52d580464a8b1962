"""Answer option generation and answer normalization shared by the game modes."""
import random
from typing import Sequence

from cosmos_quiz.models import Card

BLANK = "_____"


def normalize_answer(text: str | None) -> str:
    return (text or "").strip().casefold()


def distractors(card: Card, deck: Sequence[Card], rng: random.Random, limit: int = 3) -> list[str]:
    """Up to ``limit`` distinct definitions of other cards, never the card's own text."""
    others = list(dict.fromkeys(
        c.definition for c in deck if c.id != card.id and c.definition != card.definition
    ))
    return rng.sample(others, min(limit, len(others)))


def generate_options(card: Card, deck: Sequence[Card], rng: random.Random, count: int = 4) -> list[str]:
    """The card's definition plus up to ``count - 1`` distractors, shuffled."""
    options = distractors(card, deck, rng, limit=count - 1) + [card.definition]
    rng.shuffle(options)
    return options


def blank_term(term: str, rng: random.Random) -> str:
    """Mask one random word of a multi-word term. Single words become the bare placeholder."""
    words = [w for w in term.split(" ") if w]
    if len(words) < 2:
        return BLANK
    words[rng.randrange(len(words))] = BLANK
    return " ".join(words)
