"""Mode to engine lookup."""
from cosmos_quiz.blast import BlastEngine
from cosmos_quiz.blocks import BlocksEngine
from cosmos_quiz.engine import ModeEngine
from cosmos_quiz.flashcards import FlashcardsEngine
from cosmos_quiz.learn import LearnEngine
from cosmos_quiz.match import MatchEngine
from cosmos_quiz.models import Mode
from cosmos_quiz.testmode import ExamEngine

ENGINES: dict[Mode, type[ModeEngine]] = {
    Mode.FLASHCARDS: FlashcardsEngine,
    Mode.LEARN: LearnEngine,
    Mode.TEST: ExamEngine,
    Mode.BLOCKS: BlocksEngine,
    Mode.BLAST: BlastEngine,
    Mode.MATCH: MatchEngine,
}


def create_engine(mode, db_path: str, quiz_id: int, user_id: str, rng=None) -> ModeEngine:
    return ENGINES[Mode(mode)](db_path, quiz_id, user_id, rng=rng)
