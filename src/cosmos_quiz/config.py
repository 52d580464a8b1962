"""Runtime configuration read from the environment (and an optional .env file)."""
import logging
import os
import uuid
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DB_PATH = os.getenv("COSMOS_QUIZ_DB") or str(Path.home() / ".cosmos_quiz" / "quiz.db")
LOG_LEVEL = os.getenv("COSMOS_QUIZ_LOG_LEVEL", "WARNING")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(format=LOG_FORMAT, level=(level or LOG_LEVEL).upper())


def resolve_user_id(db_path: str = DEFAULT_DB_PATH) -> str:
    """Return the id of the player using this install.

    ``COSMOS_QUIZ_USER`` wins when set. Otherwise a UUID is generated on first
    use and kept in the settings table so progress survives restarts.
    """
    from cosmos_quiz.progress import get_setting, set_setting

    env_user = os.getenv("COSMOS_QUIZ_USER")
    if env_user:
        return env_user
    user_id = get_setting(db_path, "current_user_id")
    if user_id is None:
        user_id = str(uuid.uuid4())
        set_setting(db_path, "current_user_id", user_id)
    return user_id
