"""Completion statistics per attempt and per mode."""
from cosmos_quiz.attempts import get_user_attempts
from cosmos_quiz.models import Attempt, Mode
from cosmos_quiz.progress import load_user_progress
from cosmos_quiz.quizzes import get_quiz


def get_accuracy_label(score: float) -> str:
    if score >= 80:
        return "EXCELLENT"
    elif score >= 65:
        return "GOOD"
    elif score >= 50:
        return "FAIR"
    return "KEEP PRACTICING"


def get_accuracy_color(score: float) -> str:
    if score >= 80:
        return "green"
    elif score >= 65:
        return "yellow"
    elif score >= 50:
        return "dark_orange"
    return "red"


def summarize_attempt(attempt: Attempt, total: int) -> dict:
    answered = attempt.correct_count + attempt.incorrect_count
    accuracy = (attempt.correct_count / answered * 100) if answered else 0.0
    return {
        "correct": attempt.correct_count,
        "incorrect": attempt.incorrect_count,
        "total": total,
        "accuracy": round(accuracy, 1),
        "completed": attempt.is_completed,
    }


def get_mode_stats(db_path: str, user_id: str) -> list[dict]:
    """One row per mode: attempts started and finished, answer counts, accuracy."""
    attempts = get_user_attempts(db_path, user_id)
    results = []
    for mode in Mode:
        rows = [a for a in attempts if a.mode == mode.value]
        correct = sum(a.correct_count for a in rows)
        incorrect = sum(a.incorrect_count for a in rows)
        answered = correct + incorrect
        accuracy = round(correct / answered * 100, 1) if answered else 0.0
        results.append({
            "mode": mode.value,
            "attempts": len(rows),
            "completed": sum(1 for a in rows if a.is_completed),
            "correct": correct,
            "incorrect": incorrect,
            "accuracy": accuracy,
            "label": get_accuracy_label(accuracy),
        })
    return results


def get_recent_attempts(db_path: str, user_id: str, limit: int = 5) -> list[dict]:
    rows = []
    for attempt in get_user_attempts(db_path, user_id)[:limit]:
        quiz = get_quiz(db_path, attempt.quiz_id)
        if quiz is None:
            continue
        summary = summarize_attempt(attempt, len(quiz.cards))
        summary.update({"quiz_title": quiz.title, "mode": attempt.mode})
        rows.append(summary)
    return rows


def get_streak_stats(db_path: str, user_id: str) -> dict:
    progress = load_user_progress(db_path, user_id)
    return {
        "streak_days": progress.streak_days,
        "total_completions": progress.total_completions,
        "weekly_completions": list(progress.weekly_completions),
    }
