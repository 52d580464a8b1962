"""Interactive CLI application."""
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from cosmos_quiz.blocks import GRID_SIZE, MAX_ATTEMPTS, BlocksEngine
from cosmos_quiz.config import DEFAULT_DB_PATH, configure_logging, resolve_user_id
from cosmos_quiz.dashboard import (
    get_accuracy_color, get_accuracy_label, get_mode_stats, get_recent_attempts,
    get_streak_stats, summarize_attempt,
)
from cosmos_quiz.db import PersistenceError, init_db
from cosmos_quiz.engine import ModeEngine
from cosmos_quiz.favorites import get_favorites
from cosmos_quiz.importer import import_deck
from cosmos_quiz.models import Mode, Quiz
from cosmos_quiz.modes import create_engine
from cosmos_quiz.progress import reset_all_progress
from cosmos_quiz.quizzes import add_card, delete_quiz, list_quizzes, save_quiz
from cosmos_quiz.seed import is_seeded, seed_all
from cosmos_quiz.testmode import QuestionType

log = logging.getLogger(__name__)

console = Console()

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class SessionExitRequested(Exception):
    """Raised when the player types q or menu inside a running session."""


def session_prompt(prompt: str, **kwargs) -> str:
    if kwargs.get("choices"):
        kwargs["choices"] = list(kwargs["choices"]) + ["q", "menu"]
    answer = Prompt.ask(prompt, **kwargs)
    if answer is not None and answer.strip().lower() in ("q", "menu"):
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str]) -> int:
    return int(session_prompt(prompt, choices=choices, show_choices=False))


def show_welcome():
    console.print(Panel(
        "[bold]Cosmos Quiz[/bold]\n[dim]Astronomy flashcards and games[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [(m.value.lower(), f"Play {m.value}") for m in Mode] + [
        ("new", "Create a quiz"),
        ("delete", "Delete one of your quizzes"),
        ("import", "Import a deck file"),
        ("favorites", "Your favorite cards"),
        ("stats", "Progress and streaks"),
        ("reset", "Erase all progress"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")
    console.print("[dim]Type q or menu during a game to come back here.[/dim]")


def choose_index(options: list[str], prompt: str = "Your answer", allow_skip: bool = False) -> Optional[int]:
    """Number the options and return the chosen index, or None for 'don't know'."""
    for i, option in enumerate(options, 1):
        console.print(f"  [cyan]{i})[/cyan] {option}")
    choices = [str(i) for i in range(1, len(options) + 1)]
    if allow_skip:
        console.print("  [cyan]0)[/cyan] [dim]I don't know[/dim]")
        choices.append("0")
    pick = session_int_prompt(prompt, choices=choices)
    return None if pick == 0 else pick - 1


def choose_option(options: list[str], prompt: str = "Your answer", allow_skip: bool = False) -> Optional[str]:
    index = choose_index(options, prompt, allow_skip)
    return None if index is None else options[index]


def choose_quiz(db_path: str, mode: Mode, user_id: str) -> Optional[Quiz]:
    search = Prompt.ask("Search titles [dim](Enter for all)[/dim]", default="")
    quizzes = list_quizzes(db_path, mode.value, user_id, search=search)
    if not quizzes:
        console.print("[yellow]No quizzes for this mode yet. Use 'new' or 'import'.[/yellow]")
        return None
    table = Table(title=f"{mode.value} quizzes")
    table.add_column("#", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Cards", justify="right")
    table.add_column("Owner")
    for i, quiz in enumerate(quizzes, 1):
        owner = "built-in" if quiz.is_builtin else ("you" if quiz.created_by == user_id else "public")
        table.add_row(str(i), quiz.title, str(len(quiz.cards)), owner)
    console.print(table)
    pick = IntPrompt.ask("Select quiz", choices=[str(i) for i in range(1, len(quizzes) + 1)])
    return quizzes[pick - 1]


# -- game loops ----------------------------------------------------------


def play_flashcards(engine) -> None:
    while not engine.is_completed:
        card = engine.current_card
        index = engine.attempt.current_index + 1
        star = " [yellow]*[/yellow]" if engine.is_favorite else ""
        console.print(Panel(card.term, title=f"Card {index}/{engine.total_count}{star}", border_style="cyan"))
        action = session_prompt("[dim]Enter to flip, h hint, f favorite, b back[/dim]", default="").strip().lower()
        if action == "h":
            console.print(f"[dim]Hint: {card.hint or 'none'}[/dim]")
            continue
        if action == "f":
            engine.toggle_favorite()
            continue
        if action == "b":
            engine.previous_card()
            continue
        engine.flip_card()
        console.print(Panel(card.definition, border_style="green"))
        knew = session_prompt("Did you know it?", choices=["y", "n"])
        engine.next_card(knew == "y")


def play_learn(engine) -> None:
    while not engine.is_completed:
        card = engine.current_card
        console.print(f"\n[bold]{card.term}[/bold]")
        choice = choose_option(engine.options, allow_skip=True)
        if choice is None:
            engine.dont_know()
            console.print(f"[yellow]Answer:[/yellow] [green]{card.definition}[/green]")
        elif engine.select_option(choice):
            console.print("[green]Correct![/green]")
        else:
            console.print(f"[red]Incorrect.[/red] Answer: [green]{card.definition}[/green]")
        session_prompt("[dim]Press Enter for the next card[/dim]", default="")
        engine.next_card()


def choose_question_types(engine) -> None:
    types = list(QuestionType)
    for i, qt in enumerate(types, 1):
        console.print(f"  [cyan]{i})[/cyan] {qt.value}")
    raw = Prompt.ask("Question types [dim](e.g. 1,3; Enter for all)[/dim]", default="")
    picked = {types[int(p) - 1] for p in raw.replace(" ", "").split(",") if p.isdigit() and 0 < int(p) <= len(types)}
    if picked:
        engine.set_selected_types(picked)


def play_test(engine) -> None:
    while not engine.is_completed:
        card = engine.current_card
        qtype = engine.current_type
        console.print(f"\n[dim]{qtype.value}[/dim]")
        if qtype == QuestionType.MULTIPLE_CHOICE:
            console.print(f"[bold]{card.term}[/bold]")
            answer = choose_option(engine.options, allow_skip=True)
        elif qtype == QuestionType.TRUE_FALSE:
            console.print(f"[bold]{card.term}[/bold] = {engine.displayed_definition}")
            answer = session_prompt("True or false?", choices=["t", "f"]) == "t"
        elif qtype == QuestionType.WRITTEN:
            console.print(f"[bold]{card.term}[/bold]")
            answer = session_prompt("Definition")
        else:
            console.print(f"[bold]{engine.blanked_term}[/bold]")
            answer = choose_option(engine.fill_options, allow_skip=True)
        if answer is None:
            engine.dont_know()
            console.print(f"[yellow]Answer:[/yellow] [green]{card.definition}[/green]")
        elif engine.submit_answer(answer):
            console.print("[green]Correct![/green]")
        else:
            console.print(f"[red]Incorrect.[/red] Answer: [green]{card.definition}[/green]")


def render_grid(engine: BlocksEngine) -> None:
    console.print("   " + " ".join(str(x) for x in range(GRID_SIZE)))
    for y, row in enumerate(engine.grid):
        cells = " ".join("[blue]#[/blue]" if filled else "." for filled in row)
        console.print(f"{y:>2} {cells}")
    size = len(engine.current_shape)
    console.print(f"Next block: {size}x{size}   Placed {engine.place_count}/{engine.placements_needed}")


def play_blocks(engine: BlocksEngine) -> None:
    while not engine.is_completed:
        if engine.show_question:
            card = engine.current_card
            console.print(f"\n[bold]{card.term}[/bold]  [dim]({engine.attempts_left} tries left)[/dim]")
            answer = session_prompt("Definition")
            if engine.submit_answer(answer):
                console.print("[green]Correct![/green]")
            elif engine.attempts_left == MAX_ATTEMPTS:
                console.print("[red]Out of tries, the board was cleared.[/red]")
            else:
                console.print("[red]Incorrect.[/red]")
            continue
        render_grid(engine)
        raw = session_prompt("Place at [dim](x y)[/dim]")
        parts = raw.replace(",", " ").split()
        if len(parts) != 2 or not all(p.lstrip("-").isdigit() for p in parts):
            console.print("[red]Enter two numbers, e.g. 3 4[/red]")
            continue
        if not engine.place(int(parts[0]), int(parts[1])):
            console.print("[red]That block does not fit there.[/red]")


def play_blast(engine) -> None:
    while not engine.is_completed:
        card = engine.current_card
        console.print(f"\n[bold]{card.term}[/bold]")
        options = sorted(engine.floating_options, key=lambda o: (o.y, o.x))
        index = choose_index([o.text for o in options], prompt="Blast")
        if engine.tap_option(options[index]):
            console.print("[green]Hit![/green]")
        else:
            console.print(f"[red]Miss.[/red] Answer: [green]{card.definition}[/green]")


def play_match(engine) -> None:
    while not engine.is_completed:
        open_items = [i for i in engine.grid_items if i.card_id not in engine.matched_pairs]
        console.print(f"\nMatched {len(engine.matched_pairs)}/{engine.total_pairs}")
        first = open_items[choose_index([i.text for i in open_items], prompt="First tile")]
        engine.select_item(first)
        rest = [i for i in open_items if i.id != first.id]
        second = rest[choose_index([i.text for i in rest], prompt="Second tile")]
        if engine.select_item(second):
            console.print("[green]Match![/green]")
        else:
            console.print("[red]Not a pair.[/red]")
            engine.clear_selection()


PLAYERS = {
    Mode.FLASHCARDS: play_flashcards,
    Mode.LEARN: play_learn,
    Mode.TEST: play_test,
    Mode.BLOCKS: play_blocks,
    Mode.BLAST: play_blast,
    Mode.MATCH: play_match,
}


def show_summary(engine: ModeEngine) -> None:
    summary = summarize_attempt(engine.attempt, engine.total_count)
    color = get_accuracy_color(summary["accuracy"])
    console.print(Panel(
        f"Correct: [green]{summary['correct']}[/green]   Incorrect: [red]{summary['incorrect']}[/red]\n"
        f"Accuracy: [{color}]{summary['accuracy']}% {get_accuracy_label(summary['accuracy'])}[/{color}]",
        title=f"{engine.quiz_title} complete", border_style=color,
    ))


def run_mode(db_path: str, mode: Mode, user_id: str) -> None:
    quiz = choose_quiz(db_path, mode, user_id)
    if quiz is None:
        return
    engine = create_engine(mode, db_path, quiz.id, user_id)
    if engine.is_completed:
        if not Confirm.ask("You finished this one already. Start over?", default=True):
            show_summary(engine)
            return
        engine.reset()
    if mode == Mode.TEST and engine.attempt.current_index == 0:
        choose_question_types(engine)
        engine.start_test()
    try:
        PLAYERS[mode](engine)
    except SessionExitRequested:
        console.print("[dim]Progress saved. Back to the menu.[/dim]")
    finally:
        if engine.dirty:
            try:
                engine.flush()
            except PersistenceError as e:
                console.print(f"[red]Could not save progress: {e}[/red]")
    if engine.is_completed:
        show_summary(engine)


# -- commands -------------------------------------------------------------


def _ask_modes() -> list[str]:
    modes = list(Mode)
    for i, m in enumerate(modes, 1):
        console.print(f"  [cyan]{i})[/cyan] {m.value}")
    raw = Prompt.ask("Playable in which modes? [dim](e.g. 1,2; Enter for all)[/dim]", default="")
    picked = [modes[int(p) - 1].value for p in raw.replace(" ", "").split(",")
              if p.isdigit() and 0 < int(p) <= len(modes)]
    return picked or [m.value for m in modes]


def cmd_new(db_path: str, user_id: str):
    title = Prompt.ask("Title").strip()
    if not title:
        console.print("[red]A quiz needs a title.[/red]")
        return
    quiz = Quiz(id=0, title=title, created_by=user_id)
    quiz.update(
        description=Prompt.ask("Description", default=""),
        categories=_ask_modes(),
        is_public=Confirm.ask("Share publicly?", default=False),
    )
    console.print("[dim]Add cards. Leave the term empty to finish.[/dim]")
    while True:
        term = Prompt.ask(f"Card {len(quiz.cards) + 1} term", default="").strip()
        if not term:
            break
        definition = Prompt.ask("Definition").strip()
        hint = Prompt.ask("Hint", default="").strip() or None
        add_card(quiz, term, definition, hint=hint)
    if not quiz.cards:
        console.print("[yellow]No cards added, quiz discarded.[/yellow]")
        return
    save_quiz(db_path, quiz)
    console.print(f"[green]Saved '{quiz.title}' with {len(quiz.cards)} cards.[/green]")


def cmd_delete(db_path: str, user_id: str):
    own = {}
    for mode in Mode:
        for quiz in list_quizzes(db_path, mode.value, user_id):
            if quiz.created_by == user_id:
                own[quiz.id] = quiz
    if not own:
        console.print("[yellow]You have not created any quizzes.[/yellow]")
        return
    quizzes = list(own.values())
    for i, quiz in enumerate(quizzes, 1):
        console.print(f"  [cyan]{i})[/cyan] {quiz.title} ({len(quiz.cards)} cards)")
    pick = IntPrompt.ask("Delete which quiz", choices=[str(i) for i in range(1, len(quizzes) + 1)])
    quiz = quizzes[pick - 1]
    if Confirm.ask(f"Delete '{quiz.title}' and its progress?", default=False):
        delete_quiz(db_path, quiz, user_id)
        console.print("[green]Deleted.[/green]")


def cmd_import(db_path: str, user_id: str):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    title = Prompt.ask("Title", default=Path(file_path).stem)
    result = import_deck(db_path, file_path, user_id, title=title, categories=_ask_modes())
    console.print(f"[green]Imported {result['filename']}: {result['cards']} cards → '{result['title']}'[/green]")


def cmd_favorites(db_path: str, user_id: str):
    favorites = get_favorites(db_path, user_id)
    if not favorites:
        console.print("[yellow]No favorites yet. Press f on a card to add one.[/yellow]")
        return
    table = Table(title="Favorite cards")
    table.add_column("Term", style="cyan")
    table.add_column("Definition")
    table.add_column("Quiz", style="dim")
    for fav in favorites:
        table.add_row(fav["term"], fav["definition"], fav["quiz_title"])
    console.print(table)


def cmd_stats(db_path: str, user_id: str):
    streak = get_streak_stats(db_path, user_id)
    week = "  ".join(
        f"[green]{d}[/green]" if done else f"[dim]{d}[/dim]"
        for d, done in zip(WEEKDAYS, streak["weekly_completions"])
    )
    console.print(Panel(
        f"Streak: [bold]{streak['streak_days']}[/bold] day(s)   "
        f"Sessions finished: [bold]{streak['total_completions']}[/bold]\n{week}",
        title="Your progress", border_style="blue",
    ))

    table = Table(title="By mode")
    table.add_column("Mode", style="cyan")
    table.add_column("Quizzes", justify="right")
    table.add_column("Finished", justify="right")
    table.add_column("Accuracy", justify="right")
    for row in get_mode_stats(db_path, user_id):
        color = get_accuracy_color(row["accuracy"])
        table.add_row(
            row["mode"], str(row["attempts"]), str(row["completed"]),
            f"[{color}]{row['accuracy']}%[/{color}]" if row["attempts"] else "-",
        )
    console.print(table)

    recent = get_recent_attempts(db_path, user_id)
    if recent:
        console.print("\n[bold]Recent:[/bold]")
        for r in recent:
            console.print(f"  {r['mode']:<11} {r['quiz_title']}: {r['correct']} right, {r['incorrect']} wrong")


def cmd_reset(db_path: str):
    if Confirm.ask("Erase all attempts, favorites and streaks?", default=False):
        reset_all_progress(db_path)
        console.print("[green]Progress erased.[/green]")


def main():
    configure_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    first_run = not is_seeded(db_path)
    if first_run:
        console.print("[dim]Setting up for first use...[/dim]")
    seed_all(db_path)
    if first_run:
        console.print("[green]Ready![/green]\n")
    user_id = resolve_user_id(db_path)

    show_welcome()

    modes = {m.value.lower(): m for m in Mode}
    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="flashcards").strip().lower()
        try:
            if choice in modes:
                run_mode(db_path, modes[choice], user_id)
            elif choice == "new":
                cmd_new(db_path, user_id)
            elif choice == "delete":
                cmd_delete(db_path, user_id)
            elif choice == "import":
                cmd_import(db_path, user_id)
            elif choice == "favorites":
                cmd_favorites(db_path, user_id)
            elif choice == "stats":
                cmd_stats(db_path, user_id)
            elif choice == "reset":
                cmd_reset(db_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Clear skies![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            log.exception("Command %s failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
