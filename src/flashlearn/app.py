"""Interactive CLI application."""
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from flashlearn import config
from flashlearn.confidence import get_confidence_color, get_confidence_label, weakest_cards
from flashlearn.db import init_db
from flashlearn.errors import FlashlearnError
from flashlearn.generator import QUESTION_TYPES, build_test
from flashlearn.importer import import_file
from flashlearn.quiz import QuizRun, clamp_question_count, is_answer_correct, record_test_result, get_best_score
from flashlearn.seed import seed_all, is_seeded
from flashlearn.session import LearnSession, init_session
from flashlearn.sets import create_set, delete_set, find_set_id, list_sets, share_set

console = Console()
logger = logging.getLogger(__name__)

EXIT_WORDS = ("q", "menu")
OPTION_LETTERS = "abcdefgh"


class SessionExitRequested(Exception):
    """User asked to leave the current study session."""


def session_prompt(prompt: str, choices=None, **kwargs) -> str:
    if choices is not None:
        choices = list(choices) + [w for w in EXIT_WORDS if w not in choices]
    answer = Prompt.ask(prompt, choices=choices, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices=None, **kwargs) -> int:
    return int(session_prompt(prompt, choices=choices, **kwargs))


def show_welcome():
    console.print(Panel(
        "[bold]flashlearn[/bold]\n[dim]Flashcards with an adaptive learn mode[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("sets", "List your flashcard sets"),
        ("learn", "Adaptive learn mode"),
        ("test", "Practice test"),
        ("create", "Create a new set"),
        ("import", "Import a set from a file"),
        ("share", "Copy a set's share link"),
        ("delete", "Delete a set"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def confidence_bar(score: int) -> str:
    color = get_confidence_color(score)
    filled = int(score / 5)
    return f"[{color}]{'█' * filled}{'░' * (20 - filled)}[/{color}]"


def show_learn_header(session: LearnSession) -> None:
    score = session.aggregate_confidence()
    console.print(
        f"\n[bold]{session.title} - Learn Mode[/bold]  "
        f"Confidence: [bold]{score}%[/bold] {confidence_bar(score)}  "
        f"Streak: [bold]{session.state.streak}[/bold]"
    )


def show_settings(session: LearnSession) -> None:
    table = Table(title="Learning Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("On")
    for name in config.TOGGLE_KEYS:
        value = getattr(session.state.toggles, name)
        table.add_row(name, "[green]yes[/green]" if value else "[dim]no[/dim]")
    console.print(table)
    name = session_prompt("Toggle which setting (Enter to keep)", default="")
    if name in config.TOGGLE_KEYS:
        session.set_toggle(name, not getattr(session.state.toggles, name))


def handle_learn_command(session: LearnSession, text: str) -> bool:
    """Run a /command typed at a learn prompt. Returns True when handled."""
    command = text.strip().lower()
    if command == "/shuffle":
        session.shuffle()
        console.print("[green]Cards shuffled![/green]")
        return True
    if command == "/settings":
        show_settings(session)
        return True
    return False


def ask_learn_answer(session: LearnSession) -> bool | None:
    """Prompt for one card. Returns correctness, or None if a command ran."""
    card = session.current_card
    if session.state.toggles.typing_mode:
        typed = session_prompt("Type your answer")
        if handle_learn_command(session, typed):
            return None
        if not typed.strip():
            return None
        correct = session.check_typed_answer(typed)
        if correct:
            console.print("[green]Correct![/green]")
        else:
            console.print("[red]Not quite.[/red]")
        console.print(f"Correct answer: [bold]{card.definition}[/bold]")
        return correct

    reveal = session_prompt("[dim]Press Enter to show the answer[/dim]", default="")
    if handle_learn_command(session, reveal):
        return None
    console.print(Panel(escape(card.definition), border_style="green"))
    choice = session_prompt("Got it? (y = got it, n = still learning)", choices=["y", "n"])
    return choice == "y"


def run_learn_session(db_path: str, session: LearnSession) -> None:
    try:
        while True:
            show_learn_header(session)
            card = session.current_card
            console.print(Panel(
                f"[bold]{escape(card.term)}[/bold]",
                title="What is the definition?",
                subtitle=f"Card confidence: {card.confidence}%",
                border_style="cyan",
            ))
            image_url = session.image_url()
            if image_url:
                console.print(f"[dim]Image: {image_url}[/dim]")
            hint = session.hint()
            if hint:
                console.print(f"[italic dim]Hint: {hint}[/italic dim]")
            correct = ask_learn_answer(session)
            if correct is None:
                continue
            session.answer(correct)
            session.wait_for_advance()
    except SessionExitRequested:
        pass
    finally:
        session.close()
        config.save_mode_toggles(db_path, session.state.toggles)
    show_learn_summary(session)


def show_learn_summary(session: LearnSession) -> None:
    score = session.aggregate_confidence()
    color = get_confidence_color(score)
    console.print(
        f"\n  Session confidence: [bold]{score}%[/bold] {confidence_bar(score)} "
        f"[{color}]{get_confidence_label(score)}[/{color}]  |  "
        f"Correct answers: [bold]{session.state.correct_count}[/bold]"
    )
    weak = [c for c in weakest_cards(list(session.state.cards), limit=3) if c.confidence < 50]
    if weak:
        console.print("  [yellow]Keep practising:[/yellow] " + ", ".join(c.term for c in weak))


def run_test_session(db_path: str, set_id: str, title: str, cards: list) -> tuple[int, int]:
    console.print(f"\n[bold]{title} - Test[/bold]")
    typed = session_prompt("Question types (comma separated)", default=",".join(QUESTION_TYPES))
    question_types = [t.strip() for t in typed.split(",") if t.strip() in QUESTION_TYPES]
    if not question_types:
        console.print("[red]Please select at least one question type[/red]")
        return 0, 0
    count = clamp_question_count(
        session_int_prompt(f"Number of questions (max {min(len(cards), 40)})", default=str(min(len(cards), 10))),
        len(cards),
    )
    time_limit = session_int_prompt("Time limit in minutes (0 for no limit)", default="0")
    use_ai = session_prompt("Use AI to generate questions?", choices=["y", "n"], default="y") == "y"

    console.print("[dim]Making test...[/dim]")
    questions, source = build_test(cards, question_types, count, use_ai=use_ai)
    if use_ai and source == "local":
        console.print("[yellow]AI generation failed, using manual questions[/yellow]")
    run = QuizRun(questions=questions, time_limit_minutes=time_limit)

    for i, q in enumerate(questions, 1):
        if run.is_expired():
            console.print("[red]Time's up![/red]")
            break
        remaining = run.time_remaining()
        clock = f"  [dim]{int(remaining // 60)}:{int(remaining % 60):02d} left[/dim]" if remaining is not None else ""
        console.print(f"\n[bold]Q{i}/{len(questions)}.[/bold] {q.question_text}{clock}")
        if q.options:
            letters = OPTION_LETTERS[:len(q.options)]
            for letter, option in zip(letters, q.options):
                console.print(f"  [cyan]{letter})[/cyan] {option}")
            picked = session_prompt("Your answer", choices=list(letters))
            run.record(q.options[letters.index(picked)])
        else:
            run.record(session_prompt("Your answer", default=""))

    correct, total, _ = run.score()
    show_test_results(run)
    if total:
        record_test_result(db_path, set_id, correct, total)
    return correct, total


def show_test_results(run: QuizRun) -> None:
    correct, total, percentage = run.score()
    table = Table(title=f"Score: {correct}/{total} ({percentage}%)")
    table.add_column("#", justify="right")
    table.add_column("Question")
    table.add_column("Your answer")
    table.add_column("Correct answer", style="green")
    for i, q in enumerate(run.questions):
        answer = run.answers[i] if i < len(run.answers) else None
        ok = is_answer_correct(q, answer)
        table.add_row(
            str(i + 1), q.question_text,
            f"[green]{escape(answer)}[/green]" if ok else f"[red]{escape(answer or '(not answered)')}[/red]",
            q.correct_answer,
        )
    console.print(table)


def choose_set(db_path: str) -> str | None:
    ref = Prompt.ask("Set (title or id)")
    set_id = find_set_id(db_path, ref)
    if set_id is None:
        console.print("[red]Set not found[/red]")
    return set_id


def cmd_sets(db_path: str):
    sets = list_sets(db_path)
    if not sets:
        console.print("[yellow]No sets yet. Use 'create' or 'import'.[/yellow]")
        return
    table = Table(title="Your Sets")
    table.add_column("Id", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Cards", justify="right")
    table.add_column("Best test", justify="right")
    table.add_column("Public")
    for s in sets:
        best = get_best_score(db_path, s.id)
        table.add_row(
            s.id[:8], s.title, f"{s.card_count} {'card' if s.card_count == 1 else 'cards'}",
            f"{best}%" if best is not None else "-",
            "yes" if s.is_public else "",
        )
    console.print(table)


def cmd_learn(db_path: str):
    set_id = choose_set(db_path)
    if set_id is None:
        return
    session = LearnSession.start(
        db_path, set_id,
        toggles=config.load_mode_toggles(db_path),
        advance_delay=config.ADVANCE_DELAY,
    )
    console.print("[dim]/shuffle and /settings work at any prompt, q returns to the menu[/dim]")
    run_learn_session(db_path, session)


def cmd_test(db_path: str):
    set_id = choose_set(db_path)
    if set_id is None:
        return
    title, cards = init_session(db_path, set_id)
    try:
        run_test_session(db_path, set_id, title, cards)
    except SessionExitRequested:
        console.print("[dim]Test abandoned.[/dim]")


def cmd_create(db_path: str):
    title = Prompt.ask("Title")
    description = Prompt.ask("Description", default="")
    cards = []
    console.print("[dim]Enter cards; leave the term empty to finish.[/dim]")
    while True:
        term = Prompt.ask(f"Term {len(cards) + 1}", default="")
        if not term.strip():
            break
        definition = Prompt.ask("Definition")
        cards.append((term.strip(), definition.strip()))
    set_id = create_set(db_path, title, description, cards)
    console.print(f"[green]Created '{title}' with {len(cards)} cards ({set_id[:8]})[/green]")


def cmd_import(db_path: str):
    file_path = Prompt.ask("File path")
    try:
        result = import_file(db_path, file_path)
    except FileNotFoundError:
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    console.print(f"[green]Imported {result['count']} cards into '{result['title']}'[/green]")


def cmd_share(db_path: str):
    set_id = choose_set(db_path)
    if set_id is None:
        return
    url = share_set(db_path, set_id, config.SHARE_BASE_URL)
    console.print(f"[green]Set is now public.[/green] Link: [bold]{url}[/bold]")


def cmd_delete(db_path: str):
    set_id = choose_set(db_path)
    if set_id is None:
        return
    confirm = Prompt.ask("This will permanently delete the set and all its flashcards. Continue?",
                         choices=["y", "n"], default="n")
    if confirm == "y" and delete_set(db_path, set_id):
        console.print("[green]Set deleted.[/green]")


def setup_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    setup_logging()
    db_path = config.DEFAULT_DB_PATH
    init_db(db_path)
    first_run = not is_seeded(db_path)
    if first_run:
        console.print("[dim]Setting up for first use...[/dim]")
        seed_all(db_path)
        console.print("[green]Ready![/green]\n")

    show_welcome()
    commands = {
        "sets": cmd_sets, "learn": cmd_learn, "test": cmd_test, "create": cmd_create,
        "import": cmd_import, "share": cmd_share, "delete": cmd_delete,
    }

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="learn").strip().lower()
        try:
            if choice in commands:
                commands[choice](db_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Happy studying![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except FlashlearnError as e:
            logger.debug("Command %s failed", choice, exc_info=True)
            console.print(f"[red]{e}[/red]")
        except ValueError as e:
            console.print(f"[red]{e}[/red]")


if __name__ == "__main__":
    main()
