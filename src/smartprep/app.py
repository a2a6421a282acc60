"""Interactive CLI application."""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from smartprep.auth import LOGIN_DELAY, get_current_user, login, logout
from smartprep.config import Settings, load_settings
from smartprep.dashboard import format_date, format_size_kb, get_dashboard_stats, get_type_color
from smartprep.exceptions import ServiceError
from smartprep.export import export_generation, option_letter
from smartprep.generations import clear_generations, create_generation, list_generations
from smartprep.generator import GeminiClient
from smartprep.ingest import (
    UPLOAD_DELAY, RawUpload, TextExtractor, delete_file, get_extractor, get_file,
    list_files, upload_file,
)
from smartprep.models import (
    ContentType, Difficulty, FlashcardItem, GeneratedContent, GenerationConfig,
    MCQItem, QAItem, User, expected_item_tag,
)
from smartprep.storage import SqliteStorage, Storage

console = Console()
logger = logging.getLogger(__name__)

EXIT_WORDS = ("q", "menu")
MIN_COUNT, MAX_COUNT = 1, 20


class SessionExitRequested(Exception):
    """Raised when the user types q/menu inside a session prompt."""
    pass


@dataclass
class AppState:
    store: Storage
    client: GeminiClient
    extractor: TextExtractor
    login_delay: float = LOGIN_DELAY
    upload_delay: float = UPLOAD_DELAY
    export_dir: str = "."
    user: Optional[User] = None


def session_prompt(prompt: str, **kwargs) -> str:
    if kwargs.get("choices") is not None:
        kwargs["choices"] = [*kwargs["choices"], *EXIT_WORDS]
    answer = Prompt.ask(prompt, **kwargs)
    if answer is not None and answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: Optional[list] = None, default: Optional[int] = None) -> int:
    kwargs = {}
    if choices is not None:
        kwargs["choices"] = choices
        kwargs["show_choices"] = False
    if default is not None:
        kwargs["default"] = str(default)
    return int(session_prompt(prompt, **kwargs))


# --- Screens ---

def show_welcome():
    console.print(Panel(
        "[bold]Turn Documents into Study Material[/bold]\n"
        "[dim]Upload your notes, textbooks, or PDFs and generate MCQs, flashcards, "
        "and practice questions.[/dim]",
        title="SmartPrep", border_style="blue",
    ))


def show_landing(state: AppState) -> Optional[User]:
    """Sign-in screen. Returns the signed-in user, or None to quit."""
    show_welcome()
    while True:
        choice = Prompt.ask(
            "\n[bold]signin[/bold], [bold]signup[/bold] or [bold]quit[/bold]",
            choices=["signin", "signup", "quit"], default="signin",
        )
        if choice == "quit":
            return None
        email = Prompt.ask("Email address")
        try:
            with console.status("Signing in..."):
                user = login(state.store, email, delay=state.login_delay)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            continue
        console.print(f"[green]Welcome, {user.name}![/green]")
        return user


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("upload", "Upload a document"),
        ("generate", "Generate study material"),
        ("view", "View a generated set"),
        ("practice", "Practise a generated set"),
        ("export", "Save a set as Markdown"),
        ("delete", "Delete a document"),
        ("clear", "Clear all generated sets"),
        ("logout", "Sign out"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<10}[/cyan] {desc}")


def show_dashboard(state: AppState):
    stats = get_dashboard_stats(state.store)
    role = f" [dim]({state.user.role.value.lower()})[/dim]" if state.user else ""
    name = state.user.name if state.user else ""
    console.print(Panel(
        f"Total Uploads: [bold]{stats['total_uploads']}[/bold]  |  "
        f"Generated Sets: [bold]{stats['generated_sets']}[/bold]  |  "
        f"Items: [bold]{stats['total_items']}[/bold]",
        title=f"Dashboard: {name}{role}", border_style="blue",
    ))

    files = list_files(state.store)
    table = Table(title="Recent Files")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Uploaded")
    for i, f in enumerate(files, 1):
        table.add_row(str(i), f.name, format_size_kb(f.size), format_date(f.upload_date))
    if files:
        console.print(table)
    else:
        console.print("[dim]No files uploaded yet.[/dim]")

    generations = list_generations(state.store)
    table = Table(title="Generated Content")
    table.add_column("#", justify="right")
    table.add_column("Set")
    table.add_column("Items", justify="right")
    table.add_column("Difficulty")
    table.add_column("Created")
    for i, g in enumerate(generations, 1):
        color = get_type_color(g.type)
        table.add_row(
            str(i), f"[{color}]{g.type.label} Set[/{color}]", str(len(g.items)),
            g.difficulty.value, format_date(g.created_at),
        )
    if generations:
        console.print(table)
    else:
        console.print("[dim]No study material generated yet.[/dim]")


def pick_record(records: list, label: str):
    """Ask for a 1-based row number from the dashboard tables."""
    if not records:
        console.print(f"[yellow]No {label} available.[/yellow]")
        return None
    number = session_int_prompt(
        f"Select {label} (1-{len(records)})",
        choices=[str(i) for i in range(1, len(records) + 1)],
    )
    return records[number - 1]


# --- Rendering ---

def render_item(number: int, item) -> None:
    if isinstance(item, MCQItem):
        lines = [f"[bold]{item.question}[/bold]", ""]
        for i, opt in enumerate(item.options):
            if opt == item.correct_answer:
                lines.append(f"  [green]{option_letter(i)}. {opt} ✔[/green]")
            else:
                lines.append(f"  {option_letter(i)}. {opt}")
        if item.explanation:
            lines += ["", f"[dim]Explanation: {item.explanation}[/dim]"]
        body = "\n".join(lines)
    elif isinstance(item, QAItem):
        body = f"[bold]{item.question}[/bold]\n\n[green]Model Answer:[/green] {item.answer}"
        if item.points:
            body += "\n" + "\n".join(f"  • {p}" for p in item.points)
    elif isinstance(item, FlashcardItem):
        body = f"[dim]Front[/dim]\n[bold]{item.front}[/bold]\n\n[dim]Back[/dim]\n{item.back}"
    else:
        raise TypeError(f"Unsupported item: {type(item).__name__}")
    console.print(Panel(body, title=f"Q{number} [dim]{item.type}[/dim]", border_style="cyan"))


def render_generation(generation: GeneratedContent) -> None:
    console.print(f"\n[bold]Generated Results[/bold] — {generation.type.label} Set, "
                  f"{len(generation.items)} items, {generation.difficulty.value}\n")
    if not generation.items:
        console.print("[yellow]The generator returned no items for this request.[/yellow]")
    for number, item in enumerate(generation.items, 1):
        render_item(number, item)


# --- Practice sessions ---

def run_quiz_session(items: list) -> tuple[int, int]:
    questions = [i for i in items if isinstance(i, MCQItem)]
    if not questions:
        console.print("[yellow]No questions available![/yellow]")
        return 0, 0
    correct = 0
    console.print(f"\n[bold]Quiz[/bold] — {len(questions)} questions\n")
    for n, q in enumerate(questions, 1):
        console.print(f"[bold]Q{n}.[/bold] {q.question}\n")
        letters = [option_letter(i).lower() for i in range(len(q.options))]
        for letter, opt in zip(letters, q.options):
            console.print(f"  [cyan]{letter})[/cyan] {opt}")
        answer = session_prompt("\nYour answer", choices=letters)
        chosen = q.options[letters.index(answer.strip().lower())]
        if chosen == q.correct_answer:
            console.print("[green]Correct![/green]")
            correct += 1
        else:
            console.print(f"[red]Incorrect.[/red] Answer: [green]{q.correct_answer}[/green]")
        if q.explanation:
            console.print(f"[dim]{q.explanation}[/dim]")
        console.print()
    console.print(f"[bold]Score: {correct}/{len(questions)} ({correct/len(questions)*100:.0f}%)[/bold]\n")
    return correct, len(questions)


def run_flashcard_session(items: list) -> int:
    cards = [i for i in items if isinstance(i, FlashcardItem)]
    if not cards:
        console.print("[yellow]No flashcards in this set![/yellow]")
        return 0
    console.print(f"\n[bold]Flashcard Session[/bold] — {len(cards)} cards\n")
    for n, card in enumerate(cards, 1):
        console.print(Panel(card.front, title=f"Card {n}/{len(cards)}", border_style="cyan"))
        session_prompt("[dim]Press Enter to reveal answer[/dim]", default="", show_default=False)
        console.print(Panel(card.back, border_style="green"))
    return len(cards)


def run_qa_session(items: list) -> int:
    questions = [i for i in items if isinstance(i, QAItem)]
    if not questions:
        console.print("[yellow]No questions available![/yellow]")
        return 0
    for n, q in enumerate(questions, 1):
        console.print(Panel(q.question, title=f"Q{n}/{len(questions)}", border_style="cyan"))
        session_prompt("[dim]Think it through, then press Enter for the model answer[/dim]",
                       default="", show_default=False)
        body = q.answer
        if q.points:
            body += "\n" + "\n".join(f"  • {p}" for p in q.points)
        console.print(Panel(body, border_style="green"))
    return len(questions)


def practice_generation(generation: GeneratedContent):
    tag = expected_item_tag(generation.type)
    if tag == "MCQ":
        run_quiz_session(list(generation.items))
    elif tag == "QA":
        run_qa_session(list(generation.items))
    elif tag == "FLASHCARD":
        run_flashcard_session(list(generation.items))
    else:
        raise ValueError(f"No practice mode for {tag}")


# --- Commands ---

def cmd_upload(state: AppState):
    """Step 1 of the wizard. Returns the new document, or None on failure."""
    file_path = session_prompt("File path (.txt, .pdf, .docx)")
    if not Path(file_path).is_file():
        console.print(f"[red]File not found: {file_path}[/red]")
        return None
    try:
        upload = RawUpload.from_path(file_path)
        with console.status("Extracting text..."):
            document = upload_file(state.store, upload, state.extractor, delay=state.upload_delay)
    except (OSError, ServiceError) as e:
        logger.warning("Upload of %s failed: %s", file_path, e)
        console.print(f"[red]Failed to upload file. {e}[/red]")
        return None
    console.print(f"[green]Uploaded {document.name} ({len(document.content or '')} chars extracted)[/green]")
    return document


def prompt_generation_config() -> GenerationConfig:
    """Step 2 of the wizard."""
    content_type = session_prompt(
        "Content type", choices=[t.value for t in ContentType], default=ContentType.MCQ.value,
    )
    while True:
        try:
            count = session_int_prompt(f"Number of items ({MIN_COUNT}-{MAX_COUNT})", default=5)
        except ValueError:
            count = 0
        if MIN_COUNT <= count <= MAX_COUNT:
            break
        console.print(f"[red]Choose between {MIN_COUNT} and {MAX_COUNT} items.[/red]")
    difficulty = session_prompt(
        "Difficulty", choices=[d.value for d in Difficulty], default=Difficulty.MEDIUM.value,
    )
    return GenerationConfig(
        content_type=ContentType(content_type), count=count, difficulty=Difficulty(difficulty),
    )


def cmd_generate(state: AppState, document=None) -> Optional[GeneratedContent]:
    console.print(Panel("1. Upload  →  2. Configure  →  3. Results", title="Generate", border_style="blue"))
    while document is None:
        files = list_files(state.store)
        source = "upload"
        if files:
            source = session_prompt("Use a new upload or an existing file?",
                                    choices=["upload", "existing"], default="upload")
        if source == "existing":
            document = pick_record(files, "file")
        else:
            document = cmd_upload(state)
    console.print(f"[cyan]Source: {document.name}[/cyan]")

    while True:
        config = prompt_generation_config()
        try:
            with console.status(f"Generating {config.count} {config.content_type.label} items..."):
                generation = create_generation(state.store, state.client, document, config)
        except ServiceError as e:
            console.print(f"[red]{e}[/red]")
            again = session_prompt("Try again?", choices=["y", "n"], default="y")
            if again == "n":
                return None
            continue
        break

    render_generation(generation)
    if generation.items and session_prompt("Practise now?", choices=["y", "n"], default="n") == "y":
        practice_generation(generation)
    return generation


def cmd_view(state: AppState):
    generation = pick_record(list_generations(state.store), "set")
    if generation:
        render_generation(generation)


def cmd_practice(state: AppState):
    generation = pick_record(list_generations(state.store), "set")
    if generation:
        practice_generation(generation)


def cmd_export(state: AppState):
    generation = pick_record(list_generations(state.store), "set")
    if generation:
        path = export_generation(generation, state.export_dir, get_file(state.store, generation.file_id))
        console.print(f"[green]Saved {path}[/green]")


def cmd_delete(state: AppState):
    document = pick_record(list_files(state.store), "file")
    if document is None:
        return
    confirm = session_prompt(f"Delete {document.name}?", choices=["y", "n"], default="n")
    if confirm == "y":
        delete_file(state.store, document.id)
        console.print(f"[green]Deleted {document.name}[/green]")


def cmd_clear(state: AppState):
    confirm = session_prompt("Delete all generated sets?", choices=["y", "n"], default="n")
    if confirm == "y":
        clear_generations(state.store)
        console.print("[green]Generated sets cleared.[/green]")


def build_state(settings: Settings) -> AppState:
    delays = settings.simulate_latency
    return AppState(
        store=SqliteStorage(settings.db_path),
        client=GeminiClient(settings.api_key, model=settings.model,
                            max_source_chars=settings.max_source_chars),
        extractor=get_extractor(settings.extractor),
        login_delay=LOGIN_DELAY if delays else 0,
        upload_delay=UPLOAD_DELAY if delays else 0,
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    state = build_state(settings)
    if not settings.api_key:
        console.print("[yellow]GEMINI_API_KEY is not set; generation will be unavailable.[/yellow]")

    state.user = get_current_user(state.store)
    commands = {
        "upload": cmd_upload,
        "generate": cmd_generate,
        "view": cmd_view,
        "practice": cmd_practice,
        "export": cmd_export,
        "delete": cmd_delete,
        "clear": cmd_clear,
    }

    while True:
        if state.user is None:
            state.user = show_landing(state)
            if state.user is None:
                console.print("[dim]Happy studying![/dim]")
                break
        show_dashboard(state)
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="generate").strip().lower()
        try:
            if choice in commands:
                commands[choice](state)
            elif choice == "logout":
                logout(state.store)
                state.user = None
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Happy studying![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("[dim]Back to the dashboard.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command %s failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
