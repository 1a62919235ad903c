"""Interactive CLI application."""
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt, Confirm
from rich.table import Table

from synergo.backup import (
    default_backup_name, export_database, export_nomenclatures_csv, import_database,
)
from synergo.config import DEFAULT_DB_PATH, DEFAULT_QUIZ_SIZE
from synergo.db import init_db
from synergo.errors import SynergoError
from synergo.lists import (
    QUIZ, REVIEW, add_to_list, clear_list, get_list, remove_from_list,
)
from synergo.media import (
    add_annotation, add_tag, create_media, delete_media, find_existing_resource,
    get_all_media, get_media, remove_tag, sorted_annotations,
)
from synergo.models import IDENTIFICATION
from synergo.nomenclatures import (
    create_nomenclature, delete_nomenclature, get_all_nomenclatures, update_nomenclature,
)
from synergo.quiz import generate_quiz_questions, max_question_count
from synergo.search import (
    extract_category_tree, filter_by_category_prefix, filter_media, fuzzy_search,
)
from synergo.session import QuizSession
from synergo.stats import collection_stats, get_grade, get_grade_color

console = Console()

EXIT_WORDS = ("q", "menu")
LIST_TITLES = {REVIEW: "Review list", QUIZ: "Quiz list"}


class SessionExitRequested(Exception):
    """Raised when the user types 'q' or 'menu' inside a running session."""


def session_prompt(message: str, **kwargs) -> str:
    answer = Prompt.ask(message, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def configure_logging(level: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def show_welcome():
    console.print(Panel(
        "[bold]Synergo[/bold]\n[dim]Media tagging and vocabulary training[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("browse", "Search the catalog"),
        ("add", "Add a resource"),
        ("tag", "Tag or annotate a resource"),
        ("delete", "Delete a resource"),
        ("vocab", "Manage nomenclatures"),
        ("review", "Review list"),
        ("quizlist", "Quiz list"),
        ("quiz", "Take a quiz"),
        ("stats", "Collection statistics"),
        ("export", "Back up the database"),
        ("import", "Restore a backup"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def print_media_table(items: list, title: str = "Resources") -> None:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Type")
    table.add_column("Title", style="cyan")
    table.add_column("Tags")
    for item in items:
        table.add_row(item.id, item.type, item.title, ", ".join(item.labels))
    console.print(table)


def render_question(number: int, total: int, question) -> list[str]:
    """Print a question and return its options in display order."""
    if question.type == IDENTIFICATION:
        media = question.media
        body = f"[bold]{media.title}[/bold]\n[dim]{media.src}[/dim]"
        if media.description:
            body += f"\n{media.description}"
        body += "\n\nSelect [bold]all[/bold] the labels that apply."
    else:
        body = (f"[bold]{question.nomenclature.label}[/bold]\n\n"
                f"Which is its {question.type}?")
    console.print(Panel(body, title=f"Question {number}/{total}", border_style="cyan"))
    for i, option in enumerate(question.options, 1):
        console.print(f"  [cyan]{i})[/cyan] {option}")
    return list(question.options)


def _parse_selection(raw: str, options: list[str]) -> list[str]:
    picks = []
    for part in raw.replace(",", " ").split():
        index = int(part) - 1
        if not 0 <= index < len(options):
            raise ValueError(part)
        picks.append(options[index])
    return picks


def run_quiz_session(session: QuizSession):
    """Drive a quiz session to completion and return its result."""
    total = len(session.questions)
    while not session.is_completed:
        question = session.current_question
        options = render_question(session.current_index + 1, total, question)
        multiple = question.type == IDENTIFICATION
        hint = "Option numbers separated by spaces" if multiple else "Option number"
        raw = session_prompt(f"\n{hint} (s to skip)").strip().lower()
        if raw == "s":
            session.skip()
            console.print("[dim]Skipped.[/dim]\n")
            continue
        try:
            picks = _parse_selection(raw, options)
        except ValueError:
            console.print("[red]Invalid selection, try again.[/red]")
            continue
        if not picks or (not multiple and len(picks) != 1):
            console.print("[red]Invalid selection, try again.[/red]")
            continue
        correct = session.answer(picks if multiple else picks[0])
        if correct:
            console.print("[green]Correct![/green]")
        else:
            expected = question.correct_answers if multiple else (question.correct_answer,)
            console.print(f"[red]Incorrect.[/red] Answer: [green]{'; '.join(expected)}[/green]")
        console.print()
        session.advance()
    return session.result()


def show_result(result) -> None:
    grade = get_grade(result.percentage)
    color = get_grade_color(grade)
    console.print(Panel(
        f"[bold]{result.total_score}/{result.total}[/bold]  "
        f"[{color}]{result.percentage}% ({grade})[/{color}]",
        title="Quiz results",
    ))
    table = Table()
    table.add_column("Question type")
    table.add_column("Correct", justify="right")
    for name, score in result.scores.items():
        if score.total:
            table.add_row(name, f"{score.correct}/{score.total}")
    console.print(table)


def cmd_browse(db_path: str):
    media = get_all_media(db_path)
    tree = extract_category_tree(media)
    if tree:
        console.print("[dim]Categories: " + ", ".join(sorted(tree)) + "[/dim]")
    query = Prompt.ask("Search", default="")
    media_type = Prompt.ask("Type", choices=["all", "video", "photo"], default="all")
    prefix = Prompt.ask("Tag prefix", default="")
    results = filter_by_category_prefix(filter_media(media, media_type=media_type), prefix)
    if query.strip():
        results = fuzzy_search(results, query)
    if not results:
        console.print("[yellow]No matching resources.[/yellow]")
        return
    print_media_table(results, title=f"{len(results)} resource(s)")


def cmd_add(db_path: str):
    title = Prompt.ask("Title")
    src = Prompt.ask("File name or URL")
    existing = find_existing_resource(db_path, title=title, src=src)
    if existing:
        console.print(f"[yellow]Similar resource already exists: {existing.title} ({existing.id})[/yellow]")
        if not Confirm.ask("Add anyway?", default=False):
            return
    description = Prompt.ask("Description", default="")
    item = create_media(db_path, title=title, src=src, description=description)
    console.print(f"[green]Added {item.type} {item.id}[/green]")


def cmd_tag(db_path: str):
    media_id = Prompt.ask("Resource ID")
    item = get_media(db_path, media_id)
    if item is None:
        console.print(f"[red]Resource not found: {media_id}[/red]")
        return
    actions = ["add", "remove"] + (["annotate"] if item.type == "video" else [])
    action = Prompt.ask("Action", choices=actions, default="add")
    if action == "annotate":
        seconds = float(Prompt.ask("Time (seconds)"))
        label = Prompt.ask("Label")
        item = add_annotation(db_path, media_id, seconds, label)
        for ann in sorted_annotations(item):
            console.print(f"  [dim]{ann.time:8.2f}s[/dim] {ann.label}")
        return
    tag = Prompt.ask("Tag")
    if action == "add":
        item = add_tag(db_path, media_id, tag)
    else:
        item = remove_tag(db_path, media_id, tag)
    console.print(f"[green]Tags: {', '.join(item.tags) or '-'}[/green]")


def cmd_delete(db_path: str):
    media_id = Prompt.ask("Resource ID")
    if not Confirm.ask(f"Delete {media_id}?", default=False):
        return
    if delete_media(db_path, media_id):
        console.print("[green]Resource deleted.[/green]")
    else:
        console.print(f"[red]Resource not found: {media_id}[/red]")


def cmd_vocab(db_path: str):
    nomenclatures = get_all_nomenclatures(db_path)
    table = Table(title="Nomenclatures")
    table.add_column("Label", style="cyan")
    table.add_column("Description")
    table.add_column("Interpretation")
    for n in nomenclatures:
        table.add_row(n.label, n.description, n.interpretation)
    console.print(table)

    action = Prompt.ask("Action", choices=["add", "edit", "delete", "back"], default="back")
    if action == "back":
        return
    if action == "add":
        entry = create_nomenclature(
            db_path,
            label=Prompt.ask("Label"),
            description=Prompt.ask("Description", default=""),
            interpretation=Prompt.ask("Interpretation", default=""),
        )
        console.print(f"[green]Added {entry.label}[/green]")
        return

    by_label = {n.label.lower(): n for n in nomenclatures}
    entry = by_label.get(Prompt.ask("Label").strip().lower())
    if entry is None:
        console.print("[red]No such nomenclature.[/red]")
        return
    if action == "edit":
        update_nomenclature(
            db_path, entry.id,
            description=Prompt.ask("Description", default=entry.description),
            interpretation=Prompt.ask("Interpretation", default=entry.interpretation),
        )
        console.print("[green]Saved.[/green]")
    else:
        delete_nomenclature(db_path, entry.id)
        console.print("[green]Deleted.[/green]")


def cmd_list(db_path: str, list_name: str):
    items = get_list(db_path, list_name)
    if items:
        print_media_table(items, title=LIST_TITLES[list_name])
    else:
        console.print(f"[yellow]{LIST_TITLES[list_name]} is empty.[/yellow]")
    action = Prompt.ask("Action", choices=["add", "remove", "clear", "back"], default="back")
    if action == "add":
        media_id = Prompt.ask("Resource ID")
        if add_to_list(db_path, list_name, media_id):
            console.print("[green]Added.[/green]")
        else:
            console.print("[yellow]Already in the list.[/yellow]")
    elif action == "remove":
        if remove_from_list(db_path, list_name, Prompt.ask("Resource ID")):
            console.print("[green]Removed.[/green]")
        else:
            console.print("[yellow]Not in the list.[/yellow]")
    elif action == "clear" and Confirm.ask("Clear the whole list?", default=False):
        clear_list(db_path, list_name)
        console.print("[green]List cleared.[/green]")


def cmd_quiz(db_path: str):
    items = get_list(db_path, QUIZ)
    nomenclatures = get_all_nomenclatures(db_path)
    available = max_question_count(items, nomenclatures)
    if available == 0:
        console.print("[yellow]No questions available. Add tagged resources to the quiz list.[/yellow]")
        return
    count = IntPrompt.ask(
        f"Number of questions (max {available})", default=min(DEFAULT_QUIZ_SIZE, available),
    )
    count = max(1, min(count, available))
    questions = generate_quiz_questions(items, nomenclatures, count)
    if not questions:
        console.print("[yellow]No questions available![/yellow]")
        return
    console.print(f"\n[bold]Quiz:[/bold] {len(questions)} questions [dim](q to quit)[/dim]\n")
    result = run_quiz_session(QuizSession(questions))
    show_result(result)


def cmd_stats(db_path: str):
    stats = collection_stats(get_all_media(db_path), get_all_nomenclatures(db_path))
    types = stats["type_distribution"]
    console.print(Panel(
        f"Media: [bold]{stats['total_media']}[/bold] "
        f"({types.get('video', 0)} videos, {types.get('photo', 0)} photos)  |  "
        f"Nomenclatures: [bold]{stats['total_nomenclatures']}[/bold] "
        f"({stats['usage_rate']}% in use)\n"
        f"Tags: [bold]{stats['total_tags']}[/bold] "
        f"(avg {stats['avg_tags_per_media']} per media)  |  "
        f"Annotations: [bold]{stats['total_annotations']}[/bold] "
        f"(avg {stats['avg_annotations_per_video']} per video)",
        title="Statistics", border_style="blue",
    ))
    if stats["most_used_tags"]:
        table = Table(title="Most used tags")
        table.add_column("Tag", style="cyan")
        table.add_column("Uses", justify="right")
        for tag, count in stats["most_used_tags"]:
            table.add_row(tag, str(count))
        console.print(table)
    if stats["unused_nomenclatures"]:
        labels = ", ".join(n.label for n in stats["unused_nomenclatures"])
        console.print(f"[dim]Unused: {labels}[/dim]")


def cmd_export(db_path: str):
    file_path = Prompt.ask("Backup file", default=default_backup_name())
    if file_path.lower().endswith(".csv"):
        count = export_nomenclatures_csv(db_path, file_path)
        console.print(f"[green]Exported {count} nomenclatures → {file_path}[/green]")
        return
    data = export_database(db_path, file_path)
    console.print(f"[green]Exported {len(data['media'])} resources → {file_path}[/green]")


def cmd_import(db_path: str):
    file_path = Prompt.ask("Backup file")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    if not Confirm.ask("This replaces the current database. Continue?", default=False):
        return
    counts = import_database(db_path, file_path)
    console.print(f"[green]Imported {counts['media']} resources, "
                  f"{counts['nomenclatures']} nomenclatures[/green]")


COMMANDS = {
    "browse": cmd_browse,
    "add": cmd_add,
    "tag": cmd_tag,
    "delete": cmd_delete,
    "vocab": cmd_vocab,
    "review": lambda db_path: cmd_list(db_path, REVIEW),
    "quizlist": lambda db_path: cmd_list(db_path, QUIZ),
    "quiz": cmd_quiz,
    "stats": cmd_stats,
    "export": cmd_export,
    "import": cmd_import,
}


def main():
    configure_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="browse").strip().lower()
        if choice in ("quit", "exit", "q"):
            console.print("[dim]Bye![/dim]")
            break
        command = COMMANDS.get(choice)
        if command is None:
            console.print("[red]Unknown command. Try again.[/red]")
            continue
        try:
            command(db_path)
        except SessionExitRequested:
            console.print("[dim]Back to menu.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except SynergoError as e:
            console.print(f"[red]Error: {e}[/red]")
        except ValueError as e:
            console.print(f"[red]Invalid input: {e}[/red]")


if __name__ == "__main__":
    main()
