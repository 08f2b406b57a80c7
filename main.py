import logging
import sys
from typing import Optional, Tuple

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from shelf.config import settings
from shelf.library import Library
from shelf.result import ErrorKind, Result
from shelf.storage import LoadReport, load_catalog, save_catalog
from shelf.ui_helpers import (
    print_item_details,
    print_item_list,
    print_member_details,
    print_member_list,
    print_receipt,
    set_output_mode,
)
from shelf.validators import NumberValidator, TextValidator

APP_NAME = "Library CLI"

console = Console()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(levelname)s: %(name)s: %(message)s",
    )


# ------------------------- Catalog lifecycle ------------------------- #
def load_library() -> Tuple[Library, LoadReport]:
    """Create a library and fill it from the configured data files."""
    lib = Library()
    report = load_catalog(lib, settings.items_path, settings.members_path)
    for error in report.io_errors:
        print(f"Error: {error}")
    for error in report.errors:
        print(f"Skipped malformed record: {error}")
    return lib, report


def save_library(lib: Library, report: LoadReport) -> Result:
    """Save the catalog, leaving alone any data file that failed to load."""
    result = save_catalog(lib, settings.items_path, settings.members_path, skip=report.unreadable)
    for warning in result.warnings:
        print(f"Warning: {warning}")
    if result.ok:
        print("Data saved successfully.")
    else:
        print(f"Error: {result.error.message}")
    return result


def report_failure(result: Result) -> None:
    if result.kind is ErrorKind.ALREADY_ISSUED:
        print(f"Error: {result.error.message}")
    elif result.kind is ErrorKind.NOT_FOUND:
        print(result.error.message)
    else:
        print(f"Unexpected error: {result.error.message}")


def _warn_if_breaks_record(**fields: str) -> None:
    for name, value in fields.items():
        if TextValidator.breaks_record(value):
            print(f"Warning: {name} contains a comma and will not load back correctly.")


# --- Typer CLI Application ---
app = typer.Typer(help="Library CLI")


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global CLI options (e.g. output mode)."""
    configure_logging()
    if output:
        set_output_mode(output)


@app.command("list-items")
def cli_list_items():
    """List all items in the catalog."""
    lib, _ = load_library()
    print_item_list(lib.list_items())


@app.command("list-members")
def cli_list_members():
    """List all members."""
    lib, _ = load_library()
    print_member_list(lib.list_members())


@app.command("find-item")
def cli_find_item(item_id: int):
    """Find a book by ID and show its details."""
    lib, _ = load_library()
    result = lib.find_item(item_id)
    if result.ok:
        print_item_details(result.value)
    else:
        report_failure(result)


@app.command("find-member")
def cli_find_member(member_id: int):
    """Find a member by ID and show their details."""
    lib, _ = load_library()
    result = lib.find_member(member_id)
    if result.ok:
        print_member_details(result.value)
    else:
        report_failure(result)


@app.command("add-book")
def cli_add_book(item_id: int, title: str, author: str, pages: int):
    """Add a book with a caller-chosen ID."""
    if not TextValidator.validate_title(title):
        print("Error: Title cannot be empty.")
        return
    if not TextValidator.validate_author(author):
        print("Error: Invalid author.")
        return
    if pages <= 0:
        print("Error: Page count must be a positive number.")
        return
    _warn_if_breaks_record(title=title, author=author)
    lib, report = load_library()
    book = lib.add_book(item_id, title, author, pages)
    print(f"Book added: {book.title} by {book.author} (ID: {book.id})")
    save_library(lib, report)


@app.command("add-member")
def cli_add_member(
    name: str,
    student_id: Optional[str] = typer.Option(None, "--student-id", "-s", help="Register as a student member"),
):
    """Register a member; pass --student-id for a student member."""
    if not TextValidator.validate_name(name):
        print("Error: Invalid name.")
        return
    _warn_if_breaks_record(name=name, student_id=student_id or "")
    lib, report = load_library()
    if student_id is not None:
        member = lib.register_student(name, student_id)
    else:
        member = lib.register_member(name)
    print(f"Member added: {member.name} (ID: {member.id})")
    save_library(lib, report)


@app.command("issue")
def cli_issue(item_id: int, member_id: int):
    """Issue a book to a member."""
    lib, _ = load_library()
    result = lib.issue_book(item_id, member_id)
    if result.ok:
        print_receipt(result.value)
    else:
        report_failure(result)


@app.command("menu")
def cli_menu():
    """Start the interactive menu."""
    run_menu()


# ------------------------- Interactive menu ------------------------- #
def _ask_int(prompt: str, positive: bool = False) -> int:
    while True:
        raw = Prompt.ask(prompt)
        value = NumberValidator.parse_positive_int(raw) if positive else NumberValidator.parse_int(raw)
        if value is not None:
            return value
        console.print("[yellow]Please enter a valid number.[/]")


def _ask_text(prompt: str, validate) -> str:
    while True:
        value = Prompt.ask(prompt).strip()
        if validate(value):
            return value
        console.print("[yellow]Invalid value, please try again.[/]")


def add_book(lib: Library) -> None:
    item_id = _ask_int("Enter Book ID")
    title = _ask_text("Enter Title", TextValidator.validate_title)
    author = _ask_text("Enter Author", TextValidator.validate_author)
    pages = _ask_int("Enter Pages", positive=True)
    _warn_if_breaks_record(title=title, author=author)
    lib.add_book(item_id, title, author, pages)
    console.print("[green]Book added![/]")


def add_member(lib: Library) -> None:
    name = _ask_text("Enter Name", TextValidator.validate_name)
    _warn_if_breaks_record(name=name)
    member = lib.register_member(name)
    console.print(f"[green]Member added![/] ID: [bold]{member.id}[/]")


def add_student(lib: Library) -> None:
    name = _ask_text("Enter Name", TextValidator.validate_name)
    student_id = _ask_text("Enter Student ID", TextValidator.validate_title)
    _warn_if_breaks_record(name=name, student_id=student_id)
    member = lib.register_student(name, student_id)
    console.print(f"[green]Student added![/] ID: [bold]{member.id}[/]")


def issue(lib: Library) -> None:
    item_id = _ask_int("Enter Book ID")
    member_id = _ask_int("Enter Member ID")
    result = lib.issue_book(item_id, member_id)
    if result.ok:
        print_receipt(result.value)
    else:
        console.print(f"[bold red]Error:[/] {escape(result.error.message)}")


def find_item(lib: Library) -> None:
    result = lib.find_item(_ask_int("Enter Book ID"))
    if result.ok:
        print_item_details(result.value)
    else:
        console.print("[yellow]--- Book Not Found! ---[/]")


def find_member(lib: Library) -> None:
    result = lib.find_member(_ask_int("Enter Member ID"))
    if result.ok:
        print_member_details(result.value)
    else:
        console.print("[yellow]--- Member Not Found! ---[/]")


MENU_ITEMS = [
    ("1", "Add book", "➕", add_book),
    ("2", "Add member", "👤", add_member),
    ("3", "Add student member", "🎓", add_student),
    ("4", "Issue book", "📤", issue),
    ("5", "Find book", "🔎", find_item),
    ("6", "Find member", "🔎", find_member),
    ("7", "Display all items", "📚", lambda lib: print_item_list(lib.list_items())),
    ("8", "Display all members", "👥", lambda lib: print_member_list(lib.list_members())),
]


def run_menu():
    """Simple interactive menu for the library catalog."""
    def render_menu() -> None:
        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label, icon, _ in MENU_ITEMS:
            table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")
        table.add_row("[reverse]0[/]", "🚪 Exit")

        panel = Panel(
            table,
            title=f"{APP_NAME}",
            border_style="cyan",
            box=box.HEAVY,
            padding=(1, 2),
        )
        console.print(panel)

    console.print("[dim]Library System Starting...[/]")
    lib, report = load_library()
    if settings.seed_defaults:
        lib.seed_defaults()

    actions = {key: action for key, _, _, action in MENU_ITEMS}
    try:
        while True:
            render_menu()
            choice = Prompt.ask("Please choose an option", choices=[*actions, "0"], default="7").strip()
            if choice == "0":
                console.print("[green]Exiting...[/]")
                break
            actions[choice](lib)
            print()  # blank line between operations
    finally:
        console.print("[dim]Saving data before closing...[/]")
        save_library(lib, report)


def run():
    """Entry point: subcommands when arguments are given, the menu otherwise."""
    if len(sys.argv) > 1:
        app()
    else:
        configure_logging()
        run_menu()


if __name__ == "__main__":
    run()
