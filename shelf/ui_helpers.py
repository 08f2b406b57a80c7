import os
import json
from typing import List, Any
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from shelf.result import IssueReceipt

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "SHELF_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def _member_label(member: Any) -> str:
    label = f"{member.id} - {member.name}"
    if member.kind == "student":
        label += f" (Student ID: {member.student_id})"
    return label


def print_item_list(items: List[Any]) -> None:
    """Print the item list in the current output mode.
    - plain: 'ID - Title by Author [Status]' lines, or 'No items in library.'
    - json: JSON array of item dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not items:
        print("No items in library.")
        return

    if mode == "json":
        print(json.dumps([i.to_dict() for i in items], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Items", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Pages", justify="right")
        table.add_column("Status")
        for i in items:
            status = "[red]Issued[/]" if i.issued else "[green]Available[/]"
            table.add_row(str(i.id), escape(i.title), escape(i.author), str(i.page_count), status)
        _console.print(table)
    else:
        for i in items:
            print(f"{i.id} - {i.title} by {i.author} [{i.status}]")


def print_member_list(members: List[Any]) -> None:
    mode = get_output_mode()

    if not members:
        print("No members in library.")
        return

    if mode == "json":
        print(json.dumps([m.to_dict() for m in members], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="👥 Members", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Student ID", style="white")
        for m in members:
            student_id = m.student_id if m.kind == "student" else ""
            table.add_row(str(m.id), escape(m.name), escape(student_id))
        _console.print(table)
    else:
        for m in members:
            print(_member_label(m))


def print_item_details(item: Any) -> None:
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(item.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        _console.print(Panel.fit(
            f"[bold]ID:[/] {item.id}\n"
            f"[bold]Title:[/] {escape(item.title)}\n"
            f"[bold]Author:[/] {escape(item.author)}\n"
            f"[bold]Page Count:[/] {item.page_count}\n"
            f"[bold]Status:[/] {item.status}",
            title="🔍 Book Found",
            border_style="green",
        ))
    else:
        print("Book Found")
        print(f"ID: {item.id}")
        print(f"Title: {item.title}")
        print(f"Author: {item.author}")
        print(f"Page Count: {item.page_count}")
        print(f"Status: {item.status}")


def print_member_details(member: Any) -> None:
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(member.to_dict(), ensure_ascii=False))
        return

    fields = [("ID", str(member.id)), ("Name", member.name)]
    if member.kind == "student":
        fields.append(("Student ID", member.student_id))

    if mode == "rich":
        body = "\n".join(f"[bold]{label}:[/] {escape(value)}" for label, value in fields)
        _console.print(Panel.fit(body, title="🔍 Member Found", border_style="green"))
    else:
        print("Member Found")
        for label, value in fields:
            print(f"{label}: {value}")


def print_receipt(receipt: IssueReceipt) -> None:
    """Print the confirmation of a successful issue."""
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(receipt.model_dump(), ensure_ascii=False))
    elif mode == "rich":
        _console.print(Panel.fit(
            f"[bold]Book Title:[/] {escape(receipt.title)}\n"
            f"[bold]Member Name:[/] {escape(receipt.member_name)}\n"
            f"[bold]Loan Period:[/] {receipt.loan_days} days",
            title="🧾 Book Issued Successfully",
            border_style="green",
        ))
    else:
        print("Book Issued Successfully.")
        print(f"Book Title: {receipt.title}")
        print(f"Member Name: {receipt.member_name}")
        print(f"Loan Period: {receipt.loan_days} days.")
