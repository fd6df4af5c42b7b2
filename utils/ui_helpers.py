import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

EMPTY_MESSAGE = "No books found in records."

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def print_list_result(books: List[Any], title: str = "📚 Catalog") -> None:
    """Print the catalog table in the current output mode.
    - plain: 'ID - Title by Author [qty, Status]' lines, or the empty-records message
    - json: JSON array of book dicts
    - rich: Rich table with a colored status column
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
        return

    if not books:
        print(EMPTY_MESSAGE)
        return

    if mode == "rich":
        table = Table(title=title, show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Qty", justify="right")
        table.add_column("Status")
        for b in books:
            style = "green" if b.is_available else "red"
            table.add_row(
                escape(b.id), escape(b.title), escape(b.author), str(b.quantity), f"[{style}]{b.status}[/]"
            )
        _console.print(table)
    else:
        for b in books:
            print(f"{b.id} - {b.title} by {b.author} [{b.quantity}, {b.status}]")


def print_stats_result(stats: Dict[str, Any]) -> None:
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Titles:[/] {stats['total_titles']}\n"
            f"[bold]Copies on shelf:[/] {stats['total_copies']}\n"
            f"[bold]Available titles:[/] {stats['available_titles']}\n"
            f"[bold]Out of stock titles:[/] {stats['out_of_stock_titles']}\n"
            f"[bold]Unique authors:[/] {stats['unique_authors']}"
        )
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        print(f"Titles: {stats['total_titles']}")
        print(f"Copies on shelf: {stats['total_copies']}")
        print(f"Available titles: {stats['available_titles']}")
        print(f"Out of stock titles: {stats['out_of_stock_titles']}")
        print(f"Unique authors: {stats['unique_authors']}")


def notify(message: str, kind: str = "success") -> None:
    """Show a one-shot success/error notification in the current output mode."""
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps({"type": kind, "message": message}, ensure_ascii=False))
    elif mode == "rich":
        border = "red" if kind == "error" else "green"
        _console.print(Panel.fit(escape(message), border_style=border))
    else:
        print(message)
