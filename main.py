import subprocess
import sys
import webbrowser
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from config import configure_logging, settings
from library import Library, create_library
from utils.messages import error_message, success_message
from utils.ui_helpers import notify, print_list_result, print_stats_result, set_output_mode
from utils.validators import BookIdValidator, QuantityValidator, TextValidator

console = Console()

app = typer.Typer(help=f"{settings.app_name} CLI")


def _get_library(ctx: typer.Context) -> Library:
    """The store lives on the click context so tests can hand one in via ``obj``."""
    if ctx.obj is None:
        ctx.obj = create_library()
    return ctx.obj


@app.callback()
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Global CLI options (output mode)."""
    configure_logging()
    if output:
        set_output_mode(output)
    _get_library(ctx)


# ------------------------- Form submission ------------------------- #
def submit_add(lib: Library, book_id: str, title: str, author: str, quantity: str) -> bool:
    book_id = BookIdValidator.normalize_id(book_id)
    if not BookIdValidator.is_valid_id(book_id):
        notify("Error: Book ID cannot be empty.", "error")
        return False
    if not TextValidator.validate_title(title):
        notify("Error: Title cannot be empty.", "error")
        return False
    if not TextValidator.validate_author(author):
        notify("Error: Please enter a valid author name.", "error")
        return False
    parsed = QuantityValidator.parse_quantity(quantity)
    if parsed is None:
        notify("Error: Quantity must be a non-negative whole number.", "error")
        return False

    result = lib.add_book(book_id, title.strip(), author.strip(), parsed)
    if not result.ok:
        notify(error_message(result.error), "error")
        return False
    notify(success_message("add", result.book))
    return True


def submit_issue(lib: Library, book_id: str, borrower: str) -> bool:
    if not TextValidator.validate_author(borrower):
        notify("Error: Please enter the student's name.", "error")
        return False
    result = lib.issue_book(BookIdValidator.normalize_id(book_id), borrower.strip())
    if not result.ok:
        notify(error_message(result.error), "error")
        return False
    notify(success_message("issue", result.book, borrower=borrower.strip()))
    return True


def submit_return(lib: Library, book_id: str) -> bool:
    result = lib.return_book(BookIdValidator.normalize_id(book_id))
    if not result.ok:
        notify(error_message(result.error), "error")
        return False
    notify(success_message("return", result.book))
    return True


def submit_delete(lib: Library, book_id: str) -> bool:
    result = lib.delete_book(BookIdValidator.normalize_id(book_id))
    if not result.ok:
        notify(error_message(result.error), "error")
        return False
    notify(success_message("delete", result.book))
    return True


# ------------------------- Commands ------------------------- #
@app.command("list")
def cli_list(ctx: typer.Context):
    """List every book in catalog order."""
    print_list_result(_get_library(ctx).list_books())


@app.command("search")
def cli_search(ctx: typer.Context, query: str = typer.Argument("", help="Text to look for in id, title or author")):
    """Filter the catalog by id, title or author (case-insensitive)."""
    books = _get_library(ctx).search_books(query)
    print_list_result(books, title=f"🔎 Results for '{escape(query)}'")


@app.command("add")
def cli_add(ctx: typer.Context, book_id: str, title: str, author: str, quantity: str):
    """Add a new book record."""
    submit_add(_get_library(ctx), book_id, title, author, quantity)


@app.command("issue")
def cli_issue(ctx: typer.Context, book_id: str, borrower: str):
    """Issue one copy of a book to a borrower."""
    submit_issue(_get_library(ctx), book_id, borrower)


@app.command("return")
def cli_return(ctx: typer.Context, book_id: str):
    """Return one copy of a book."""
    submit_return(_get_library(ctx), book_id)


@app.command("delete")
def cli_delete(ctx: typer.Context, book_id: str):
    """Delete a book record."""
    submit_delete(_get_library(ctx), book_id)


@app.command("stats")
def cli_stats(ctx: typer.Context):
    """Show catalog statistics."""
    print_stats_result(_get_library(ctx).get_statistics())


@app.command("shell")
def cli_shell(ctx: typer.Context):
    """Start the interactive menu; the catalog lives until you quit."""
    run_menu(_get_library(ctx))


@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from API_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", help="Port (default from API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
    open_browser: bool = typer.Option(False, "--open", help="Open the API docs in a browser"),
):
    """Start the HTTP API with uvicorn."""
    host = host or settings.api_host
    port = int(port or settings.api_port)
    url = f"http://{host}:{port}/docs"
    print(f"Starting web UI on {url}")
    if open_browser:
        webbrowser.open(url)

    args = [
        sys.executable,
        "-m", "uvicorn",
        "api:app",
        "--host", host,
        "--port", str(port),
    ]
    if reload:
        args.append("--reload")
    try:
        subprocess.run(args)
    except FileNotFoundError:
        print("Error: could not start uvicorn. Make sure it is installed in this environment.")


# ------------------------- Interactive menu ------------------------- #
def _refresh(lib: Library) -> None:
    print_list_result(lib.list_books())


def add_form(lib: Library) -> None:
    book_id = Prompt.ask("Book ID")
    title = Prompt.ask("Title")
    author = Prompt.ask("Author")
    quantity = Prompt.ask("Quantity", default="1")
    if submit_add(lib, book_id, title, author, quantity):
        _refresh(lib)


def issue_form(lib: Library) -> None:
    book_id = Prompt.ask("Book ID")
    borrower = Prompt.ask("Student name")
    if submit_issue(lib, book_id, borrower):
        _refresh(lib)


def return_form(lib: Library) -> None:
    book_id = Prompt.ask("Book ID")
    if submit_return(lib, book_id):
        _refresh(lib)


def delete_form(lib: Library) -> None:
    book_id = Prompt.ask("🔍 ID of the book to delete")
    book = lib.find_book(BookIdValidator.normalize_id(book_id))
    if book is not None:
        console.print(Panel(
            f"[bold]Title:[/] {escape(book.title)}\n"
            f"[bold]Author:[/] {escape(book.author)}\n"
            f"[bold]ID:[/] {escape(book.id)}",
            title="📚 Book to delete",
            border_style="yellow",
        ))
        if not Confirm.ask("🗑️ Delete this book?", default=False):
            console.print("[blue]🚫 Delete cancelled.[/]")
            return
    if submit_delete(lib, book_id):
        _refresh(lib)


def search_form(lib: Library) -> None:
    query = Prompt.ask("Search", default="")
    print_list_result(lib.search_books(query), title=f"🔎 Results for '{escape(query)}'")


def run_menu(lib: Library) -> None:
    """Simple interactive menu over a single catalog."""
    menu_items = [
        ("1", "List all books", "📚"),
        ("2", "Add a book", "➕"),
        ("3", "Issue a book", "📤"),
        ("4", "Return a book", "📥"),
        ("5", "Delete a book", "🗑️"),
        ("6", "Search", "🔎"),
        ("7", "Show statistics", "📊"),
        ("0", "Quit", "🚪"),
    ]
    actions = {
        "1": _refresh,
        "2": add_form,
        "3": issue_form,
        "4": return_form,
        "5": delete_form,
        "6": search_form,
        "7": lambda current: print_stats_result(current.get_statistics()),
    }

    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label, icon in menu_items:
        table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")
    panel = Panel(table, title=settings.app_name, border_style="cyan", box=box.HEAVY, padding=(1, 2))

    while True:
        console.print(panel)
        choice = Prompt.ask("Choose an option", choices=[key for key, _, _ in menu_items], default="1")
        if choice == "0":
            console.print("[green]Goodbye![/]")
            break
        actions[choice](lib)
        print()


def main() -> None:
    if len(sys.argv) > 1:
        app()
    else:
        configure_logging()
        run_menu(create_library())


if __name__ == "__main__":
    main()
