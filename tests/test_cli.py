import json
from unittest.mock import MagicMock

from typer.testing import CliRunner

from main import app

runner = CliRunner()


def test_list_books(lib):
    result = runner.invoke(app, ["list"], obj=lib)
    assert result.exit_code == 0
    assert "B-101 - The Great Gatsby by F. Scott Fitzgerald [5, Available]" in result.stdout
    assert "B-103 - Introduction to Algorithms by Thomas H. Cormen [0, Out of Stock]" in result.stdout


def test_list_empty_catalog(empty_lib):
    result = runner.invoke(app, ["list"], obj=empty_lib)
    assert result.exit_code == 0
    assert "No books found in records." in result.stdout


def test_list_json_output(lib):
    result = runner.invoke(app, ["--output", "json", "list"], obj=lib)
    assert result.exit_code == 0
    payload = json.loads(result.stdout.strip().splitlines()[-1])
    assert [row["id"] for row in payload] == ["B-101", "B-102", "B-103", "B-104"]
    assert payload[2]["status"] == "Out of Stock"


def test_list_rich_output(lib):
    result = runner.invoke(app, ["-o", "rich", "list"], obj=lib)
    assert result.exit_code == 0
    assert "B-102" in result.stdout
    assert "B-103" in result.stdout


def test_search(lib):
    result = runner.invoke(app, ["search", "clean"], obj=lib)
    assert result.exit_code == 0
    assert "B-102 - Clean Code" in result.stdout
    assert "Gatsby" not in result.stdout


def test_search_no_match(lib):
    result = runner.invoke(app, ["search", "tolkien"], obj=lib)
    assert "No books found in records." in result.stdout


def test_add_book_success(lib):
    result = runner.invoke(app, ["add", "B-105", "Refactoring", "Martin Fowler", "4"], obj=lib)
    assert result.exit_code == 0
    assert "Success: New book added to library." in result.stdout
    assert lib.find_book("B-105").quantity == 4


def test_add_duplicate(lib):
    result = runner.invoke(app, ["add", "B-101", "Gatsby Again", "Someone", "1"], obj=lib)
    assert "Error: Book ID already exists!" in result.stdout
    assert len(lib) == 4


def test_add_invalid_quantity(lib):
    result = runner.invoke(app, ["add", "B-106", "Title", "Author", "many"], obj=lib)
    assert "Error: Quantity must be a non-negative whole number." in result.stdout
    assert lib.find_book("B-106") is None


def test_issue_success(lib):
    result = runner.invoke(app, ["issue", "B-102", "Alice"], obj=lib)
    assert result.exit_code == 0
    assert "Success: Issued 'Clean Code' to Alice." in result.stdout
    assert lib.find_book("B-102").quantity == 1


def test_issue_out_of_stock(lib):
    result = runner.invoke(app, ["issue", "B-103", "Alice"], obj=lib)
    assert "Error: Book is currently out of stock." in result.stdout
    assert lib.find_book("B-103").quantity == 0


def test_issue_not_found(lib):
    result = runner.invoke(app, ["issue", "B-999", "Alice"], obj=lib)
    assert "Error: Book ID not found." in result.stdout


def test_return_success(lib):
    result = runner.invoke(app, ["return", "B-103"], obj=lib)
    assert "Success: Book returned safely." in result.stdout
    assert lib.find_book("B-103").quantity == 1


def test_delete_success_and_missing(lib):
    result = runner.invoke(app, ["delete", "B-102"], obj=lib)
    assert "Success: Book entry deleted." in result.stdout

    result = runner.invoke(app, ["delete", "B-102"], obj=lib)
    assert "Error: Could not find book to delete." in result.stdout
    assert len(lib) == 3


def test_error_notification_json(lib):
    result = runner.invoke(app, ["-o", "json", "issue", "B-103", "Alice"], obj=lib)
    payload = json.loads(result.stdout.strip().splitlines()[-1])
    assert payload == {"type": "error", "message": "Error: Book is currently out of stock."}


def test_stats(lib):
    result = runner.invoke(app, ["stats"], obj=lib)
    assert result.exit_code == 0
    assert "Titles: 4" in result.stdout
    assert "Out of stock titles: 1" in result.stdout


def test_commands_build_a_seeded_catalog_by_default():
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "B-104 - Design Patterns" in result.stdout


def test_shell_scenario(lib):
    keystrokes = "\n".join([
        "3", "B-103", "Alice",   # issue: out of stock
        "4", "B-103",            # return
        "3", "B-103", "Alice",   # issue: succeeds
        "5", "B-102", "y",       # delete Clean Code
        "0",
    ]) + "\n"
    result = runner.invoke(app, ["shell"], obj=lib, input=keystrokes)
    assert result.exit_code == 0
    assert "Error: Book is currently out of stock." in result.stdout
    assert "Success: Book returned safely." in result.stdout
    assert "Success: Issued 'Introduction to Algorithms' to Alice." in result.stdout
    assert "Success: Book entry deleted." in result.stdout
    assert lib.find_book("B-103").quantity == 0
    assert len(lib.list_books()) == 3


def test_shell_delete_cancelled(lib):
    result = runner.invoke(app, ["shell"], obj=lib, input="5\nB-101\nn\n0\n")
    assert result.exit_code == 0
    assert "Delete cancelled." in result.stdout
    assert lib.find_book("B-101") is not None


def test_shell_add_form(lib):
    result = runner.invoke(app, ["shell"], obj=lib, input="2\nB-200\nDune\nFrank Herbert\n2\n0\n")
    assert result.exit_code == 0
    assert "Success: New book added to library." in result.stdout
    assert lib.list_books()[-1].id == "B-200"


def test_serve_command(monkeypatch):
    run_mock = MagicMock()
    open_mock = MagicMock()
    monkeypatch.setattr("main.subprocess.run", run_mock)
    monkeypatch.setattr("main.webbrowser.open", open_mock)

    result = runner.invoke(app, ["serve", "--port", "9001"])
    assert result.exit_code == 0
    assert "Starting web UI on" in result.stdout
    open_mock.assert_not_called()
    args = run_mock.call_args[0][0]
    assert "uvicorn" in args
    assert "api:app" in args
    assert args[args.index("--port") + 1] == "9001"
    assert "--reload" not in args


def test_add_superscript_quantity(lib):
    result = runner.invoke(app, ["add", "B-777", "Title", "Author Name", "²"], obj=lib)
    assert result.exit_code == 0
    assert "Error: Quantity must be a non-negative whole number." in result.stdout
    assert lib.find_book("B-777") is None
