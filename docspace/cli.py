"""Typer-based CLI for the docspace document workspace."""

from __future__ import annotations

import asyncio
import json
import sys
from contextlib import contextmanager
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from . import __version__, config, documents, event_log
from .cli_groups import docs_grp, logs_grp, root_grp
from .config_manager import TomlConfigStore
from .errors import WorkspaceError
from .models import TreeItem
from .mutations import move_entry, rename_entry
from .root_resolver import change_root_interactively, reset_root, resolve_root, set_root
from .search import search as search_workspace
from .tree import build_tree, collect_documents, flatten_tree

console = Console()

app = typer.Typer(
    help="📚 Docspace — a local folder of Markdown documents, with tree and search tools.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(root_grp, name="root")
app.add_typer(docs_grp, name="docs")
app.add_typer(logs_grp, name="logs")


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"Docspace v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    no_log: bool = typer.Option(False, "--no-log", help="Do not write a session log file."),
):
    """Docspace: browse, search, and reorganise a local folder of Markdown documents."""
    if not no_log:
        event_log.configure_session_logging(config.LOG_DIR)
        event_log.cleanup_old_logs(config.LOG_DIR)


def print_success(message: str):
    typer.echo(typer.style(f"✅ {message}", fg=typer.colors.GREEN))


def print_error(message: str):
    typer.echo(typer.style(f"❌ {message}", fg=typer.colors.RED), err=True)


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn workspace failures into a red message and exit code 1."""
    try:
        yield
    except WorkspaceError as exc:
        event_log.record("error", "cli", str(exc), {"kind": type(exc).__name__})
        print_error(str(exc))
        raise typer.Exit(code=1)


def _store() -> TomlConfigStore:
    return TomlConfigStore(config.CONFIG_FILE)


def _root() -> Path:
    return resolve_root(_store())


def _in_root(root: Path, path: Optional[str]) -> Path:
    """Interpret ``path`` relative to the workspace root unless it is absolute."""
    if not path:
        return root
    candidate = Path(path).expanduser()
    return candidate if candidate.is_absolute() else root / candidate


def _echo_json(payload) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _format_time(timestamp: Optional[int]) -> str:
    if timestamp is None:
        return ""
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M")


# ── root ─────────────────────────────────────────────────────

@root_grp.command("show")
def root_show():
    """Print the active workspace folder (creating the default one if needed)."""
    with _reported_errors():
        typer.echo(str(_root()))


@root_grp.command("set")
def root_set(folder: str = typer.Argument(..., help="Existing folder to use as the workspace.")):
    """Switch the workspace to another folder."""
    with _reported_errors():
        path = set_root(_store(), folder)
    print_success(f"Workspace set to {path}")


@root_grp.command("reset")
def root_reset():
    """Forget the custom folder and go back to the default workspace."""
    with _reported_errors():
        path = reset_root(_store())
    print_success(f"Workspace reset to {path}")


async def _prompt_for_folder() -> Optional[str]:
    answer = await asyncio.to_thread(
        typer.prompt, "Folder to use as workspace (leave empty to cancel)", default="", show_default=False
    )
    return answer.strip() or None


@root_grp.command("pick")
def root_pick():
    """Interactively choose a new workspace folder."""
    with _reported_errors():
        path = asyncio.run(change_root_interactively(_store(), _prompt_for_folder))
    if path is None:
        typer.echo("Workspace unchanged.")
        return
    print_success(f"Workspace set to {path}")


# ── docs ─────────────────────────────────────────────────────

def _add_branch(branch: Tree, items: List[TreeItem]) -> None:
    for item in items:
        if item.type == "folder":
            _add_branch(branch.add(f"[bold blue]📁 {item.name}[/bold blue]"), item.children or [])
        else:
            branch.add(f"📄 {item.name}")


@docs_grp.command("tree")
def docs_tree(
    folder: Optional[str] = typer.Argument(None, help="Folder to show (default: workspace root)."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw tree as JSON."),
):
    """Show every folder and document as a tree."""
    with _reported_errors():
        root = _root()
        target = _in_root(root, folder)
        items = build_tree(target)

    if as_json:
        _echo_json([item.to_dict() for item in items])
        return

    if not items:
        typer.echo("No documents yet.")
        return
    tree = Tree(f"[bold]{target.name or target}[/bold]")
    _add_branch(tree, items)
    console.print(tree)
    typer.echo(f"{len(flatten_tree(items))} document(s)")


@docs_grp.command("ls")
def docs_ls(
    folder: Optional[str] = typer.Argument(None, help="Folder to list (default: workspace root)."),
    as_json: bool = typer.Option(False, "--json", help="Print raw entries as JSON."),
):
    """List documents in one folder, most recently modified first."""
    with _reported_errors():
        files = documents.list_files(_in_root(_root(), folder))

    if as_json:
        _echo_json([{"name": f.name, "path": f.path, "size": f.size, "modified": f.modified} for f in files])
        return
    if not files:
        typer.echo("No documents in this folder.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Modified")
    table.add_column("Size", justify="right")
    for f in files:
        table.add_row(f.name, _format_time(f.modified), str(f.size))
    console.print(table)


@docs_grp.command("previews")
def docs_previews(
    folder: Optional[str] = typer.Argument(None, help="Folder to list (default: workspace root)."),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Include documents in sub-folders."),
    as_json: bool = typer.Option(False, "--json", help="Print raw entries as JSON."),
):
    """List documents with the start of their content, sorted by name."""
    with _reported_errors():
        target = _in_root(_root(), folder)
        files = collect_documents(target) if recursive else documents.list_files_in_folder(target)

    if as_json:
        _echo_json([asdict(f) for f in files])
        return
    if not files:
        typer.echo("No documents found.")
        return
    for f in files:
        typer.echo(typer.style(f.name, bold=True))
        first_lines = [line for line in f.preview.splitlines() if line.strip()][:2]
        for line in first_lines:
            typer.echo(f"  {line[:100]}")


@docs_grp.command("new")
def docs_new(folder: Optional[str] = typer.Argument(None, help="Folder to create the document in.")):
    """Create an empty Untitled-N.md document."""
    with _reported_errors():
        doc = documents.create_document(_in_root(_root(), folder))
    print_success(f"Created {doc.path}")


@docs_grp.command("new-folder")
def docs_new_folder(
    parent: Optional[str] = typer.Argument(None, help="Folder to create the new folder in."),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Folder name (default: New Folder)."),
):
    """Create a folder, numbering the name if it already exists."""
    with _reported_errors():
        path = documents.create_folder(_in_root(_root(), parent), name)
    print_success(f"Created {path}")


@docs_grp.command("read")
def docs_read(path: str = typer.Argument(..., help="Document to print.")):
    """Print a document."""
    with _reported_errors():
        doc = documents.read_document(_in_root(_root(), path))
    typer.echo(doc.content, nl=False)


@docs_grp.command("write")
def docs_write(
    path: str = typer.Argument(..., help="Document to write."),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="New content (default: read stdin)."),
):
    """Replace a document's content."""
    content = text if text is not None else sys.stdin.read()
    with _reported_errors():
        written = documents.write_document(_in_root(_root(), path), content)
    print_success(f"Saved {written}")


@docs_grp.command("delete")
def docs_delete(
    path: str = typer.Argument(..., help="Document or folder to delete."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    """Delete a document, or a folder with everything inside it."""
    with _reported_errors():
        root = _root()
        target = _in_root(root, path)
        if not yes and not typer.confirm(f"Delete {target}?", default=False):
            typer.echo("Nothing deleted.")
            return
        if target.is_dir():
            documents.delete_folder(target, root=root)
        else:
            documents.delete_document(target)
    print_success(f"Deleted {target}")


# ── search / move / rename ───────────────────────────────────

@app.command("search")
def search(
    query: str = typer.Argument(..., help="Text to look for in names and contents."),
    folder: Optional[str] = typer.Option(None, "--in", help="Only search this folder."),
    as_json: bool = typer.Option(False, "--json", help="Print raw results as JSON."),
):
    """Search document names, folder names, and contents (ignores accents and case)."""
    with _reported_errors():
        results = search_workspace(_in_root(_root(), folder), query)

    if as_json:
        _echo_json([r.to_dict() for r in results])
        return
    if not results:
        typer.echo("No matches found.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Match")
    table.add_column("Document")
    table.add_column("Line", justify="right")
    table.add_column("Snippet")
    for r in results:
        table.add_row(r.match_type, r.name, str(r.line_number or ""), r.snippet or "")
    console.print(table)


@app.command("move")
def move(
    source: str = typer.Argument(..., help="Document or folder to move."),
    destination: str = typer.Argument(..., help="Folder to move it into ('.' for the workspace root)."),
):
    """Move a document or folder. Name clashes get a numbered name."""
    with _reported_errors():
        root = _root()
        if not destination.strip():
            new_path = move_entry(_in_root(root, source), destination)
        else:
            new_path = move_entry(_in_root(root, source), _in_root(root, destination))
    print_success(f"Moved to {new_path}")


@app.command("rename")
def rename(
    path: str = typer.Argument(..., help="Document or folder to rename."),
    new_name: str = typer.Argument(..., help="New name (the .md extension is added for documents)."),
):
    """Rename a document or folder in place."""
    with _reported_errors():
        new_path = rename_entry(_in_root(_root(), path), new_name)
    print_success(f"Renamed to {new_path.name}")


# ── logs ─────────────────────────────────────────────────────

@logs_grp.command("list")
def logs_list():
    """List session log files, newest first."""
    files = event_log.list_log_files(config.LOG_DIR)
    if not files:
        typer.echo("No logs available.")
        return
    for path in files:
        typer.echo(path.name)


@logs_grp.command("show")
def logs_show(
    show_all: bool = typer.Option(False, "--all", "-a", help="Print every session log, not just the newest."),
):
    """Print the newest session log."""
    contents = event_log.read_logs(config.LOG_DIR)
    if not contents:
        typer.echo("No logs available.")
        return
    for text in contents if show_all else contents[:1]:
        typer.echo(text, nl=False)


@logs_grp.command("folder")
def logs_folder():
    """Print the folder that holds session logs."""
    typer.echo(str(config.LOG_DIR))


@logs_grp.command("cleanup")
def logs_cleanup(
    days: int = typer.Option(config.LOG_RETENTION_DAYS, min=0, help="Keep logs younger than this many days."),
):
    """Delete old session logs."""
    removed = event_log.cleanup_old_logs(config.LOG_DIR, max_age_days=days)
    typer.echo(f"Removed {removed} old log file(s).")


if __name__ == "__main__":
    app()
