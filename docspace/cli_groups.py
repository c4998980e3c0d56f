"""Command hierarchy groups for the docspace CLI.

Provides logical grouping of commands under:
  docspace root  — Workspace root selection
  docspace docs  — Documents and folders
  docspace logs  — Session log files
"""

from __future__ import annotations

import typer

# ── Workspace root group ─────────────────────────────────────
root_grp = typer.Typer(
    help="📂 Root — show, change, or reset the workspace folder.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ── Documents group ──────────────────────────────────────────
docs_grp = typer.Typer(
    help="📝 Docs — browse, create, edit, and delete documents and folders.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ── Logs group ───────────────────────────────────────────────
logs_grp = typer.Typer(
    help="🧾 Logs — inspect and prune session log files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
