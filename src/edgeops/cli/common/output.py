"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from edgeops.cli.common.tui_style import QUESTIONARY_STYLE_CONFIRM
from edgeops.core.regions import to_location

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "emph": "bold blue",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)
err_console = Console(theme=_THEME, stderr=True)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        err_console.print(f"[warn]⚠ {msg}[/]")

    def error(self, msg: str) -> None:
        """Print an error message."""
        err_console.print(f"[err]✗[/] {msg}")

    def hint(self, msg: str) -> None:
        """Print a follow-up suggestion below an error."""
        err_console.print(f"[meta]{msg}[/]")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def print(self, msg: str = "") -> None:
        """Print a raw Rich-formatted message to the console."""
        console.print(msg)

    def plain(self, msg: str) -> None:
        """Print text without markup or wrapping (for URLs meant to be piped)."""
        console.print(msg, markup=False, highlight=False, soft_wrap=True)

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        width = max((len(k) for k in items), default=0)
        for k, v in items.items():
            console.print(f"[meta]{k.ljust(width)}[/]  {v}", soft_wrap=True)

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Returns:
            True if the user confirms, False otherwise (including Ctrl+C).
        """
        prompt = questionary.confirm(
            message,
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            auto_enter=False,
        )
        return bool(prompt.ask())

    def databases_table(
        self, rows: Iterable[tuple[Any, str]], title: str = "Databases"
    ) -> None:
        """
        Expects (database, url) tuples where database has .name .type .regions
        (like edgeops.core.models.Database).
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("Type", style="meta")
        t.add_column("Regions")
        t.add_column("URL", overflow="fold")

        for db, url in rows:
            db_type = db.type.value if hasattr(db.type, "value") else str(db.type)
            t.add_row(db.name, db_type, ", ".join(sorted(db.regions)), url)

        console.print(t)

    def instances_table(
        self, rows: Iterable[tuple[Any, str]], title: str = "Database Instances"
    ) -> None:
        """
        Expects (instance, url) tuples where instance has .name .type .region.
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("Type", style="meta")
        t.add_column("Region")
        t.add_column("URL", overflow="fold")

        for instance, url in rows:
            t.add_row(instance.name, instance.type, instance.region, url)

        console.print(t)

    def regions_table(self, region_ids: Iterable[str], default: str) -> None:
        """Render region ids with their location, marking the default one."""
        t = Table(show_lines=False, box=None)
        t.add_column("ID", no_wrap=True)
        t.add_column("Location")

        for region_id in region_ids:
            location = to_location(region_id)
            if region_id == default:
                t.add_row(
                    f"[emph]{region_id}[/]", f"[emph]{location}  \\[default][/]"
                )
            else:
                t.add_row(region_id, location)

        console.print(t)


out = Out()
