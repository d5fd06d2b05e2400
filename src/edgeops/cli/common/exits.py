"""Exit handling utilities for the CLI."""

from contextlib import contextmanager
from typing import Iterator, NoReturn

import typer

from edgeops.cli.common.output import out
from edgeops.core.errors import EdgeOpsError


def ok_exit(msg: str | None = None) -> "None":
    """Exit successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(0)


def die(msg: str, code: int = 1, *, hint: str | None = None) -> "None":
    """Exit with an error message and optional exit code."""
    out.error(msg)
    if hint:
        out.hint(hint)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> "None":
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """
    Helper function to print an error message and exit with a given code.

    Chains the original exception so --verbose tracebacks keep the cause.
    """
    out.error(message)
    hint = getattr(exc, "hint", None)
    if hint:
        out.hint(hint)
    raise typer.Exit(code) from exc


@contextmanager
def error_boundary() -> Iterator[None]:
    """Turn core errors into a clean exit 1; anything else propagates."""
    try:
        yield
    except EdgeOpsError as exc:
        exit_from_exc(exc, message=str(exc))
