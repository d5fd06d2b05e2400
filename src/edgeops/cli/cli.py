"""CLI application for hosted database operations."""

import logging

import typer
from rich.logging import RichHandler

from edgeops.cli.commands.auth import app as auth_app
from edgeops.cli.commands.db import app as db_app
from edgeops.cli.common.options import VerboseOpt
from edgeops.cli.common.output import err_console

app = typer.Typer(
    help="edgeops - provision, replicate and destroy hosted databases",
    no_args_is_help=True,
)

app.add_typer(db_app, name="db", help="Manage databases.")
app.add_typer(auth_app, name="auth", help="Store or clear the API token.")


def configure_logging(verbose: bool) -> None:
    """Route library logs to stderr through Rich; DEBUG with --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    # Region-probe warnings are already shown to the user by the CLI.
    if not verbose:
        logging.getLogger("edgeops").setLevel(logging.ERROR)
    # urllib3 logs every connection at DEBUG.
    logging.getLogger("urllib3").setLevel(logging.INFO if verbose else logging.WARNING)


@app.callback()
def _init(verbose: bool = VerboseOpt):
    """Configure logging for this invocation."""
    configure_logging(verbose)


if __name__ == "__main__":
    app()
