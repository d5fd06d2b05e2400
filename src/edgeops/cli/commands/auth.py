"""Commands for storing the control-plane token."""

import typer

from edgeops.cli.common.context import SettingsAppContext, build_settings_context
from edgeops.cli.common.exits import die, ok_exit
from edgeops.cli.common.output import out
from edgeops.core.config import TOKEN_ENV

app = typer.Typer(help="Store or clear the API token", no_args_is_help=True)


@app.command()
def token(
    value: str = typer.Argument(..., help="Bearer token issued by the control plane."),
):
    """
    Store an API token in the local settings.
    """
    appctx: SettingsAppContext = build_settings_context()
    value = value.strip()
    if not value:
        die("Token must not be empty.")
    appctx.store.set_token(value)
    out.success(f"Token stored in {appctx.config.settings_path}")


@app.command()
def logout():
    """
    Remove the stored API token.
    """
    appctx: SettingsAppContext = build_settings_context()
    if appctx.store.get_token() is None:
        ok_exit("No token stored.")
    appctx.store.clear_token()
    out.success("Logged out.")
    if appctx.config.token_override:
        out.warn(f"{TOKEN_ENV} is still set and will keep being used.")
