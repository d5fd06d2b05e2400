"""Common CLI options for the CLI."""

import typer

from edgeops.cli.common.completion import complete_region_ids

RegionOpt = typer.Option(
    None,
    "--region",
    help="Region ID. If no ID is specified, closest region to you is used by default.",
    autocompletion=complete_region_ids,
)

DestroyRegionOpt = typer.Option(
    None,
    "--region",
    help="Pick a database region to destroy.",
    autocompletion=complete_region_ids,
)

InstanceOpt = typer.Option(
    None,
    "--instance",
    help="Pick a specific database instance to destroy.",
)

CanaryOpt = typer.Option(
    False,
    "--canary",
    help="Use database canary build.",
)

YesOpt = typer.Option(
    False,
    "--yes",
    "-y",
    help="Confirms the destruction of all regions of the database.",
)

UrlOpt = typer.Option(
    False,
    "--url",
    help="Show database connection URL.",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log control-plane calls and cache decisions to stderr.",
)
