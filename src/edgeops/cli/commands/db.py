"""Commands for managing hosted databases."""

import time

import typer

from edgeops.cli.common.completion import complete_database_names, complete_region_ids
from edgeops.cli.common.context import DbAppContext, build_db_context
from edgeops.cli.common.exits import error_boundary, ok_exit, warn_exit
from edgeops.cli.common.options import (
    CanaryOpt,
    DestroyRegionOpt,
    InstanceOpt,
    RegionOpt,
    UrlOpt,
    YesOpt,
)
from edgeops.cli.common.output import out
from edgeops.core.adapters.settings_store import JsonSettingsStore
from edgeops.core.databases import extract_primary_names
from edgeops.core.errors import OperationNotSupported
from edgeops.core.models import Database, Instance
from edgeops.core.regions import region_text

app = typer.Typer(help="Manage databases", no_args_is_help=True)

DatabaseNameArg = typer.Argument(
    ...,
    help="Database name.",
    autocompletion=complete_database_names,
    show_default=False,
)


def _database_url(store: JsonSettingsStore, database: Database) -> str:
    settings = store.get_database_settings(database.id)
    return settings.url if settings else "-"


def _instance_url(
    store: JsonSettingsStore, database: Database, instance: Instance
) -> str:
    # Replicas are stored under their uuid; the first instance shares the database's.
    settings = store.get_database_settings(instance.uuid)
    if settings is None:
        return _database_url(store, database)
    return settings.url


@app.command()
def create(
    name: str | None = typer.Argument(
        None, help="Database name. A random one is generated when omitted."
    ),
    region: str | None = RegionOpt,
    canary: bool = CanaryOpt,
):
    """
    Create a database.
    """
    appctx: DbAppContext = build_db_context()
    provisioning = appctx.provisioning

    with error_boundary():
        plan = provisioning.plan(name, region, canary)
        where = region_text(plan.region)
        start = time.monotonic()
        with out.status(
            f"Creating database [emph]{plan.name}[/] in [emph]{where}[/]..."
        ):
            database, settings = provisioning.execute(plan)
        elapsed = int(time.monotonic() - start)

    out.success(
        f"Created database [emph]{database.name}[/] in [emph]{where}[/] "
        f"in {elapsed} seconds."
    )
    out.print("\nHTTP connection string:\n")
    out.plain(f"   {settings.url}\n")
    out.print("To list your databases, run:\n")
    out.print("   edgeops db list\n")


@app.command()
def destroy(
    name: str = DatabaseNameArg,
    yes: bool = YesOpt,
    region: str | None = DestroyRegionOpt,
    instance: str | None = InstanceOpt,
):
    """
    Destroy a database, one of its regions, or one instance.
    """
    appctx: DbAppContext = build_db_context()
    destruction = appctx.destruction

    if instance:
        with error_boundary(), out.status(f"Destroying instance {instance}..."):
            destruction.destroy_instance(name, instance)
        out.success(f"Destroyed instance [emph]{instance}[/] of database [emph]{name}[/].")
        return

    if region:
        with error_boundary(), out.status(
            f"Destroying database {name} in {region_text(region)}..."
        ):
            destroyed = destruction.destroy_region(name, region)
        out.success(
            f"Destroyed {len(destroyed)} instance(s) of database [emph]{name}[/] "
            f"in [emph]{region_text(region)}[/]: {', '.join(destroyed)}"
        )
        return

    if not yes:
        out.print(
            f"Database [emph]{name}[/], all its replicas, and data will be destroyed."
        )
        if not out.confirm("Are you sure you want to do this?"):
            ok_exit("Database destruction avoided.")

    with error_boundary(), out.status(f"Destroying database {name}..."):
        destruction.destroy_database(name)
    out.success(f"Destroyed database [emph]{name}[/].")


@app.command()
def replicate(
    name: str = DatabaseNameArg,
    region: str = typer.Argument(
        ...,
        help="Region ID to replicate the database to.",
        autocompletion=complete_region_ids,
        show_default=False,
    ),
    canary: bool = CanaryOpt,
):
    """
    Replicate a database.
    """
    appctx: DbAppContext = build_db_context()
    where = region_text(region)

    with error_boundary():
        start = time.monotonic()
        with out.status(f"Replicating database [emph]{name}[/] to [emph]{where}[/]..."):
            settings = appctx.replication.replicate(name, region, canary)
        elapsed = int(time.monotonic() - start)

    out.success(
        f"Replicated database [emph]{name}[/] to [emph]{where}[/] in {elapsed} seconds."
    )
    out.print("\nHTTP connection string:\n")
    out.plain(f"   {settings.url}\n")


@app.command("list")
def list_databases():
    """
    List databases.
    """
    appctx: DbAppContext = build_db_context()

    with error_boundary(), out.status("Loading databases..."):
        databases = appctx.catalog.list_databases()

    if not databases:
        appctx.names_cache.set([])
        warn_exit("No databases found", code=0)

    out.databases_table(
        (db, _database_url(appctx.store, db)) for db in databases
    )
    appctx.names_cache.set(extract_primary_names(databases))


@app.command()
def regions():
    """
    List available database regions.
    """
    appctx: DbAppContext = build_db_context(require_token=False)

    with out.status("Loading regions..."):
        default = appctx.resolver.closest_region()
        region_ids = sorted(appctx.regions.list_region_ids())

    if not region_ids:
        warn_exit("Could not fetch the list of regions", code=1)

    out.regions_table(region_ids, default)


@app.command()
def show(
    name: str = DatabaseNameArg,
    url: bool = UrlOpt,
):
    """
    Show information from a database.
    """
    appctx: DbAppContext = build_db_context()

    with error_boundary():
        with out.status(f"Loading database {name}..."):
            database = appctx.catalog.get_database(name)
        if not database.is_logical:
            raise OperationNotSupported(
                "only databases of type 'logical' support the show operation"
            )

        if url:
            out.plain(_database_url(appctx.store, database))
            return

        with out.status(f"Loading instances of {name}..."):
            instances = appctx.catalog.list_instances(database)

    out.kv(
        {
            "Name": database.name,
            "URL": _database_url(appctx.store, database),
            "ID": database.id,
            "Regions": ", ".join(sorted(database.regions)),
        }
    )
    out.print()
    out.instances_table(
        (instance, _instance_url(appctx.store, database, instance))
        for instance in instances
    )
