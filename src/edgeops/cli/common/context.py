"""Application context management for the CLI."""

from dataclasses import dataclass

from edgeops.cli.common.exits import exit_from_exc
from edgeops.cli.common.output import out
from edgeops.core.adapters.controlplane import ControlPlaneAdapter
from edgeops.core.adapters.regionprobe import RegionProbeAdapter
from edgeops.core.adapters.settings_store import JsonSettingsStore
from edgeops.core.auth import get_client
from edgeops.core.config import ClientConfig, load_config
from edgeops.core.databases import DatabaseCatalog, NameCache
from edgeops.core.destruction import DestructionOrchestrator
from edgeops.core.errors import EdgeOpsError
from edgeops.core.provisioning import ProvisioningOrchestrator
from edgeops.core.regions import RegionCatalog, RegionResolver
from edgeops.core.replication import ReplicationOrchestrator


@dataclass
class SettingsAppContext:
    """Application context holding configuration and the local settings store."""

    config: ClientConfig
    store: JsonSettingsStore


@dataclass
class DbAppContext:
    """Application context wiring the control-plane adapter into the orchestrators."""

    config: ClientConfig
    store: JsonSettingsStore
    client: ControlPlaneAdapter
    catalog: DatabaseCatalog
    names_cache: NameCache
    regions: RegionCatalog
    resolver: RegionResolver

    @property
    def provisioning(self) -> ProvisioningOrchestrator:
        return ProvisioningOrchestrator(
            self.client, self.resolver, self.store, self.names_cache
        )

    @property
    def replication(self) -> ReplicationOrchestrator:
        return ReplicationOrchestrator(
            self.client, self.catalog, self.resolver, self.store, self.names_cache
        )

    @property
    def destruction(self) -> DestructionOrchestrator:
        return DestructionOrchestrator(self.client, self.catalog, self.resolver)


def load_settings_store(config: ClientConfig) -> JsonSettingsStore:
    """Open the local settings file (raises LocalSettingsUnreadable)."""
    return JsonSettingsStore(config.settings_path)


def build_settings_context() -> SettingsAppContext:
    """Build the context for commands that only touch local settings."""
    config = load_config()
    try:
        store = load_settings_store(config)
    except EdgeOpsError as exc:
        exit_from_exc(exc, message=str(exc))
    return SettingsAppContext(config=config, store=store)


def assemble_db_context(
    config: ClientConfig, store: JsonSettingsStore, *, require_token: bool = True
) -> DbAppContext:
    """Wire adapters and services for database commands (raises core errors)."""
    client = get_client(config, store, require_token=require_token)
    regions = RegionCatalog(client)
    probe = RegionProbeAdapter(config.region_probe_url, timeout=config.http_timeout)
    resolver = RegionResolver(regions, probe, warn=out.warn)
    return DbAppContext(
        config=config,
        store=store,
        client=client,
        catalog=DatabaseCatalog(client),
        names_cache=NameCache(store),
        regions=regions,
        resolver=resolver,
    )


def build_db_context(*, require_token: bool = True) -> DbAppContext:
    """Build and return the context for ``db`` commands, exiting on failure.

    Args:
        require_token: Exit with a login hint when no token is available.
    """
    config = load_config()
    try:
        store = load_settings_store(config)
        return assemble_db_context(config, store, require_token=require_token)
    except EdgeOpsError as exc:
        exit_from_exc(exc, message=str(exc))
