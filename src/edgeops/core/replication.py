"""Replication of an existing database into another region.

The control plane models databases two ways. A ``logical`` database gets
its replica as a new instance under the same database and keeps its
hostname; any other database gets a new top-level ``replica`` record with
a hostname of its own. The source type picks both the endpoint and the
response schema before the request is sent.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from edgeops.core.databases import DatabaseCatalog, NameCache
from edgeops.core.errors import LocalSettingsUnreadable, MissingArgument
from edgeops.core.models import (
    Database,
    DatabaseSettings,
    DatabaseType,
    LogicalReplicaResponse,
    PhysicalReplicaResponse,
    ReplicaResponse,
)
from edgeops.core.provisioning import CredentialsStore, image_tag
from edgeops.core.regions import RegionResolver

logger = logging.getLogger(__name__)


class ReplicationAdapter(Protocol):
    """Control-plane calls for both replica shapes."""

    def create_database_replica(self, body: dict[str, Any]) -> dict[str, Any]:
        ...

    def create_instance_replica(
        self, database_name: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        ...


def build_replica_request(
    name: str, region: str, image: str, password: str
) -> dict[str, Any]:
    """Return the request body shared by both replica endpoints."""
    return {
        "name": name,
        "region": region,
        "image": image,
        "type": DatabaseType.REPLICA.value,
        "password": password,
    }


class ReplicationOrchestrator:
    """Creates replicas and stores their connection settings."""

    def __init__(
        self,
        adapter: ReplicationAdapter,
        catalog: DatabaseCatalog,
        resolver: RegionResolver,
        credentials: CredentialsStore,
        names_cache: NameCache,
    ):
        self.adapter = adapter
        self.catalog = catalog
        self.resolver = resolver
        self.credentials = credentials
        self.names_cache = names_cache

    def _source_password(self, source: Database) -> str:
        settings = self.credentials.get_database_settings(source.id)
        if settings is None or not settings.password:
            raise LocalSettingsUnreadable(
                f"no local credentials stored for database {source.name}",
                hint="Replicas reuse the primary's password; replicate from the "
                "machine that created the database.",
            )
        return settings.password

    def _send(self, source: Database, body: dict[str, Any]) -> ReplicaResponse:
        if source.is_logical:
            payload = self.adapter.create_instance_replica(source.name, body)
            return LogicalReplicaResponse.from_payload(payload)
        payload = self.adapter.create_database_replica(body)
        return PhysicalReplicaResponse.from_payload(payload)

    def replicate(
        self, name: str, region: str, use_canary_image: bool = False
    ) -> DatabaseSettings:
        """
        Replicate database ``name`` into ``region``.

        Returns:
            Connection settings of the new replica, already persisted.

        Raises:
            MissingArgument: ``name`` or ``region`` is empty.
            InvalidRegion: ``region`` is not in the region catalog.
            NotAuthenticatedOrNotFound: The source database cannot be found.
            LocalSettingsUnreadable: No stored password for the source.
            RemoteRequestFailed: The control plane refused the replica.
            MalformedResponse: The answer lacks an id, hostname or credentials.
        """
        if not name:
            raise MissingArgument("You must specify a database name to replicate it.")
        if not region:
            raise MissingArgument(
                "You must specify a database region ID to replicate it."
            )
        self.resolver.validate(region)

        source = self.catalog.get_database(name)
        body = build_replica_request(
            name, region, image_tag(use_canary_image), self._source_password(source)
        )

        logger.info("replicating %s database %s to %s", source.type.value, name, region)
        response = self._send(source, body)

        if isinstance(response, LogicalReplicaResponse):
            replica_id = response.instance_id
            host = source.hostname
        else:
            replica_id = response.database_id
            host = response.hostname

        settings = DatabaseSettings(
            host=host, username=response.username, password=response.password
        )
        self.credentials.add_database(replica_id, settings)
        self.names_cache.invalidate()
        return settings
