"""Removal of databases, regional footprints and single instances.

These operations leave the name cache and the stored credentials alone;
the next ``db list`` refreshes the cache.
"""

from __future__ import annotations

import logging
from typing import Protocol

from edgeops.core.databases import DatabaseCatalog
from edgeops.core.errors import (
    InstanceNotFound,
    OperationNotSupported,
    RemoteRequestFailed,
)
from edgeops.core.regions import RegionResolver

logger = logging.getLogger(__name__)


class DestructionAdapter(Protocol):
    """Control-plane delete calls."""

    def delete_database(self, name: str) -> None:
        ...

    def delete_instance(self, database_name: str, instance_name: str) -> None:
        ...


class DestructionOrchestrator:
    """Destroys a database, its footprint in one region, or one instance."""

    def __init__(
        self,
        adapter: DestructionAdapter,
        catalog: DatabaseCatalog,
        resolver: RegionResolver,
    ):
        self.adapter = adapter
        self.catalog = catalog
        self.resolver = resolver

    def destroy_database(self, name: str) -> None:
        """Destroy ``name`` with all its regions, instances and data."""
        logger.info("destroying database %s", name)
        self.adapter.delete_database(name)

    def destroy_region(self, name: str, region: str) -> list[str]:
        """
        Destroy every instance of ``name`` located in ``region``.

        Returns:
            Names of the destroyed instances.

        Raises:
            InvalidRegion: ``region`` is not in the region catalog.
            OperationNotSupported: The database is not ``logical``.
            InstanceNotFound: The database has no instance in ``region``.
        """
        self.resolver.validate(region)
        database = self.catalog.get_database(name)
        if not database.is_logical:
            raise OperationNotSupported(
                "only databases of type 'logical' support destroying a region"
            )

        targets = [
            instance
            for instance in self.catalog.list_instances(database)
            if instance.region == region
        ]
        if not targets:
            raise InstanceNotFound(
                f"could not find any instances of database {name} in region {region}"
            )

        destroyed: list[str] = []
        for instance in targets:
            logger.info("destroying instance %s of %s", instance.name, name)
            self.adapter.delete_instance(name, instance.name)
            destroyed.append(instance.name)
        return destroyed

    def destroy_instance(self, name: str, instance: str) -> None:
        """Destroy instance ``instance`` of database ``name``."""
        try:
            self.adapter.delete_instance(name, instance)
        except RemoteRequestFailed as exc:
            if exc.status == 404:
                raise InstanceNotFound(
                    f"could not find instance {instance} of database {name}",
                    hint=f"Run `edgeops db show {name}` to list its instances.",
                ) from exc
            raise
