"""Creation of new primary databases.

A database is created in two remote steps (database record, then its
first instance) followed by two local ones (store credentials, drop the
name cache). Each step runs only if the previous one succeeded; nothing is
rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Protocol

from coolname import generate_slug

from edgeops.core.databases import NameCache
from edgeops.core.errors import EdgeOpsError, InstanceCreationFailed
from edgeops.core.models import CreatedDatabase, Database, DatabaseSettings
from edgeops.core.regions import RegionResolver

logger = logging.getLogger(__name__)

CANARY_IMAGE = "canary"
LATEST_IMAGE = "latest"


class CredentialsStore(Protocol):
    """Per-database connection settings in the local settings file."""

    def get_database_settings(self, database_id: str) -> DatabaseSettings | None:
        ...

    def add_database(self, database_id: str, settings: DatabaseSettings) -> None:
        ...


class ProvisioningAdapter(Protocol):
    """Control-plane calls needed to create a database."""

    def create_database(self, name: str, region: str, image: str) -> CreatedDatabase:
        ...

    def create_instance(
        self, database_name: str, password: str, region: str, image: str
    ) -> None:
        ...


@dataclass(frozen=True)
class ProvisioningPlan:
    """Name, region and image a database is about to be created with."""

    name: str
    region: str
    image: str


def image_tag(use_canary_image: bool) -> str:
    """Return the server image tag to deploy."""
    return CANARY_IMAGE if use_canary_image else LATEST_IMAGE


def generate_database_name() -> str:
    """Return a random adjective-noun name such as ``brave-otter``."""
    return generate_slug(2)


class ProvisioningOrchestrator:
    """Creates a primary database and its first instance."""

    def __init__(
        self,
        adapter: ProvisioningAdapter,
        resolver: RegionResolver,
        credentials: CredentialsStore,
        names_cache: NameCache,
        *,
        name_generator: Callable[[], str] = generate_database_name,
    ):
        self.adapter = adapter
        self.resolver = resolver
        self.credentials = credentials
        self.names_cache = names_cache
        self.name_generator = name_generator

    def plan(
        self,
        name: str | None,
        region: str | None,
        use_canary_image: bool = False,
    ) -> ProvisioningPlan:
        """Resolve name, region and image without touching remote state."""
        return ProvisioningPlan(
            name=name or self.name_generator(),
            region=self.resolver.resolve(region),
            image=image_tag(use_canary_image),
        )

    def create(
        self,
        name: str | None,
        region: str | None,
        use_canary_image: bool = False,
    ) -> tuple[Database, DatabaseSettings]:
        """
        Create a database and persist its connection settings.

        Args:
            name: Database name; generated when empty.
            region: Region code; the closest region when empty.
            use_canary_image: Deploy the canary server build.

        Returns:
            The created database and the settings stored for it.

        Raises:
            InvalidRegion: ``region`` is not in the region catalog.
            RemoteRequestFailed: The database could not be created.
            InstanceCreationFailed: The database exists but has no instance.
        """
        return self.execute(self.plan(name, region, use_canary_image))

    def execute(self, plan: ProvisioningPlan) -> tuple[Database, DatabaseSettings]:
        """Run the remote and local steps of an already resolved plan."""
        name, region, image = plan.name, plan.region, plan.image

        logger.info("creating database %s in %s (image %s)", name, region, image)
        created = self.adapter.create_database(name, region, image)

        try:
            self.adapter.create_instance(name, created.password, region, image)
        except EdgeOpsError as exc:
            raise InstanceCreationFailed(name, exc) from exc

        settings = DatabaseSettings(
            name=created.database.name,
            host=created.database.hostname,
            username=created.username,
            password=created.password,
        )
        self.credentials.add_database(created.database.id, settings)
        self.names_cache.invalidate()
        return created.database, settings
