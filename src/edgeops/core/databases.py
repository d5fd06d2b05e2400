"""Database lookup and the local name cache that shadows it.

``DatabaseCatalog`` always asks the control plane and is the source of
truth for anything that mutates remote state. ``NameCache`` keeps a
snapshot of primary database names in the local settings file so shell
completion does not need a network round trip.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

from edgeops.core.errors import (
    EdgeOpsError,
    NotAuthenticatedOrNotFound,
    RemoteRequestFailed,
)
from edgeops.core.models import Database, DatabaseType, Instance

logger = logging.getLogger(__name__)

_AUTH_STATUSES = {401, 403}


class DatabasesAdapter(Protocol):
    """Interface for read-only database queries."""

    def list_databases(self) -> list[Database]:
        ...

    def list_instances(self, database_name: str) -> list[Instance]:
        ...


class NamesCacheStore(Protocol):
    """Slot in the local settings that holds the name cache."""

    def get_db_names_cache(self) -> list[str] | None:
        ...

    def set_db_names_cache(self, names: list[str]) -> None:
        ...

    def invalidate_db_names_cache(self) -> None:
        ...


def extract_primary_names(databases: Iterable[Database]) -> list[str]:
    """Return names of ``primary`` databases, keeping listing order."""
    return [db.name for db in databases if db.type == DatabaseType.PRIMARY]


class DatabaseCatalog:
    """Live view of the remote databases."""

    def __init__(self, adapter: DatabasesAdapter):
        self.adapter = adapter

    def list_databases(self) -> list[Database]:
        return self.adapter.list_databases()

    def get_database(self, name: str) -> Database:
        """
        Return the database called ``name``.

        Raises:
            NotAuthenticatedOrNotFound: The name is unknown, or the control
                plane rejected the token. Both are reported the same way.
        """
        try:
            databases = self.adapter.list_databases()
        except RemoteRequestFailed as exc:
            if exc.status in _AUTH_STATUSES:
                raise NotAuthenticatedOrNotFound(name) from exc
            raise

        for database in databases:
            if database.name == name:
                return database
        raise NotAuthenticatedOrNotFound(name)

    def list_instances(self, database: Database) -> list[Instance]:
        return self.adapter.list_instances(database.name)


class NameCache:
    """Snapshot of primary database names, absent until first fetched.

    The snapshot is never trusted for correctness-sensitive work; it only
    serves completion and quick validation.
    """

    def __init__(self, store: NamesCacheStore):
        self.store = store

    def get(self) -> list[str] | None:
        return self.store.get_db_names_cache()

    def set(self, names: list[str]) -> None:
        self.store.set_db_names_cache(list(names))

    def invalidate(self) -> None:
        self.store.invalidate_db_names_cache()

    def fetch_or_load(self, catalog: DatabaseCatalog) -> list[str]:
        """
        Return the cached names, fetching and storing them on a miss.

        A failing listing yields ``[]`` and leaves the cache untouched, so
        completion degrades instead of aborting.
        """
        cached = self.get()
        if cached is not None:
            return cached
        try:
            databases = catalog.list_databases()
        except EdgeOpsError as exc:
            logger.debug("could not list databases for name cache: %s", exc)
            return []
        names = extract_primary_names(databases)
        self.set(names)
        return names
