"""Domain models for hosted databases and their local credentials.

The control plane answers with loosely typed JSON; the ``from_payload``
constructors here are the only place that JSON is looked at. Each one
checks the fields it needs and raises ``MalformedResponse`` instead of
falling back to defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from edgeops.core.errors import MalformedResponse


class DatabaseType(str, Enum):
    """
    Backend representation of a database.

    Values:
        PRIMARY: A directly provisioned physical database.
        LOGICAL: A database composed of named instances.
        REPLICA: A physical copy created from a primary.
    """

    PRIMARY = "primary"
    LOGICAL = "logical"
    REPLICA = "replica"


def _require(payload: Mapping[str, Any], key: str, context: str) -> Any:
    if not isinstance(payload, Mapping) or key not in payload:
        raise MalformedResponse(f"{context}: missing field '{key}'")
    return payload[key]


def _require_str(payload: Mapping[str, Any], key: str, context: str) -> str:
    value = _require(payload, key, context)
    if not isinstance(value, str):
        raise MalformedResponse(
            f"{context}: field '{key}' must be a string, got {type(value).__name__}"
        )
    return value


def _require_mapping(
    payload: Mapping[str, Any], key: str, context: str
) -> Mapping[str, Any]:
    value = _require(payload, key, context)
    if not isinstance(value, Mapping):
        raise MalformedResponse(f"{context}: field '{key}' must be an object")
    return value


@dataclass(frozen=True)
class Database:
    """
    Remote database record as last seen by the client.

    Attributes:
        id: Opaque remote identifier; key for local settings.
        name: Unique, user-chosen name.
        type: Backend representation.
        hostname: Host serving the database.
        regions: Region codes currently hosting it.
    """

    id: str
    name: str
    type: DatabaseType
    hostname: str
    regions: tuple[str, ...] = ()

    @property
    def is_logical(self) -> bool:
        return self.type == DatabaseType.LOGICAL

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        *,
        context: str = "database record",
        default_type: DatabaseType | None = None,
    ) -> Database:
        if default_type is not None and "Type" not in payload:
            db_type = default_type
        else:
            raw_type = _require_str(payload, "Type", context)
            try:
                db_type = DatabaseType(raw_type)
            except ValueError as exc:
                raise MalformedResponse(
                    f"{context}: unknown database type '{raw_type}'"
                ) from exc

        regions = payload.get("Regions") or []
        if not isinstance(regions, list) or not all(
            isinstance(r, str) for r in regions
        ):
            raise MalformedResponse(f"{context}: 'Regions' must be a list of strings")

        return cls(
            id=_require_str(payload, "DbId", context),
            name=_require_str(payload, "Name", context),
            type=db_type,
            hostname=_require_str(payload, "Hostname", context),
            regions=tuple(regions),
        )


@dataclass(frozen=True)
class Instance:
    """A regional deployment unit of a logical database."""

    uuid: str
    name: str
    type: str
    region: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Instance:
        context = "instance record"
        return cls(
            uuid=_require_str(payload, "uuid", context),
            name=_require_str(payload, "name", context),
            type=_require_str(payload, "type", context),
            region=_require_str(payload, "region", context),
        )


@dataclass(frozen=True)
class DatabaseSettings:
    """Locally stored connection data, keyed by the remote identifier."""

    host: str
    username: str
    password: str
    name: str = ""

    @property
    def url(self) -> str:
        """HTTP connection URL with embedded credentials."""
        return f"https://{self.username}:{self.password}@{self.host}"

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "host": self.host,
            "username": self.username,
            "password": self.password,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DatabaseSettings:
        return cls(
            name=str(data.get("name") or ""),
            host=str(data.get("host") or ""),
            username=str(data.get("username") or ""),
            password=str(data.get("password") or ""),
        )


@dataclass(frozen=True)
class CreatedDatabase:
    """Answer of the create-database call."""

    database: Database
    username: str
    password: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> CreatedDatabase:
        context = "create database response"
        raw = _require_mapping(payload, "database", context)
        return cls(
            database=Database.from_payload(
                raw, context=context, default_type=DatabaseType.PRIMARY
            ),
            username=_require_str(payload, "username", context),
            password=_require_str(payload, "password", context),
        )


@dataclass(frozen=True)
class LogicalReplicaResponse:
    """Replica created as an instance under a logical database."""

    instance_id: str
    username: str
    password: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> LogicalReplicaResponse:
        context = "replicate instance response"
        instance = _require_mapping(payload, "instance", context)
        return cls(
            instance_id=_require_str(instance, "uuid", context),
            username=_require_str(payload, "username", context),
            password=_require_str(payload, "password", context),
        )


@dataclass(frozen=True)
class PhysicalReplicaResponse:
    """Replica created as a new top-level database record."""

    database_id: str
    hostname: str
    username: str
    password: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> PhysicalReplicaResponse:
        context = "replicate database response"
        database = _require_mapping(payload, "database", context)
        return cls(
            database_id=_require_str(database, "DbId", context),
            hostname=_require_str(database, "Hostname", context),
            username=_require_str(payload, "username", context),
            password=_require_str(payload, "password", context),
        )


ReplicaResponse = LogicalReplicaResponse | PhysicalReplicaResponse
