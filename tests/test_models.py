import pytest

from edgeops.core.errors import MalformedResponse
from edgeops.core.models import (
    CreatedDatabase,
    Database,
    DatabaseSettings,
    DatabaseType,
    LogicalReplicaResponse,
    PhysicalReplicaResponse,
)


def _record(**overrides):
    record = {
        "DbId": "1",
        "Name": "app1",
        "Type": "primary",
        "Hostname": "app1.example.io",
        "Regions": ["ams"],
    }
    record.update(overrides)
    return record


def test_database_from_payload():
    db = Database.from_payload(_record(Type="replica"))

    assert db.type == DatabaseType.REPLICA
    assert db.is_logical is False


@pytest.mark.parametrize(
    "record",
    [
        _record(Type="sharded"),
        _record(Hostname=None),
        _record(Regions="ams"),
        {"Name": "app1", "Type": "primary", "Hostname": "h"},
    ],
)
def test_database_from_payload_rejects_bad_records(record):
    with pytest.raises(MalformedResponse):
        Database.from_payload(record)


def test_created_database_defaults_type_to_primary():
    created = CreatedDatabase.from_payload(
        {
            "database": {"DbId": "1", "Name": "app1", "Hostname": "h"},
            "username": "u",
            "password": "p",
        }
    )

    assert created.database.type == DatabaseType.PRIMARY


def test_replica_responses_decode_their_own_shape_only():
    logical = LogicalReplicaResponse.from_payload(
        {"instance": {"uuid": "i-1"}, "username": "u", "password": "p"}
    )
    physical = PhysicalReplicaResponse.from_payload(
        {"database": {"DbId": "d", "Hostname": "h"}, "username": "u", "password": "p"}
    )

    assert logical.instance_id == "i-1"
    assert (physical.database_id, physical.hostname) == ("d", "h")
    with pytest.raises(MalformedResponse, match="database"):
        PhysicalReplicaResponse.from_payload(
            {"instance": {"uuid": "i-1"}, "username": "u", "password": "p"}
        )


def test_database_settings_url():
    settings = DatabaseSettings(host="db.example.io", username="u", password="p")

    assert settings.url == "https://u:p@db.example.io"
    assert DatabaseSettings.from_dict(settings.to_dict()) == settings
