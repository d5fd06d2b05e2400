import pytest
import requests

from edgeops.core.adapters.controlplane import ControlPlaneAdapter
from edgeops.core.errors import MalformedResponse, RemoteRequestFailed
from edgeops.core.models import DatabaseType


class _FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, bad_json: bool = False):
        self.status_code = status_code
        self.payload = payload
        self.bad_json = bad_json
        self.text = "" if payload is None else str(payload)

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value")
        return self.payload


class _FakeSession:
    def __init__(self, *responses, error: Exception | None = None):
        self.responses = list(responses)
        self.error = error
        self.headers: dict[str, str] = {}
        self.requests: list[tuple] = []

    def request(self, method, url, json=None, timeout=None):
        self.requests.append((method, url, json))
        if self.error:
            raise self.error
        return self.responses.pop(0)


def _adapter(session: _FakeSession) -> ControlPlaneAdapter:
    return ControlPlaneAdapter(
        "https://api.example.com/", "tok", session=session, timeout=5
    )


def test_bearer_token_and_base_url_normalized():
    session = _FakeSession(_FakeResponse(payload={"ids": ["ams"]}))
    adapter = _adapter(session)

    assert adapter.list_region_ids() == ["ams"]
    assert session.headers["Authorization"] == "Bearer tok"
    assert session.requests[0][1] == "https://api.example.com/v2/regions"


def test_list_databases_decodes_records():
    session = _FakeSession(
        _FakeResponse(
            payload={
                "databases": [
                    {
                        "DbId": "1",
                        "Name": "app1",
                        "Type": "logical",
                        "Hostname": "app1.example.io",
                        "Regions": ["ams", "fra"],
                    }
                ]
            }
        )
    )

    [db] = _adapter(session).list_databases()

    assert db.id == "1"
    assert db.type == DatabaseType.LOGICAL
    assert db.regions == ("ams", "fra")


def test_instance_replica_goes_to_v2_instances_endpoint():
    body = {"name": "app1", "region": "fra", "image": "latest", "type": "replica", "password": "p"}
    session = _FakeSession(_FakeResponse(payload={"instance": {"uuid": "i-1"}}))

    _adapter(session).create_instance_replica("app1", body)

    assert session.requests == [
        ("POST", "https://api.example.com/v2/databases/app1/instances", body)
    ]


def test_database_replica_goes_to_v1_databases_endpoint():
    body = {"name": "app2", "region": "fra", "image": "latest", "type": "replica", "password": "p"}
    session = _FakeSession(_FakeResponse(payload={"database": {}}))

    _adapter(session).create_database_replica(body)

    assert session.requests == [("POST", "https://api.example.com/v1/databases", body)]


def test_create_database_and_instance_bodies():
    session = _FakeSession(
        _FakeResponse(
            payload={
                "database": {"DbId": "9", "Name": "app1", "Hostname": "app1.example.io"},
                "username": "u",
                "password": "p",
            }
        ),
        _FakeResponse(
            payload={
                "instance": {"uuid": "i-1", "name": "first", "type": "primary", "region": "ams"}
            }
        ),
    )
    adapter = _adapter(session)

    created = adapter.create_database("app1", "ams", "latest")
    adapter.create_instance("app1", created.password, "ams", "latest")

    assert created.database.type == DatabaseType.PRIMARY
    assert session.requests[0][2] == {"name": "app1", "region": "ams", "image": "latest"}
    assert session.requests[1][1].endswith("/v2/databases/app1/instances")
    assert session.requests[1][2] == {"password": "p", "region": "ams", "image": "latest"}


def test_delete_instance_url():
    session = _FakeSession(_FakeResponse(status_code=204))

    _adapter(session).delete_instance("app1", "fra-1")

    assert session.requests == [
        ("DELETE", "https://api.example.com/v2/databases/app1/instances/fra-1", None)
    ]


def test_non_2xx_status_is_remote_request_failed():
    session = _FakeSession(_FakeResponse(status_code=409, payload={"error": "exists"}))

    with pytest.raises(RemoteRequestFailed) as exc_info:
        _adapter(session).create_database("app1", "ams", "latest")
    assert exc_info.value.status == 409
    assert "create database app1" in str(exc_info.value)


def test_transport_error_is_remote_request_failed_without_status():
    session = _FakeSession(error=requests.ConnectionError("refused"))

    with pytest.raises(RemoteRequestFailed) as exc_info:
        _adapter(session).list_databases()
    assert exc_info.value.status is None


def test_invalid_json_is_malformed_response():
    session = _FakeSession(_FakeResponse(bad_json=True))

    with pytest.raises(MalformedResponse):
        _adapter(session).list_databases()


def test_missing_list_field_is_malformed_response():
    session = _FakeSession(_FakeResponse(payload={"items": []}))

    with pytest.raises(MalformedResponse, match="databases"):
        _adapter(session).list_databases()


@pytest.mark.parametrize(
    "payload",
    [{"instance": {"uuid": "i-1", "name": "first", "region": "ams"}}, None],
)
def test_create_instance_ignores_the_returned_record(payload):
    session = _FakeSession(_FakeResponse(status_code=201, payload=payload))

    assert _adapter(session).create_instance("app1", "p", "ams", "latest") is None
    assert len(session.requests) == 1
