import json

import pytest
from typer.testing import CliRunner

from edgeops.cli.cli import app
from edgeops.cli.commands import db as db_commands
from edgeops.cli.common.context import DbAppContext
from edgeops.cli.common.output import Out
from edgeops.core.config import ClientConfig
from edgeops.core.databases import DatabaseCatalog, NameCache
from edgeops.core.models import (
    CreatedDatabase,
    Database,
    DatabaseSettings,
    DatabaseType,
    Instance,
)
from edgeops.core.regions import RegionCatalog, RegionResolver

runner = CliRunner()


class _ClientStub:
    def __init__(self):
        self.calls: list[str] = []

    def list_region_ids(self) -> list[str]:
        return ["ams", "fra"]

    def list_databases(self) -> list[Database]:
        return [
            Database(id="1", name="logi", type=DatabaseType.LOGICAL, hostname="logi.io"),
            Database(id="2", name="prim", type=DatabaseType.PRIMARY, hostname="prim.io"),
        ]

    def list_instances(self, database_name: str) -> list[Instance]:
        return [
            Instance(uuid="a", name="first", type="primary", region="ams"),
            Instance(uuid="b", name="second", type="replica", region="fra"),
        ]

    def create_database(self, name: str, region: str, image: str) -> CreatedDatabase:
        self.calls.append(f"create_database:{name}:{region}:{image}")
        return CreatedDatabase(
            database=Database(
                id="3", name=name, type=DatabaseType.PRIMARY, hostname=f"{name}.io"
            ),
            username="admin",
            password="pw",
        )

    def create_instance(
        self, database_name: str, password: str, region: str, image: str
    ) -> None:
        self.calls.append(f"create_instance:{database_name}:{region}")

    def delete_database(self, name: str) -> None:
        self.calls.append(f"delete_database:{name}")

    def delete_instance(self, database_name: str, instance_name: str) -> None:
        self.calls.append(f"delete_instance:{database_name}:{instance_name}")

    def create_instance_replica(self, database_name: str, body: dict) -> dict:
        self.calls.append(f"replicate:{database_name}:{body['region']}")
        return {"instance": {"uuid": "i-9"}, "username": "ru", "password": "rp"}


class _ProbeStub:
    def closest_region(self) -> str:
        return "fra"


@pytest.fixture
def client(store, monkeypatch) -> _ClientStub:
    stub = _ClientStub()
    regions = RegionCatalog(stub)
    appctx = DbAppContext(
        config=ClientConfig(settings_path=store.path),
        store=store,
        client=stub,
        catalog=DatabaseCatalog(stub),
        names_cache=NameCache(store),
        regions=regions,
        resolver=RegionResolver(regions, _ProbeStub()),
    )
    monkeypatch.setattr(db_commands, "build_db_context", lambda **kwargs: appctx)
    return stub


def test_list_refreshes_name_cache_with_primary_names(client, store):
    result = runner.invoke(app, ["db", "list"])

    assert result.exit_code == 0, result.output
    assert "logi" in result.output
    assert "prim" in result.output
    assert store.get_db_names_cache() == ["prim"]


def test_create_without_name_or_region_uses_generated_name_and_closest_region(
    client, store, monkeypatch
):
    monkeypatch.setattr(
        "edgeops.core.provisioning.generate_slug", lambda n: "brave-otter"
    )

    result = runner.invoke(app, ["db", "create"])

    assert result.exit_code == 0, result.output
    assert client.calls == [
        "create_database:brave-otter:fra:latest",
        "create_instance:brave-otter:fra",
    ]
    assert "Created database" in result.output
    assert "https://admin:pw@brave-otter.io" in result.output
    assert store.get_database_settings("3").name == "brave-otter"


def test_show_lists_instance_urls_from_stored_settings(client, store):
    store.add_database("1", DatabaseSettings(host="logi.io", username="u", password="pw"))
    store.add_database("b", DatabaseSettings(host="logi.io", username="r", password="rp"))

    result = runner.invoke(app, ["db", "show", "logi"])

    assert result.exit_code == 0, result.output
    assert "https://u:pw@logi.io" in result.output
    assert "https://r:rp@logi.io" in result.output
    assert "first-logi.io" not in result.output


def test_destroy_with_yes_skips_prompt(client):
    result = runner.invoke(app, ["db", "destroy", "prim", "--yes"])

    assert result.exit_code == 0, result.output
    assert client.calls == ["delete_database:prim"]


def test_destroy_declined_confirmation_does_nothing(client, monkeypatch):
    monkeypatch.setattr(Out, "confirm", lambda self, message, default=False: False)

    result = runner.invoke(app, ["db", "destroy", "prim"])

    assert result.exit_code == 0
    assert "destruction avoided" in result.output
    assert client.calls == []


def test_destroy_instance_mode(client):
    result = runner.invoke(app, ["db", "destroy", "logi", "--instance", "first"])

    assert result.exit_code == 0, result.output
    assert client.calls == ["delete_instance:logi:first"]


def test_replicate_logical_database(client, store):
    store.add_database("1", DatabaseSettings(host="logi.io", username="u", password="pw"))

    result = runner.invoke(app, ["db", "replicate", "logi", "fra"])

    assert result.exit_code == 0, result.output
    assert client.calls == ["replicate:logi:fra"]
    assert store.get_database_settings("i-9").host == "logi.io"


def test_replicate_invalid_region_exits_non_zero(client, store):
    result = runner.invoke(app, ["db", "replicate", "logi", "xyz"])

    assert result.exit_code == 1
    assert "xyz" in result.output


def test_show_rejects_non_logical_database(client):
    result = runner.invoke(app, ["db", "show", "prim"])

    assert result.exit_code == 1
    assert "logical" in result.output


def test_show_url_prints_stored_connection_url(client, store):
    store.add_database("1", DatabaseSettings(host="logi.io", username="u", password="pw"))

    result = runner.invoke(app, ["db", "show", "logi", "--url"])

    assert result.exit_code == 0, result.output
    assert "https://u:pw@logi.io" in result.output


def test_regions_marks_probed_default(client):
    result = runner.invoke(app, ["db", "regions"])

    assert result.exit_code == 0, result.output
    assert "Frankfurt" in result.output
    assert "[default]" in result.output


def test_db_commands_require_a_token(isolated_env):
    result = runner.invoke(app, ["db", "list"])

    assert result.exit_code == 1
    assert "not logged in" in result.output


def test_auth_token_and_logout(isolated_env):
    result = runner.invoke(app, ["auth", "token", "abc"])

    assert result.exit_code == 0, result.output
    settings_file = isolated_env / "settings.json"
    assert json.loads(settings_file.read_text())["token"] == "abc"

    result = runner.invoke(app, ["auth", "logout"])

    assert result.exit_code == 0, result.output
    assert "token" not in json.loads(settings_file.read_text())


def test_replicate_empty_region_exits_non_zero(client):
    result = runner.invoke(app, ["db", "replicate", "logi", ""])

    assert result.exit_code == 1
    assert "You must specify a database region ID" in result.output
    assert client.calls == []
