from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from edgeops.core.adapters.settings_store import JsonSettingsStore  # noqa: E402


@pytest.fixture
def store(tmp_path: Path) -> JsonSettingsStore:
    return JsonSettingsStore(tmp_path / "settings.json")


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at an empty config dir and strip edgeops env overrides."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("EDGEOPS_CONFIG_DIR", str(config_dir))
    for var in (
        "EDGEOPS_API_TOKEN",
        "EDGEOPS_API_BASEURL",
        "EDGEOPS_REGION_PROBE_URL",
        "EDGEOPS_HTTP_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)
    return config_dir
