"""Environment-driven client configuration.

All knobs are read once per invocation into a frozen ``ClientConfig`` and
passed down explicitly; nothing below the CLI reads the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

API_BASEURL_ENV = "EDGEOPS_API_BASEURL"
REGION_PROBE_URL_ENV = "EDGEOPS_REGION_PROBE_URL"
CONFIG_DIR_ENV = "EDGEOPS_CONFIG_DIR"
TOKEN_ENV = "EDGEOPS_API_TOKEN"
HTTP_TIMEOUT_ENV = "EDGEOPS_HTTP_TIMEOUT"

DEFAULT_API_BASEURL = "https://api.chiseledge.com"
DEFAULT_REGION_PROBE_URL = "https://chisel-region.fly.dev"
SETTINGS_FILENAME = "settings.json"


@dataclass(frozen=True)
class ClientConfig:
    """
    Resolved configuration for one CLI invocation.

    Attributes:
        api_base_url: Control-plane base URL, without trailing slash.
        region_probe_url: Endpoint answering ``{"Server": "<region>"}``.
        settings_path: Local settings file (token, name cache, credentials).
        token_override: Bearer token taken from the environment, if any.
        http_timeout: Per-request timeout in seconds; None waits forever.
    """

    api_base_url: str = DEFAULT_API_BASEURL
    region_probe_url: str = DEFAULT_REGION_PROBE_URL
    settings_path: Path = Path.home() / ".config" / "edgeops" / SETTINGS_FILENAME
    token_override: str | None = None
    http_timeout: float | None = None


def _config_dir() -> Path:
    """Return the settings directory, honoring env overrides."""
    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    xdg = os.getenv("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "edgeops"


def _http_timeout() -> float | None:
    raw = os.getenv(HTTP_TIMEOUT_ENV, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def load_config() -> ClientConfig:
    """Build the configuration from the current environment."""
    base_url = os.getenv(API_BASEURL_ENV) or DEFAULT_API_BASEURL
    probe_url = os.getenv(REGION_PROBE_URL_ENV) or DEFAULT_REGION_PROBE_URL
    return ClientConfig(
        api_base_url=base_url.rstrip("/"),
        region_probe_url=probe_url,
        settings_path=_config_dir() / SETTINGS_FILENAME,
        token_override=os.getenv(TOKEN_ENV) or None,
        http_timeout=_http_timeout(),
    )
