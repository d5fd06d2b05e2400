"""Shell completion callbacks.

Completion runs inside the user's shell on every <TAB>; it must never
print or fail, so every error degrades to an empty suggestion list.
"""

from __future__ import annotations

import logging

from edgeops.cli.common.context import (
    DbAppContext,
    assemble_db_context,
    load_settings_store,
)
from edgeops.core.config import load_config
from edgeops.core.errors import EdgeOpsError

logger = logging.getLogger(__name__)


def _context() -> DbAppContext:
    config = load_config()
    store = load_settings_store(config)
    return assemble_db_context(config, store, require_token=False)


def _filter(candidates: list[str], incomplete: str) -> list[str]:
    return [c for c in candidates if c.startswith(incomplete)]


def complete_database_names(incomplete: str) -> list[str]:
    """Suggest primary database names, served from the name cache when warm."""
    try:
        appctx = _context()
    except EdgeOpsError as exc:
        logger.debug("database name completion unavailable: %s", exc)
        return []
    return _filter(appctx.names_cache.fetch_or_load(appctx.catalog), incomplete)


def complete_region_ids(incomplete: str) -> list[str]:
    """Suggest region codes from the region catalog."""
    try:
        appctx = _context()
    except EdgeOpsError as exc:
        logger.debug("region completion unavailable: %s", exc)
        return []
    return _filter(sorted(appctx.regions.list_region_ids()), incomplete)
