"""Region catalog, closest-region resolution and display names.

The catalog degrades to an empty set when the control plane cannot be
asked, and an empty catalog accepts every region. Region resolution never
fails because of the probe: any probe problem falls back to
``FALLBACK_REGION_ID`` after warning the user.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from edgeops.core.errors import EdgeOpsError, InvalidRegion, ProbeFailed

logger = logging.getLogger(__name__)

FALLBACK_REGION_ID = "ams"

FALLBACK_WARNING = (
    "We could not determine the deployment region closest to your physical "
    "location.\nThe region is defaulting to Amsterdam (ams). Consider "
    "specifying a region to select a better option using\n\n"
    "\tedgeops db create --region [region]\n\n"
    "Run `edgeops db regions` for a list of supported regions."
)

REGION_LOCATIONS: dict[str, str] = {
    "ams": "Amsterdam, Netherlands",
    "cdg": "Paris, France",
    "den": "Denver, Colorado (US)",
    "dfw": "Dallas, Texas (US)",
    "ewr": "Secaucus, NJ (US)",
    "fra": "Frankfurt, Germany",
    "gru": "São Paulo, Brazil",
    "hkg": "Hong Kong, Hong Kong",
    "iad": "Ashburn, Virginia (US)",
    "jnb": "Johannesburg, South Africa",
    "lax": "Los Angeles, California (US)",
    "lhr": "London, United Kingdom",
    "maa": "Chennai (Madras), India",
    "mad": "Madrid, Spain",
    "mia": "Miami, Florida (US)",
    "nrt": "Tokyo, Japan",
    "ord": "Chicago, Illinois (US)",
    "otp": "Bucharest, Romania",
    "scl": "Santiago, Chile",
    "sea": "Seattle, Washington (US)",
    "sin": "Singapore",
    "sjc": "Sunnyvale, California (US)",
    "syd": "Sydney, Australia",
    "waw": "Warsaw, Poland",
    "yul": "Montreal, Canada",
    "yyz": "Toronto, Canada",
}


def to_location(region_id: str) -> str:
    """Return a human-readable location; unknown codes render as their ID."""
    return REGION_LOCATIONS.get(region_id, f"Region ID: {region_id}")


def region_text(region_id: str) -> str:
    """Return ``"<location> (<code>)"`` for progress and summary lines."""
    return f"{to_location(region_id)} ({region_id})"


class RegionsAdapter(Protocol):
    """Interface for listing the regions the control plane accepts."""

    def list_region_ids(self) -> list[str]:
        ...


class RegionProbe(Protocol):
    """Interface for the external closest-region service."""

    def closest_region(self) -> str:
        ...


class RegionCatalog:
    """Set of valid region codes, degrading to "no restriction" on failure."""

    def __init__(self, adapter: RegionsAdapter):
        self.adapter = adapter

    def list_region_ids(self) -> frozenset[str]:
        """
        Return the valid region codes.

        Control-plane errors yield an empty set, which callers treat as
        "every region is valid", not as "no region exists".
        """
        try:
            return frozenset(self.adapter.list_region_ids())
        except EdgeOpsError as exc:
            logger.debug("region catalog unavailable, not restricting: %s", exc)
            return frozenset()

    def is_valid(self, region: str) -> bool:
        ids = self.list_region_ids()
        return not ids or region in ids


class RegionResolver:
    """Picks the region for a new database or replica.

    Args:
        catalog: Catalog used to validate requested and probed regions.
        probe: Closest-region service.
        warn: Callback receiving the user-facing fallback warning.
    """

    def __init__(
        self,
        catalog: RegionCatalog,
        probe: RegionProbe,
        warn: Callable[[str], None] | None = None,
    ):
        self.catalog = catalog
        self.probe = probe
        self.warn = warn

    def validate(self, region: str) -> str:
        """Return ``region`` if the catalog accepts it, else raise ``InvalidRegion``."""
        if not self.catalog.is_valid(region):
            raise InvalidRegion(region)
        return region

    def closest_region(self) -> str:
        """Return the probed region, or the fallback when probing does not work."""
        try:
            probed = self.probe.closest_region()
        except ProbeFailed as exc:
            logger.warning("region probe failed: %s", exc)
            return self._fallback()

        # The probe service knows regions that are not open for provisioning.
        if self.catalog.is_valid(probed):
            return probed
        logger.warning("probed region %s is not a valid region", probed)
        return self._fallback()

    def resolve(self, requested: str | None = None) -> str:
        """Validate ``requested`` or, when empty, pick the closest region."""
        if requested:
            return self.validate(requested)
        return self.closest_region()

    def _fallback(self) -> str:
        if self.warn is not None:
            self.warn(FALLBACK_WARNING)
        return FALLBACK_REGION_ID
