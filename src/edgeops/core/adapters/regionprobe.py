from __future__ import annotations

import logging

import requests

from edgeops.core.errors import ProbeFailed

logger = logging.getLogger(__name__)


class RegionProbeAdapter:
    """Asks an external geolocation service which region is closest."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def closest_region(self) -> str:
        """Return the region code the probe answers with.

        Raises:
            ProbeFailed: On network errors, undecodable JSON or a missing
                ``Server`` field.
        """
        try:
            resp = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ProbeFailed(f"region probe unreachable: {exc}") from exc
        try:
            payload = resp.json()
        except ValueError as exc:
            raise ProbeFailed("region probe answered with invalid JSON") from exc

        server = payload.get("Server") if isinstance(payload, dict) else None
        if not isinstance(server, str) or not server:
            raise ProbeFailed("region probe answer has no 'Server' field")
        logger.debug("region probe answered %s", server)
        return server
