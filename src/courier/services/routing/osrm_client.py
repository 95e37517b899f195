"""HTTP client for the OSRM route service used for display geometry."""

from __future__ import annotations

import logging
import time
from typing import Sequence

import httpx

from ...config import settings

# Any public OSRM-compatible host can answer this; used only to probe reachability.
HEALTH_CHECK_COORDINATES = "13.388860,52.517037;13.385983,52.496891"

logger = logging.getLogger(__name__)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            transport=self.transport,
        )

    def route(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Fetch the road route through the given waypoints.

        Args:
            coordinates: Sequence of (lat, lon) tuples for the route waypoints

        Returns:
            The decoded OSRM response; ``routes[0].geometry`` is a GeoJSON LineString.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM route.")

        # OSRM expects "lon,lat;lon,lat;..."
        coordinate_str = ";".join(f"{lon},{lat}" for lat, lon in coordinates)
        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "false",
        }
        url = f"{self.base_url}/route/v1/{self.profile}/{coordinate_str}"

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    data = response.json()
                    if data.get("code") != "Ok":
                        error_msg = data.get("message", "Unknown OSRM route error")
                        raise ValueError(f"OSRM route request failed: {error_msg}")
                    return data
                except (httpx.TimeoutException, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"Failed to reach OSRM service at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        "OSRM network error, retrying in %.1fs (attempt %s/%s): %s",
                        wait_time,
                        attempt,
                        self.max_retries,
                        e,
                    )
                    time.sleep(wait_time)
                except (httpx.HTTPError, ValueError):
                    attempt += 1
                    if attempt > self.max_retries:
                        raise
                    time.sleep(self.backoff_seconds * attempt)
        finally:
            client.close()


def check_health(base_url: str | None = None, transport: httpx.BaseTransport | None = None) -> bool:
    """Return True when the OSRM service answers a minimal route request."""
    base = (base_url or settings.osrm_base_url or "").rstrip("/")
    if not base:
        return False
    url = f"{base}/route/v1/{settings.osrm_profile}/{HEALTH_CHECK_COORDINATES}"
    try:
        with httpx.Client(timeout=5.0, transport=transport) as client:
            response = client.get(url, params={"overview": "false"})
            response.raise_for_status()
            return response.json().get("code") == "Ok"
    except (httpx.HTTPError, ValueError):
        return False
