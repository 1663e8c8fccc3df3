from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode, quote
import logging

import httpx

from locator.config.env import GeocodingConfig, get_geocoding_config
from locator.resolver.errors import TransportError

"""
Open-Meteo geocoding search (no key required).
We build the query, fetch it with httpx and validate the payload into RawPlace
records before anything downstream looks at it.
"""

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawPlace:
    id: int
    name: str
    latitude: float
    longitude: float
    elevation: float = 0.0
    feature_code: str = "UNKNOWN"
    country_code: Optional[str] = None
    admin1: Optional[str] = None
    admin2: Optional[str] = None
    admin3: Optional[str] = None
    admin4: Optional[str] = None
    timezone: Optional[str] = None
    population: Optional[int] = None
    country: Optional[str] = None
    country_id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def search_params(name: str, cfg: GeocodingConfig | None = None) -> Dict[str, Any]:
    cfg = cfg or get_geocoding_config()
    return {"name": name, "count": cfg.count, "language": cfg.language, "format": "json"}


def build_search_url(name: str, cfg: GeocodingConfig | None = None) -> str:
    cfg = cfg or get_geocoding_config()
    # quote (not quote_plus) so spaces encode as %20
    return f"{cfg.base_url}?{urlencode(search_params(name, cfg), quote_via=quote)}"


def _opt_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _opt_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_place(item: Any) -> RawPlace:
    """Validate one element of ``results``. Raises TransportError on a bad record."""
    if not isinstance(item, dict):
        raise TransportError(detail=f"result is not an object: {type(item).__name__}")
    try:
        place_id = int(item["id"])
        name = item["name"]
        lat = float(item["latitude"])
        lon = float(item["longitude"])
    except (KeyError, TypeError, ValueError) as e:
        raise TransportError(detail=f"result missing required field: {e!r}") from e
    if not isinstance(name, str) or not name:
        raise TransportError(detail="result has no usable name")
    try:
        elevation = float(item.get("elevation") or 0.0)
    except (TypeError, ValueError):
        elevation = 0.0
    return RawPlace(
        id=place_id,
        name=name,
        latitude=lat,
        longitude=lon,
        elevation=elevation,
        feature_code=_opt_str(item.get("feature_code")) or "UNKNOWN",
        country_code=_opt_str(item.get("country_code")),
        admin1=_opt_str(item.get("admin1")),
        admin2=_opt_str(item.get("admin2")),
        admin3=_opt_str(item.get("admin3")),
        admin4=_opt_str(item.get("admin4")),
        timezone=_opt_str(item.get("timezone")),
        population=_opt_int(item.get("population")),
        country=_opt_str(item.get("country")),
        country_id=_opt_int(item.get("country_id")),
    )


def parse_search_results(payload: Any) -> Tuple[RawPlace, ...]:
    """Parse a geocoding search payload into RawPlace records, in source order.

    A missing or empty ``results`` array is a valid empty answer.
    """
    if not isinstance(payload, dict):
        raise TransportError(detail=f"payload is not an object: {type(payload).__name__}")
    results = payload.get("results")
    if results is None:
        return ()
    if not isinstance(results, list):
        raise TransportError(detail="'results' is not a list")
    return tuple(parse_place(item) for item in results)


class GeocodingClient:
    """Async client for the geocoding search endpoint.

    Use as an async context manager so the underlying httpx.AsyncClient is
    closed::

        async with GeocodingClient() as client:
            places = await client.search("Springfield")
    """

    def __init__(self, cfg: GeocodingConfig | None = None) -> None:
        self._cfg = cfg or get_geocoding_config()
        self._client = httpx.AsyncClient(
            headers={"User-Agent": self._cfg.user_agent, "Accept": "application/json"},
            timeout=httpx.Timeout(self._cfg.timeout_sec),
        )

    async def __aenter__(self) -> "GeocodingClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def search(self, name: str) -> Tuple[RawPlace, ...]:
        """Fetch up to ``cfg.count`` places for *name*.

        Raises:
            TransportError: network failure, timeout, non-2xx status, or a
                payload that is not valid JSON of the expected shape.
        """
        logger.debug("GET %s", build_search_url(name, self._cfg))
        try:
            response = await self._client.get(self._cfg.base_url, params=search_params(name, self._cfg))
        except httpx.HTTPError as e:
            logger.warning("Geocoding request for %r failed: %s", name, e)
            raise TransportError(detail=str(e)) from e

        if response.status_code < 200 or response.status_code >= 300:
            logger.warning("Geocoding API responded with status %s for %r", response.status_code, name)
            raise TransportError(detail=f"status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning("Geocoding API returned malformed JSON for %r", name)
            raise TransportError(detail="malformed JSON") from e

        try:
            places = parse_search_results(payload)
        except TransportError as e:
            logger.warning("Geocoding payload for %r rejected: %s", name, e.detail)
            raise
        logger.debug("Geocoding returned %d result(s) for %r", len(places), name)
        return places
