from __future__ import annotations
import os
from dataclasses import dataclass

DEFAULT_GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"


@dataclass(frozen=True)
class GeocodingConfig:
    base_url: str = DEFAULT_GEOCODING_URL
    count: int = 10
    language: str = "en"
    timeout_sec: float = 10.0
    user_agent: str = "locator/0.1"


def get_geocoding_config() -> GeocodingConfig:
    return GeocodingConfig(
        base_url=os.getenv("GEOCODING_BASE_URL", DEFAULT_GEOCODING_URL),
        timeout_sec=float(os.getenv("GEOCODING_TIMEOUT_SEC", "10.0")),
        user_agent=os.getenv("GEOCODING_USER_AGENT", "locator/0.1"),
    )


@dataclass(frozen=True)
class SearchConfig:
    debounce_sec: float = 0.3
    max_suggestions: int = 8
    min_query_length: int = 2


def get_search_config() -> SearchConfig:
    return SearchConfig(
        debounce_sec=float(os.getenv("SEARCH_DEBOUNCE_SEC", "0.3")),
        max_suggestions=int(os.getenv("SEARCH_MAX_SUGGESTIONS", "8")),
    )


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
