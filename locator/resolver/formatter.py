from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence
import math

from locator.ingestion.geocoding_client import RawPlace

# GeoNames feature codes for populated places (city, town, seat of admin division, capital)
POPULATED_PLACE_CODES = frozenset({"PPL", "PPLA", "PPLA2", "PPLA3", "PPLA4", "PPLC"})
LARGE_POPULATION = 100_000


@dataclass(frozen=True)
class Candidate:
    id: int
    name: str
    display_name: str
    country: Optional[str]
    admin1: Optional[str]
    latitude: float
    longitude: float

    @property
    def short_name(self) -> str:
        return short_name(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "display_name": self.display_name,
            "short_name": self.short_name,
            "country": self.country,
            "admin1": self.admin1,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def display_label(place: RawPlace) -> str:
    """Human label for a suggestion list, e.g. "Springfield, Illinois, United States (114k)"."""
    label = place.name
    if place.admin1 and place.admin1 != place.name:
        label += f", {place.admin1}"
    if place.country and place.country != place.admin1:
        label += f", {place.country}"
    if place.population and place.population > LARGE_POPULATION:
        label += f" ({_round_half_up(place.population / 1000)}k)"
    return label


def to_candidate(place: RawPlace) -> Candidate:
    return Candidate(
        id=place.id,
        name=place.name,
        display_name=display_label(place),
        country=place.country or place.country_code,
        admin1=place.admin1,
        latitude=place.latitude,
        longitude=place.longitude,
    )


def format_candidates(places: Iterable[RawPlace]) -> List[Candidate]:
    return [to_candidate(p) for p in places]


def short_name(candidate: Candidate) -> str:
    """Canonical name persisted by the host: "{name}, {admin1}", "{name}, {country}" or the bare name."""
    if candidate.admin1 and candidate.admin1 != candidate.name:
        return f"{candidate.name}, {candidate.admin1}"
    if candidate.country and candidate.country != candidate.name:
        return f"{candidate.name}, {candidate.country}"
    return candidate.name


def best_match(places: Sequence[RawPlace]) -> Optional[RawPlace]:
    """Pick a place without asking the user.

    Prefers populated places, then the largest population among them (missing
    population counts as 0; the first wins a tie). Falls back to the first
    place in source order when nothing is a populated place.
    """
    if not places:
        return None
    best: Optional[RawPlace] = None
    for p in places:
        if p.feature_code not in POPULATED_PLACE_CODES:
            continue
        if best is None or (p.population or 0) > (best.population or 0):
            best = p
    return best if best is not None else places[0]


def needs_disambiguation(response: Any) -> bool:
    """True when the user has to choose: a successful lookup with several results and no exact match.

    Accepts anything exposing ``success``, ``results`` and ``exact_match``,
    either as attributes (outcomes, LocationValidation) or as mapping keys
    (the decoded JSON body of the HTTP endpoint).
    """
    if isinstance(response, Mapping):
        success = response.get("success")
        results = response.get("results") or ()
        exact = response.get("exact_match")
    else:
        success = getattr(response, "success", False)
        results = getattr(response, "results", None) or ()
        exact = getattr(response, "exact_match", False)
    return bool(success) and len(results) > 1 and not exact
