from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Tuple, Union
import logging

from locator.config.env import GeocodingConfig
from locator.ingestion.geocoding_client import GeocodingClient, RawPlace
from locator.resolver.errors import NotFoundError, TransportError, ValidationError
from locator.resolver.formatter import Candidate, format_candidates, to_candidate

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
TOO_SHORT_MESSAGE = f"Location name must be at least {MIN_QUERY_LENGTH} characters long"
FOUND_MESSAGE = "Location found successfully"


def not_found_message(query: str) -> str:
    return f'No locations found for "{query}". Please try a different search term.'


def ambiguous_message(query: str, count: int) -> str:
    return f'Found {count} possible locations for "{query}". Please select the correct one.'


class PlaceSource(Protocol):
    async def search(self, name: str) -> Tuple[RawPlace, ...]: ...


# Outcomes. success/results/exact_match mirror the HTTP body so that
# needs_disambiguation() works on either.

@dataclass(frozen=True)
class NotFound:
    query: str
    message: str
    invalid: bool = False  # rejected before the network (too short)

    success = False
    exact_match = False

    @property
    def results(self) -> Tuple[RawPlace, ...]:
        return ()


@dataclass(frozen=True)
class Resolved:
    query: str
    place: Candidate
    places: Tuple[RawPlace, ...] = ()
    automatic: bool = True
    # False only for a lone result whose name does not contain the query
    exact_match: bool = True

    success = True

    @property
    def results(self) -> Tuple[RawPlace, ...]:
        return self.places

    @property
    def message(self) -> str:
        return FOUND_MESSAGE


@dataclass(frozen=True)
class Ambiguous:
    query: str
    candidates: Tuple[Candidate, ...]
    places: Tuple[RawPlace, ...] = ()

    success = True
    exact_match = False

    @property
    def results(self) -> Tuple[RawPlace, ...]:
        return self.places

    @property
    def message(self) -> str:
        return ambiguous_message(self.query, len(self.candidates))


@dataclass(frozen=True)
class Failed:
    query: str
    reason: str

    success = False
    exact_match = False

    @property
    def results(self) -> Tuple[RawPlace, ...]:
        return ()

    @property
    def message(self) -> str:
        return self.reason


ResolutionOutcome = Union[NotFound, Resolved, Ambiguous, Failed]


def validate_query(query: Any) -> str:
    """Trim and check a raw query. Raises ValidationError when it is unusable."""
    if not isinstance(query, str) or not query.strip():
        raise ValidationError("Location name is required")
    q = query.strip()
    if len(q) < MIN_QUERY_LENGTH:
        raise ValidationError(TOO_SHORT_MESSAGE)
    return q


def classify(query: str, places: Tuple[RawPlace, ...]) -> ResolutionOutcome:
    """Turn the places returned for *query* into an outcome. No I/O."""
    if not places:
        raise NotFoundError(not_found_message(query))
    q = query.lower()
    exact = next((p for p in places if p.name.lower() == q), None)
    if len(places) == 1:
        close_match = q in places[0].name.lower()
        return Resolved(
            query=query,
            place=to_candidate(places[0]),
            places=places,
            exact_match=exact is not None or close_match,
        )
    if exact is not None:
        return Resolved(query=query, place=to_candidate(exact), places=places)
    return Ambiguous(query=query, candidates=tuple(format_candidates(places)), places=places)


class Resolver:
    """Resolve free text to a single place or a list of choices.

    ``resolve`` never raises: validation, empty results and transport failures
    all come back as outcome values whose messages are safe to show a user.
    """

    def __init__(self, source: PlaceSource):
        self._source = source

    async def resolve(self, query: str) -> ResolutionOutcome:
        raw = query if isinstance(query, str) else ""
        try:
            q = validate_query(query)
        except ValidationError as e:
            return NotFound(query=raw.strip(), message=e.message, invalid=True)

        try:
            places = await self._source.search(q)
            outcome = classify(q, places)
        except NotFoundError as e:
            logger.info("No locations for %r", q)
            return NotFound(query=q, message=e.message)
        except TransportError as e:
            return Failed(query=q, reason=e.message)
        except Exception:
            logger.exception("Unexpected error resolving %r", q)
            return Failed(query=q, reason=TransportError.message)

        logger.debug("Resolved %r -> %s", q, type(outcome).__name__)
        return outcome


async def resolve_location(query: str, cfg: Optional[GeocodingConfig] = None) -> ResolutionOutcome:
    """One-shot resolve with a client opened and closed around the call."""
    async with GeocodingClient(cfg) as client:
        return await Resolver(client).resolve(query)


@dataclass(frozen=True)
class LocationValidation:
    """JSON body of the location endpoint."""

    success: bool
    query: str
    results: Tuple[RawPlace, ...]
    exact_match: bool
    message: Optional[str] = None

    @staticmethod
    def from_outcome(outcome: ResolutionOutcome) -> "LocationValidation":
        return LocationValidation(
            success=outcome.success,
            query=outcome.query,
            results=tuple(outcome.results),
            exact_match=outcome.exact_match,
            message=outcome.message,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "query": self.query,
            "results": [p.to_dict() for p in self.results],
            "exact_match": self.exact_match,
            "message": self.message,
        }
