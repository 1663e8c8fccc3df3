from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Set, Tuple
import asyncio
import inspect
import logging

from locator.config.env import SearchConfig, get_search_config
from locator.resolver.core import Ambiguous, ResolutionOutcome, Resolved, Resolver
from locator.resolver.formatter import Candidate, format_candidates, short_name

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please enter a valid city name"


class LocationHost(Protocol):
    """What the host application provides: persist a chosen location."""

    def add_location(self, name: str, latitude: float, longitude: float) -> Any: ...


class ActionKind(str, Enum):
    HIDE = "hide"
    SUGGEST = "suggest"
    COMMIT = "commit"


@dataclass(frozen=True)
class UIAction:
    kind: ActionKind
    suggestions: Tuple[Candidate, ...] = ()
    message: Optional[str] = None
    committed: Optional[str] = None  # short name handed to the host


def suggestion_action(outcome: ResolutionOutcome, limit: int) -> UIAction:
    """Map a lookup outcome to what the suggestion list should show."""
    if isinstance(outcome, Ambiguous):
        return UIAction(ActionKind.SUGGEST, tuple(outcome.candidates[:limit]), outcome.message)
    if isinstance(outcome, Resolved):
        cands = format_candidates(outcome.places) if outcome.places else [outcome.place]
        return UIAction(ActionKind.SUGGEST, tuple(cands[:limit]), outcome.message)
    return UIAction(ActionKind.HIDE, message=outcome.message)


class SearchSession:
    """Keystroke-driven search for one input field.

    ``on_query_change`` restarts a debounce timer owned by this session; only
    the last timer fires. Every dispatched lookup is numbered and a response
    is applied only if it belongs to the latest dispatch, so a slow answer to
    an old keystroke never overwrites a newer one. Lookups already in flight
    are left to finish.

    Must be driven from a running event loop.
    """

    def __init__(
        self,
        resolver: Resolver,
        host: LocationHost,
        cfg: Optional[SearchConfig] = None,
        on_action: Optional[Callable[[UIAction], Any]] = None,
    ):
        self._resolver = resolver
        self._host = host
        self._cfg = cfg or get_search_config()
        self._on_action = on_action
        self._timer: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self._latest_request = 0
        self.text = ""
        self.suggestions: Tuple[Candidate, ...] = ()

    @property
    def show_suggestions(self) -> bool:
        return bool(self.suggestions)

    # -- typing -----------------------------------------------------------

    def on_query_change(self, text: str) -> None:
        self.text = text
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().create_task(self._debounced(text))

    async def _debounced(self, text: str) -> None:
        await asyncio.sleep(self._cfg.debounce_sec)
        task = asyncio.get_running_loop().create_task(self.search(text))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def search(self, text: str) -> Optional[UIAction]:
        """Look up *text* for the suggestion list. Returns None when the answer went stale."""
        q = text.strip()
        self._latest_request += 1
        request_id = self._latest_request
        if len(q) < self._cfg.min_query_length:
            return self._apply(UIAction(ActionKind.HIDE))

        outcome = await self._resolver.resolve(q)
        if request_id != self._latest_request:
            logger.debug("Dropping stale lookup #%d for %r", request_id, q)
            return None
        return self._apply(suggestion_action(outcome, self._cfg.max_suggestions))

    # -- explicit actions ---------------------------------------------------

    async def add(self, text: str) -> UIAction:
        """The "Add" button: commit an automatic match, or offer the choices."""
        q = text.strip()
        if not q:
            return self._apply(UIAction(ActionKind.HIDE, message=EMPTY_INPUT_MESSAGE))
        # pending suggestions are moot once the user asks explicitly
        self._cancel_timer()
        self._latest_request += 1

        outcome = await self._resolver.resolve(q)
        if isinstance(outcome, Resolved):
            return await self.select(outcome.place)
        if isinstance(outcome, Ambiguous):
            return self._apply(
                UIAction(ActionKind.SUGGEST, tuple(outcome.candidates[: self._cfg.max_suggestions]), outcome.message)
            )
        return self._apply(UIAction(ActionKind.HIDE, message=outcome.message))

    async def select(self, candidate: Candidate) -> UIAction:
        """Commit a candidate the user tapped (or an automatic match)."""
        # a queued or in-flight lookup must not refill the list after the commit
        self._cancel_timer()
        self._latest_request += 1
        name = short_name(candidate)
        result = self._host.add_location(name, candidate.latitude, candidate.longitude)
        if inspect.isawaitable(result):
            await result
        logger.info("Added location %r (%.4f, %.4f)", name, candidate.latitude, candidate.longitude)
        self.text = ""
        return self._apply(UIAction(ActionKind.COMMIT, committed=name))

    # -- lifecycle ----------------------------------------------------------

    async def wait_idle(self) -> None:
        """Wait until no timer is pending and no lookup is in flight."""
        while True:
            pending = [t for t in self._inflight if not t.done()]
            if self._timer is not None and not self._timer.done():
                pending.append(self._timer)
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def close(self) -> None:
        self._cancel_timer()
        # answers still in flight are dropped on arrival
        self._latest_request += 1

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def _apply(self, action: UIAction) -> UIAction:
        self.suggestions = action.suggestions
        if self._on_action is not None:
            self._on_action(action)
        return action
