"""
Debounced search controller for Limud transcript search.

A free-text query and two option toggles form one search intent.  Each
change to the intent (re)starts a quiet-period timer; only the last
intent within the period triggers a search.  Clearing the query is
immediate and bypasses the timer.

The controller is split into a pure reducer (:func:`reduce`) over
:class:`ControllerState` and an effect layer
(:class:`DebouncedQueryController`) that owns the timer, starts
searches and notifies the results listener.

In-flight searches are never cancelled by a newer intent: whichever
search completes last assigns the results.
"""

from __future__ import annotations

import asyncio
import enum
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Union

import structlog

from limud_common.config import Settings, get_settings
from limud_common.models import SearchableDocument, SearchOptions, SearchResult
from limud_common.utils import maybe_await

from search.engine import TranscriptSearchEngine

logger = structlog.get_logger()

DEFAULT_DELAY_S: float = 0.3

ResultsCallback = Callable[[list[SearchResult]], Union[Awaitable[Any], Any]]


class CancellableTimer:
    """A single-shot timer on the running event loop.

    Starting the timer cancels any pending run first, so at most one
    callback is ever scheduled.
    """

    def __init__(self) -> None:
        self._handle: asyncio.TimerHandle | None = None

    def start(self, delay_s: float, callback: Callable[..., Any], *args: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay_s, self._fire, callback, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def pending(self) -> bool:
        """Whether a callback is scheduled and not yet run."""
        return self._handle is not None

    def _fire(self, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self._handle = None
        callback(*args)


# ── state ──


class SearchPhase(str, enum.Enum):
    """Lifecycle phase of the search controller."""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    SEARCHING = "searching"


@dataclass(frozen=True)
class SearchIntent:
    """The query text plus options that together determine one search."""

    query: str = ""
    options: SearchOptions = field(default_factory=SearchOptions)

    @property
    def is_blank(self) -> bool:
        return not self.query.strip()


@dataclass(frozen=True)
class ControllerState:
    """Snapshot of the controller.

    Attributes:
        intent: The current search intent.
        results: Ranked results of the last completed search.
        debouncing: Whether a debounce timer is pending.
        in_flight: Number of searches started and not yet finished.
    """

    intent: SearchIntent = field(default_factory=SearchIntent)
    results: tuple[SearchResult, ...] = ()
    debouncing: bool = False
    in_flight: int = 0

    @property
    def phase(self) -> SearchPhase:
        if self.debouncing:
            return SearchPhase.DEBOUNCING
        if self.in_flight:
            return SearchPhase.SEARCHING
        return SearchPhase.IDLE


# ── events ──


@dataclass(frozen=True)
class IntentChanged:
    intent: SearchIntent


@dataclass(frozen=True)
class QueryCleared:
    pass


@dataclass(frozen=True)
class DebounceElapsed:
    pass


@dataclass(frozen=True)
class SearchCompleted:
    results: tuple[SearchResult, ...]


@dataclass(frozen=True)
class SearchFailed:
    pass


Event = Union[IntentChanged, QueryCleared, DebounceElapsed, SearchCompleted, SearchFailed]


def reduce(state: ControllerState, event: Event) -> ControllerState:
    """Return the state that follows *state* after *event*.

    A blank intent clears results immediately instead of debouncing.
    """
    if isinstance(event, IntentChanged):
        if event.intent.is_blank:
            return replace(state, intent=event.intent, results=(), debouncing=False)
        return replace(state, intent=event.intent, debouncing=True)
    if isinstance(event, QueryCleared):
        cleared = replace(state.intent, query="")
        return replace(state, intent=cleared, results=(), debouncing=False)
    if isinstance(event, DebounceElapsed):
        return replace(state, debouncing=False, in_flight=state.in_flight + 1)
    if isinstance(event, SearchCompleted):
        return replace(state, results=event.results, in_flight=max(0, state.in_flight - 1))
    if isinstance(event, SearchFailed):
        return replace(state, in_flight=max(0, state.in_flight - 1))
    raise TypeError(f"unknown search controller event: {event!r}")


# ── effects ──


class DebouncedQueryController:
    """Coordinates when searches run relative to user input.

    Args:
        engine: Engine that performs a search pass.
        documents: Candidate documents searched on every pass.
        delay_s: Quiet period before an intent is searched.
        on_search_results: Optional listener called with the full ranked
            result list after each completed search, and with ``[]``
            when the query is cleared.  May be a coroutine function.
    """

    def __init__(
        self,
        engine: TranscriptSearchEngine,
        documents: Sequence[SearchableDocument] = (),
        *,
        delay_s: float = DEFAULT_DELAY_S,
        on_search_results: ResultsCallback | None = None,
    ) -> None:
        self._engine = engine
        self._documents = list(documents)
        self._delay_s = delay_s
        self._on_search_results = on_search_results
        self._state = ControllerState()
        self._timer = CancellableTimer()
        self._tasks: set[asyncio.Task[None]] = set()

    @classmethod
    def from_settings(
        cls,
        engine: TranscriptSearchEngine,
        documents: Sequence[SearchableDocument] = (),
        settings: Settings | None = None,
        *,
        on_search_results: ResultsCallback | None = None,
    ) -> DebouncedQueryController:
        """Build a controller whose quiet period is ``search_debounce_ms``."""
        settings = settings or get_settings()
        return cls(
            engine,
            documents,
            delay_s=settings.search_debounce_ms / 1000,
            on_search_results=on_search_results,
        )

    # ── public API ──

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def phase(self) -> SearchPhase:
        return self._state.phase

    @property
    def results(self) -> list[SearchResult]:
        return list(self._state.results)

    def set_query(self, query: str) -> None:
        self._change_intent(replace(self._state.intent, query=query))

    def set_case_sensitive(self, value: bool) -> None:
        options = self._state.intent.options
        self.set_options(SearchOptions(case_sensitive=value, whole_words=options.whole_words))

    def set_whole_words(self, value: bool) -> None:
        options = self._state.intent.options
        self.set_options(SearchOptions(case_sensitive=options.case_sensitive, whole_words=value))

    def set_options(self, options: SearchOptions) -> None:
        self._change_intent(replace(self._state.intent, options=options))

    def set_documents(self, documents: Sequence[SearchableDocument]) -> None:
        """Replace the candidate documents; a non-blank query is searched again."""
        self._documents = list(documents)
        if not self._state.intent.is_blank:
            self._dispatch(IntentChanged(self._state.intent))
            self._timer.start(self._delay_s, self._on_debounce_elapsed)

    def clear(self) -> None:
        """Empty the query and results at once, notifying the listener with ``[]``."""
        self._timer.cancel()
        self._dispatch(QueryCleared())
        self._emit([])

    async def wait_idle(self) -> None:
        """Wait until no debounce timer is pending and no search is running."""
        while self._timer.pending or self._tasks:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            else:
                await asyncio.sleep(min(self._delay_s, 0.01) or 0)

    async def aclose(self) -> None:
        """Cancel the pending timer and any running searches."""
        self._timer.cancel()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    # ── internal ──

    def _dispatch(self, event: Event) -> None:
        self._state = reduce(self._state, event)

    def _change_intent(self, intent: SearchIntent) -> None:
        if intent == self._state.intent:
            return
        if intent.is_blank:
            self._timer.cancel()
            self._dispatch(IntentChanged(intent))
            self._emit([])
            return
        self._dispatch(IntentChanged(intent))
        self._timer.start(self._delay_s, self._on_debounce_elapsed)

    def _on_debounce_elapsed(self) -> None:
        self._dispatch(DebounceElapsed())
        intent = self._state.intent
        task = asyncio.get_running_loop().create_task(
            self._run_search(intent, list(self._documents)),
            name="transcript-search",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_search(self, intent: SearchIntent, documents: list[SearchableDocument]) -> None:
        try:
            results = await self._engine.search(documents, intent.query, intent.options)
        except Exception as exc:  # noqa: BLE001
            logger.error("search_error", error=str(exc))
            self._dispatch(SearchFailed())
            return
        self._dispatch(SearchCompleted(tuple(results)))
        if self._on_search_results is not None:
            try:
                await maybe_await(self._on_search_results, list(results))
            except Exception as exc:  # noqa: BLE001
                logger.error("search_results_callback_failed", error=str(exc))

    def _emit(self, results: list[SearchResult]) -> None:
        """Notify the listener synchronously; awaitable returns run as tasks."""
        if self._on_search_results is None:
            return
        outcome = self._on_search_results(results)
        if asyncio.iscoroutine(outcome) or isinstance(outcome, asyncio.Future):
            task = asyncio.ensure_future(outcome)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
