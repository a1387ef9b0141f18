"""
Live query streams backed by table invalidation.

A LiveQuery wraps a read against the item database. Subscribing to it runs
the query on the database's query executor, delivers the result, and then
re-runs the query every time a committed write invalidates one of the
tables it reads from.

Usage:
    subscription = dao.get_all_items().subscribe(
        on_next=lambda items: print(items),
        on_error=lambda exc: print("failed", exc),
    )
    ...
    subscription.cancel()

Thread Safety:
- InvalidationTracker may be notified from any thread.
- Emissions for one subscription are delivered in order on the query
  executor thread; callbacks must not block for long.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor
from typing import (
    Callable,
    Generic,
    Iterable,
    List,
    Optional,
    Protocol,
    Set,
    TypeVar,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NOTHING = object()
_GONE = object()


class InvalidationObserver(Protocol):
    """Anything interested in writes to a set of tables."""

    tables: frozenset

    def on_invalidated(self, tables: Set[str]) -> None:
        ...


class InvalidationTracker:
    """
    Fan-out of "table changed" notifications to live observers.

    The write path calls notify() after each commit that touched rows;
    observers whose tables intersect the changed set are called outside
    the tracker lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._observers: List[InvalidationObserver] = []

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def add_observer(self, observer: InvalidationObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def remove_observer(self, observer: InvalidationObserver) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def notify(self, tables: Iterable[str]) -> None:
        """Tell every observer of any of ``tables`` that they changed."""
        changed = set(tables)
        with self._lock:
            targets = [o for o in self._observers if o.tables & changed]

        logger.debug(f"Invalidated {sorted(changed)} -> {len(targets)} observer(s)")
        for observer in targets:
            try:
                observer.on_invalidated(changed)
            except Exception as e:
                logger.error(f"Invalidation observer error: {e}")


class LiveQuery(Generic[T]):
    """
    A query result that stays current.

    Args:
        query: Callable running the read and returning its result.
        tables: Tables the query reads from.
        tracker: Invalidation tracker of the owning database.
        executor: Executor running re-queries and delivering emissions.
        distinct: Skip emissions equal to the previous one.
        skip_none: After the first emission, never emit ``None``
            (a deleted row stops the stream from emitting until it
            reappears).
    """

    def __init__(
        self,
        query: Callable[[], T],
        tables: Iterable[str],
        tracker: InvalidationTracker,
        executor: Executor,
        distinct: bool = False,
        skip_none: bool = False,
    ):
        self._query = query
        self.tables = frozenset(tables)
        self._tracker = tracker
        self._executor = executor
        self.distinct = distinct
        self.skip_none = skip_none

    def fetch(self) -> T:
        """Run the query once on the calling thread and return a snapshot."""
        return self._query()

    def subscribe(
        self,
        on_next: Callable[[T], None],
        on_error: Optional[Callable[[BaseException], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> "Subscription[T]":
        """
        Start observing the query.

        The current result is delivered first, then one emission per
        invalidation until the subscription is cancelled or fails.
        """
        subscription = Subscription(self, on_next, on_error, on_complete)
        self._tracker.add_observer(subscription)
        subscription.request_refresh()
        return subscription


class Subscription(Generic[T]):
    """Handle for one observer of a LiveQuery."""

    def __init__(
        self,
        live_query: LiveQuery[T],
        on_next: Callable[[T], None],
        on_error: Optional[Callable[[BaseException], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
    ):
        self._live_query = live_query
        self._on_next = on_next
        self._on_error = on_error
        self._on_complete = on_complete
        self._lock = threading.Lock()
        self._active = True
        self._last: object = _NOTHING
        self.emission_count = 0

    @property
    def tables(self) -> frozenset:
        return self._live_query.tables

    @property
    def active(self) -> bool:
        with self._lock:
            return self._active

    def on_invalidated(self, tables: Set[str]) -> None:
        self.request_refresh()

    def request_refresh(self) -> None:
        """Queue a re-query on the query executor."""
        if not self.active:
            return
        try:
            self._live_query._executor.submit(self._refresh)
        except RuntimeError:
            # Executor shut down together with the database
            logger.debug("Query executor unavailable; completing subscription")
            self.cancel()

    def cancel(self) -> None:
        """Detach from future notifications. Safe to call more than once."""
        with self._lock:
            if not self._active:
                return
            self._active = False
        self._live_query._tracker.remove_observer(self)
        if self._on_complete is not None:
            try:
                self._on_complete()
            except Exception as e:
                logger.error(f"Subscription completion callback error: {e}")

    def _refresh(self) -> None:
        if not self.active:
            return

        try:
            value = self._live_query.fetch()
        except Exception as exc:
            self._fail(exc)
            return

        with self._lock:
            if not self._active or not self._should_emit(value):
                return
            self._last = value
            self.emission_count += 1

        try:
            self._on_next(value)
        except Exception as e:
            logger.error(f"Subscriber callback error: {e}")

    def _should_emit(self, value: object) -> bool:
        first = self._last is _NOTHING
        if first:
            return True
        if self._live_query.skip_none and value is None:
            # A row that comes back later must emit even if unchanged
            self._last = _GONE
            return False
        if self._live_query.distinct and value == self._last:
            return False
        return True

    def _fail(self, exc: BaseException) -> None:
        """Terminate the subscription with an error."""
        with self._lock:
            if not self._active:
                return
            self._active = False
        self._live_query._tracker.remove_observer(self)
        logger.error(f"Live query failed: {exc}")
        if self._on_error is not None:
            try:
                self._on_error(exc)
            except Exception as e:
                logger.error(f"Subscriber error callback failed: {e}")
