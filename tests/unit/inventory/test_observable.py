"""
Tests for inventory/observable.py

Exercises LiveQuery / Subscription against an in-memory value source so the
emission rules can be checked without a database.
"""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from inventory.observable import InvalidationTracker, LiveQuery
from tests.conftest_utils import WAIT_TIMEOUT, EmissionCollector

pytestmark = pytest.mark.unit


class ValueSource:
    """Stands in for a table: a value plus a tracker to announce changes."""

    def __init__(self, tracker: InvalidationTracker, value=None):
        self.tracker = tracker
        self.value = value
        self.fail_with = None

    def read(self):
        if self.fail_with is not None:
            raise self.fail_with
        return self.value

    def write(self, value, table="items"):
        self.value = value
        self.tracker.notify([table])


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="test-query")
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def tracker():
    return InvalidationTracker()


@pytest.fixture
def source(tracker):
    return ValueSource(tracker, value=[])


def _drain(executor):
    executor.submit(lambda: None).result(timeout=WAIT_TIMEOUT)


def _live(source, tracker, executor, **kwargs):
    return LiveQuery(source.read, ("items",), tracker, executor, **kwargs)


class TestInvalidationTracker:
    def test_notifies_only_matching_tables(self, tracker, mocker):
        items_observer = mocker.Mock(tables=frozenset({"items"}))
        other_observer = mocker.Mock(tables=frozenset({"other"}))
        tracker.add_observer(items_observer)
        tracker.add_observer(other_observer)

        tracker.notify(["items"])

        items_observer.on_invalidated.assert_called_once_with({"items"})
        other_observer.on_invalidated.assert_not_called()

    def test_add_is_idempotent_and_remove_detaches(self, tracker, mocker):
        observer = mocker.Mock(tables=frozenset({"items"}))
        tracker.add_observer(observer)
        tracker.add_observer(observer)
        assert tracker.observer_count == 1

        tracker.remove_observer(observer)
        tracker.remove_observer(observer)
        tracker.notify(["items"])

        assert tracker.observer_count == 0
        observer.on_invalidated.assert_not_called()

    def test_failing_observer_does_not_block_others(self, tracker, mocker):
        broken = mocker.Mock(tables=frozenset({"items"}))
        broken.on_invalidated.side_effect = RuntimeError("boom")
        healthy = mocker.Mock(tables=frozenset({"items"}))
        tracker.add_observer(broken)
        tracker.add_observer(healthy)

        tracker.notify(["items"])

        healthy.on_invalidated.assert_called_once()


class TestLiveQuery:
    def test_fetch_runs_query_synchronously(self, source, tracker, executor):
        source.value = ["a"]
        assert _live(source, tracker, executor).fetch() == ["a"]

    def test_subscribe_emits_current_value(self, source, tracker, executor):
        source.value = ["a"]
        collector = EmissionCollector()
        collector.subscribe(_live(source, tracker, executor))

        assert collector.wait_for_count(1)
        assert collector.values == [["a"]]

    def test_re_emits_on_every_invalidation(self, source, tracker, executor):
        collector = EmissionCollector()
        collector.subscribe(_live(source, tracker, executor))
        _drain(executor)

        source.write(["a"])
        source.write(["a"])
        _drain(executor)

        assert collector.values == [[], ["a"], ["a"]]

    def test_ignores_unrelated_tables(self, source, tracker, executor):
        collector = EmissionCollector()
        collector.subscribe(_live(source, tracker, executor))
        _drain(executor)

        source.write(["a"], table="other")
        _drain(executor)

        assert collector.values == [[]]

    def test_distinct_suppresses_repeats(self, source, tracker, executor):
        source.value = 1
        collector = EmissionCollector()
        collector.subscribe(_live(source, tracker, executor, distinct=True))
        _drain(executor)

        source.write(1)
        source.write(2)
        _drain(executor)

        assert collector.values == [1, 2]

    def test_skip_none_emits_initial_none(self, tracker, executor):
        source = ValueSource(tracker, value=None)
        collector = EmissionCollector()
        collector.subscribe(_live(source, tracker, executor, skip_none=True))
        _drain(executor)

        assert collector.values == [None]

    def test_skip_none_stops_emitting_after_value_disappears(self, tracker, executor):
        source = ValueSource(tracker, value="present")
        collector = EmissionCollector()
        collector.subscribe(_live(source, tracker, executor, skip_none=True))
        _drain(executor)

        source.write(None)
        _drain(executor)

        assert collector.values == ["present"]


class TestSubscription:
    def test_cancel_stops_emissions_and_completes_once(self, source, tracker, executor):
        collector = EmissionCollector()
        subscription = collector.subscribe(_live(source, tracker, executor))
        _drain(executor)

        subscription.cancel()
        subscription.cancel()
        source.write(["late"])
        _drain(executor)

        assert subscription.active is False
        assert collector.values == [[]]
        assert collector.completed == 1
        assert tracker.observer_count == 0

    def test_query_error_terminates_subscription(self, source, tracker, executor):
        collector = EmissionCollector()
        subscription = collector.subscribe(_live(source, tracker, executor))
        _drain(executor)

        source.fail_with = RuntimeError("disk I/O error")
        source.write(["ignored"])

        assert collector.wait_for_error()
        assert str(collector.errors[0]) == "disk I/O error"
        assert subscription.active is False
        assert tracker.observer_count == 0

    def test_callback_error_keeps_subscription_alive(self, source, tracker, executor):
        received = []

        def on_next(value):
            received.append(value)
            if len(received) == 1:
                raise ValueError("consumer bug")

        subscription = _live(source, tracker, executor).subscribe(on_next)
        _drain(executor)
        source.write(["a"])
        _drain(executor)

        assert received == [[], ["a"]]
        assert subscription.active is True

    def test_completes_when_executor_is_shut_down(self, source, tracker):
        pool = ThreadPoolExecutor(max_workers=1)
        pool.shutdown(wait=True)

        collector = EmissionCollector()
        subscription = collector.subscribe(_live(source, tracker, pool))

        assert subscription.active is False
        assert collector.completed == 1
        assert collector.values == []

    def test_emission_count(self, source, tracker, executor):
        subscription = _live(source, tracker, executor).subscribe(lambda value: None)
        _drain(executor)
        source.write(["a"])
        _drain(executor)

        assert subscription.emission_count == 2
