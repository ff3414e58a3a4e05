"""
Unit tests for observation storage, the audit event log and metrics.
"""

import pytest
from prometheus_client import CollectorRegistry

from twap_oracle import TWAPOracle
from twap_oracle.events import EventLog
from twap_oracle.exceptions import DeviationExceededError, InsufficientHistoryError
from twap_oracle.metrics import OracleMetrics
from twap_oracle.store import HistorySnapshot, InMemoryObservationStore, Observation


def _obs(timestamp, price=100, cumulative=0):
    return Observation(timestamp=timestamp, price=price, cumulative_price=cumulative, cumulative_time=timestamp)


def test_store_tracks_origin_across_eviction():
    store = InMemoryObservationStore()
    assert store.origin is None
    for t in (5, 10, 15):
        store.append(_obs(t))
    assert store.origin == 5
    assert store.evict_before(2) == 2
    assert len(store) == 1
    assert store.origin == 5


def test_store_evict_bounds():
    store = InMemoryObservationStore()
    store.append(_obs(1))
    assert store.evict_before(0) == 0
    assert store.evict_before(5) == 1
    assert len(store) == 0


def test_snapshot_lookup():
    store = InMemoryObservationStore()
    for t in (10, 20, 30):
        store.append(_obs(t))
    snapshot = store.snapshot()
    assert snapshot.index_at_or_before(9) == -1
    assert snapshot.index_at_or_before(10) == 0
    assert snapshot.index_at_or_before(29) == 1
    assert snapshot.index_at_or_before(1000) == 2
    assert snapshot.first.timestamp == 10
    assert snapshot.last.timestamp == 30
    assert snapshot[-1].timestamp == 30
    with pytest.raises(IndexError):
        snapshot[3]


def test_snapshot_ignores_entries_appended_later():
    store = InMemoryObservationStore()
    store.append(_obs(10))
    snapshot = store.snapshot()
    store.append(_obs(20))
    assert len(snapshot) == 1
    assert snapshot.last.timestamp == 10
    assert snapshot.index_at_or_before(25) == 0


def test_empty_snapshot():
    snapshot = HistorySnapshot(items=[], count=0)
    assert not snapshot
    assert snapshot.first is None
    assert snapshot.last is None
    assert snapshot.observations() == ()


def test_oracle_accepts_injected_store():
    store = InMemoryObservationStore()
    oracle = TWAPOracle(owner="owner", store=store)
    oracle.update_price("owner", 100, now=1)
    assert len(store) == 1
    assert store.snapshot().last.price == 100


def test_event_log_is_bounded():
    log = EventLog(max_entries=3)
    for i in range(5):
        log.record("PriceUpdated", "feeder", i, price=i)
    assert len(log) == 3
    assert [e["timestamp"] for e in log.recent(10)] == [2, 3, 4]
    assert log.recent(0) == []
    with pytest.raises(ValueError):
        EventLog(max_entries=0)


def test_metrics_track_updates_and_queries():
    registry = CollectorRegistry()
    metrics = OracleMetrics(registry=registry, oracle_name="eth-usd")
    oracle = TWAPOracle(owner="owner", metrics=metrics)

    oracle.update_price("owner", 100, now=0)
    with pytest.raises(DeviationExceededError):
        oracle.update_price("owner", 1000, now=1)
    oracle.pause("owner")
    oracle.emergency_update_price("owner", 1000, now=2)
    oracle.get_twap(2)
    with pytest.raises(InsufficientHistoryError):
        oracle.get_twap(3)

    def value(name, **labels):
        return registry.get_sample_value(name, {"oracle": "eth-usd", **labels})

    assert value("twap_oracle_updates_total", path="normal", status="accepted") == 1
    assert value("twap_oracle_updates_total", path="normal", status="DeviationExceededError") == 1
    assert value("twap_oracle_updates_total", path="emergency", status="accepted") == 1
    assert value("twap_oracle_twap_queries_total", status="ok") == 1
    assert value("twap_oracle_twap_queries_total", status="InsufficientHistoryError") == 1
    assert value("twap_oracle_latest_price") == 1000
    assert value("twap_oracle_observations") == 2
    assert value("twap_oracle_paused") == 1
