"""
Unit tests for UpdatePipeline and the deviation helpers.
"""

import pytest

from twap_oracle.access_control import AccessController
from twap_oracle.accumulator import PriceAccumulator
from twap_oracle.circuit_breaker import CircuitBreaker
from twap_oracle.exceptions import (
    DeviationExceededError,
    InvalidInputError,
    NotOwnerError,
    PausedError,
    UnauthorizedError,
)
from twap_oracle.pipeline import UpdatePipeline, deviation_bps, exceeds_deviation


@pytest.fixture
def pipeline():
    access = AccessController("owner")
    access.add_authorized_updater("owner", "feeder")
    breaker = CircuitBreaker(access)
    return UpdatePipeline(access, breaker, PriceAccumulator(), max_deviation_bps=2000)


def test_deviation_helpers():
    assert deviation_bps(121, 100) == 2100
    assert deviation_bps(79, 100) == 2100
    assert deviation_bps(100, 100) == 0
    assert exceeds_deviation(121, 100, 2000)
    assert not exceeds_deviation(120, 100, 2000)
    assert not exceeds_deviation(119, 100, 2000)
    # 1 unit over the bound rounds down to 2000 bps but is still caught
    assert deviation_bps(1_200_001, 1_000_000) == 2000
    assert exceeds_deviation(1_200_001, 1_000_000, 2000) is True
    assert exceeds_deviation(1_200_000, 1_000_000, 2000) is False


def test_commit_through_normal_path(pipeline):
    first = pipeline.update_price("feeder", 100, 0)
    second = pipeline.update_price("feeder", 110, 10)
    assert first.cumulative_price == 0
    assert second.cumulative_price == 1000
    assert len(pipeline.accumulator) == 2


def test_rejections_leave_history_untouched(pipeline):
    pipeline.update_price("feeder", 100, 0)

    with pytest.raises(UnauthorizedError):
        pipeline.update_price("mallory", 100, 1)
    with pytest.raises(DeviationExceededError):
        pipeline.update_price("feeder", 150, 1)
    with pytest.raises(InvalidInputError):
        pipeline.update_price("feeder", -100, 1)

    pipeline.breaker.pause("owner")
    with pytest.raises(PausedError):
        pipeline.update_price("feeder", 100, 1)

    assert len(pipeline.accumulator) == 1


def test_emergency_path(pipeline):
    pipeline.update_price("feeder", 100, 0)
    pipeline.breaker.pause("owner")

    observation = pipeline.emergency_update_price("owner", 10_000, 5)
    assert observation.price == 10_000
    assert observation.cumulative_price == 500

    with pytest.raises(NotOwnerError):
        pipeline.emergency_update_price("feeder", 100, 6)
    with pytest.raises(InvalidInputError):
        pipeline.emergency_update_price("owner", 0, 6)
    assert len(pipeline.accumulator) == 2


def test_deviation_measured_from_emergency_price(pipeline):
    pipeline.update_price("feeder", 100, 0)
    pipeline.emergency_update_price("owner", 1000, 1)
    pipeline.update_price("feeder", 1100, 2)
    with pytest.raises(DeviationExceededError):
        pipeline.update_price("feeder", 100, 3)
