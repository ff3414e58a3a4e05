"""
Test configuration and fixtures
"""
import sys
from pathlib import Path

# Add src to Python path so tests run without installing the package
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

import pytest

from twap_oracle import OracleConfig, TWAPOracle

OWNER = "0xOwner000000000000000000000000000000000001"
FEEDER = "0xFeeder00000000000000000000000000000000002"
STRANGER = "0xStranger000000000000000000000000000000003"


class FakeClock:
    """Manually advanced clock returning integer seconds."""

    def __init__(self, start: int = 1_700_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_oracle(clock):
    """Factory for oracles owned by OWNER with FEEDER authorized."""

    def _make(**config_kwargs) -> TWAPOracle:
        config = OracleConfig(**config_kwargs) if config_kwargs else OracleConfig()
        oracle = TWAPOracle(owner=OWNER, config=config, clock=clock)
        oracle.add_authorized_updater(OWNER, FEEDER)
        return oracle

    return _make


@pytest.fixture
def oracle(make_oracle):
    return make_oracle(default_window=20, max_deviation_bps=2000)
