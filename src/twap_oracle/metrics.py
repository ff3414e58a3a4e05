"""
Prometheus metrics for the TWAP oracle.

Tracks accepted/rejected updates per path, TWAP query outcomes, the latest
price, retained history size and breaker state.
"""

from prometheus_client import REGISTRY, Counter, Gauge


class OracleMetrics:
    """Metrics for oracle updates and queries."""

    def __init__(self, registry=None, oracle_name: str = "twap_oracle"):
        self.registry = registry or REGISTRY
        self.oracle_name = oracle_name

        self.updates_total = Counter(
            'twap_oracle_updates_total',
            'Price update attempts by path and outcome',
            ['oracle', 'path', 'status'],
            registry=self.registry
        )

        self.twap_queries_total = Counter(
            'twap_oracle_twap_queries_total',
            'TWAP queries by outcome',
            ['oracle', 'status'],
            registry=self.registry
        )

        self.latest_price = Gauge(
            'twap_oracle_latest_price',
            'Latest accepted price in base units',
            ['oracle'],
            registry=self.registry
        )

        self.observations = Gauge(
            'twap_oracle_observations',
            'Observations currently retained',
            ['oracle'],
            registry=self.registry
        )

        self.paused = Gauge(
            'twap_oracle_paused',
            'Whether normal updates are paused (1) or active (0)',
            ['oracle'],
            registry=self.registry
        )

    def record_update(self, path: str, status: str) -> None:
        self.updates_total.labels(oracle=self.oracle_name, path=path, status=status).inc()

    def record_commit(self, price: int, retained: int) -> None:
        self.latest_price.labels(oracle=self.oracle_name).set(price)
        self.observations.labels(oracle=self.oracle_name).set(retained)

    def record_twap_query(self, status: str) -> None:
        self.twap_queries_total.labels(oracle=self.oracle_name, status=status).inc()

    def set_paused(self, paused: bool) -> None:
        self.paused.labels(oracle=self.oracle_name).set(1 if paused else 0)
