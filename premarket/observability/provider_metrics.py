"""Per-endpoint call telemetry for the market-data provider."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from time import perf_counter
from typing import Dict, Iterator, Optional


@dataclass
class EndpointStats:
    attempts: int = 0
    successes: int = 0
    failures: int = 0
    total_latency_ms: float = 0.0
    last_error: Optional[str] = None

    def record(self, success: bool, latency_ms: float, error: Optional[str] = None) -> None:
        self.attempts += 1
        self.total_latency_ms += latency_ms
        if success:
            self.successes += 1
        else:
            self.failures += 1
            self.last_error = error

    @property
    def avg_latency_ms(self) -> float:
        return self.total_latency_ms / self.attempts if self.attempts else 0.0


class ProviderMetrics:
    """Tracks attempts/success/failure/latency per endpoint (e.g. ``finnhub.quote``)."""

    def __init__(self) -> None:
        self._stats: Dict[str, EndpointStats] = {}

    def _get(self, endpoint: str) -> EndpointStats:
        if endpoint not in self._stats:
            self._stats[endpoint] = EndpointStats()
        return self._stats[endpoint]

    def timed_call(self, endpoint: str, success: bool, started_at: float, error: Optional[str] = None) -> None:
        latency_ms = (perf_counter() - started_at) * 1000.0
        self._get(endpoint).record(success=success, latency_ms=latency_ms, error=error)

    @contextmanager
    def track(self, endpoint: str) -> Iterator[None]:
        """Time the enclosed call; an exception counts as a failure and is re-raised."""
        started = perf_counter()
        try:
            yield
        except Exception as exc:
            self.timed_call(endpoint, False, started, error=str(exc))
            raise
        self.timed_call(endpoint, True, started)

    def summary(self) -> Dict[str, Dict[str, float]]:
        payload: Dict[str, Dict[str, float]] = {}
        for endpoint, st in self._stats.items():
            payload[endpoint] = {
                "attempts": st.attempts,
                "successes": st.successes,
                "failures": st.failures,
                "avg_latency_ms": round(st.avg_latency_ms, 2),
                "success_rate": round((st.successes / st.attempts) * 100.0, 2) if st.attempts else 0.0,
            }
        return payload

    def log_summary(self, logger: logging.Logger) -> None:
        for endpoint, stats in self.summary().items():
            logger.info(
                "%s: %d/%d ok, avg %.0f ms",
                endpoint,
                stats["successes"],
                stats["attempts"],
                stats["avg_latency_ms"],
            )
