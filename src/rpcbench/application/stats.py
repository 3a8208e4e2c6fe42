from __future__ import annotations

import math
import statistics

from ..domain.errors import AggregationError
from ..domain.models import RunState, RunStats


def _percentile(sorted_samples: list[float], pct: float) -> float:
    # nearest-rank
    k = max(0, math.ceil(pct / 100.0 * len(sorted_samples)) - 1)
    return sorted_samples[k]


def _rate(count: int, total_ms: float) -> float:
    return count / (total_ms / 1000.0) if total_ms > 0 else 0.0


class StatsAggregator:
    """Latency samples and domain counters of a finished run, summarised order-independently."""

    def __init__(self) -> None:
        self.latencies: list[float] = []
        self.failed = 0
        self.blocks = 0
        self.logs = 0

    @classmethod
    def from_state(cls, state: RunState) -> "StatsAggregator":
        agg = cls()
        agg.latencies = list(state.latencies)
        agg.failed = state.failed
        agg.blocks = state.blocks
        agg.logs = state.logs
        return agg

    def summarize(self, total_ms: float) -> RunStats:
        if not self.latencies:
            raise AggregationError("no successful requests were recorded")
        samples = sorted(self.latencies)
        n = len(samples)
        return RunStats(
            requests=n,
            failed=self.failed,
            blocks=self.blocks,
            logs=self.logs,
            min_ms=samples[0],
            max_ms=samples[-1],
            mean_ms=statistics.fmean(samples),
            p50_ms=_percentile(samples, 50),
            p95_ms=_percentile(samples, 95),
            total_ms=total_ms,
            requests_per_s=_rate(n, total_ms),
            blocks_per_s=_rate(self.blocks, total_ms),
            logs_per_s=_rate(self.logs, total_ms),
        )


def summarize_state(state: RunState) -> RunStats | None:
    """Stats for a finished run, or None when nothing succeeded."""
    try:
        return StatsAggregator.from_state(state).summarize(state.elapsed_ms)
    except AggregationError:
        return None
