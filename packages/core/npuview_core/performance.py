"""Refresh-loop budget sampling and poll interval hints."""

from __future__ import annotations

from dataclasses import dataclass

import psutil


MIN_POLL_MS = 250
MAX_POLL_MS = 5000


@dataclass(frozen=True)
class PerformanceTargets:
    cpu_percent_max: float = 5.0
    rss_mb_max: float = 250.0


@dataclass(frozen=True)
class BudgetStatus:
    cpu_percent: float
    rss_mb: float
    tick_ms: float
    overloaded: bool
    warning: str | None
    recommended_poll_ms: int


class PerformanceController:
    """Watches the monitor's own cost so refreshing never dominates the host."""

    def __init__(self, targets: PerformanceTargets | None = None, process: psutil.Process | None = None) -> None:
        self.targets = targets or PerformanceTargets()
        self._process = process or psutil.Process()
        # Prime non-blocking CPU measurement.
        self._process.cpu_percent(interval=None)

    def sample(self, tick_ms: float, poll_ms: int) -> BudgetStatus:
        cpu = float(self._process.cpu_percent(interval=None))
        rss_mb = float(self._process.memory_info().rss) / (1024 * 1024)
        overloaded = cpu > self.targets.cpu_percent_max or rss_mb > self.targets.rss_mb_max

        warning = None
        rec_poll = poll_ms
        if overloaded:
            warning = "resource_overload"
            rec_poll = min(MAX_POLL_MS, int(poll_ms * 1.25) + 25)
        elif tick_ms > poll_ms * 0.5:
            warning = "slow_tick"
            rec_poll = min(MAX_POLL_MS, poll_ms + 250)

        return BudgetStatus(
            cpu_percent=cpu,
            rss_mb=rss_mb,
            tick_ms=float(tick_ms),
            overloaded=overloaded,
            warning=warning,
            recommended_poll_ms=max(MIN_POLL_MS, rec_poll),
        )
