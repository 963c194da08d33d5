"""
Counter metrics for the rate shop engine.

Usage:
    metrics = get_metrics()
    metrics.inc("rate_shop_decisions")
    metrics.snapshot()  # {"rate_shop_decisions": 1}
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class MetricsSink(ABC):
    """Fire-and-forget counter sink."""

    @abstractmethod
    def inc(self, name: str, value: int = 1) -> None:
        pass


class MetricsService(MetricsSink):
    """In-process counters."""

    def __init__(self):
        self._counters: Dict[str, int] = {}

    def inc(self, name: str, value: int = 1) -> None:
        self._counters[name] = self._counters.get(name, 0) + value

    def snapshot(self) -> Dict[str, int]:
        return dict(self._counters)

    def reset(self) -> None:
        self._counters.clear()


_metrics: Optional[MetricsService] = None


def get_metrics() -> MetricsService:
    """Get the process-wide metrics instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsService()
    return _metrics
