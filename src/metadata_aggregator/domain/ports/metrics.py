"""Port for emitting run counters."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsSink(Protocol):
    def increment(self, name: str, value: int = 1) -> None: ...


class NullMetricsSink:
    """Metrics sink that discards every counter."""

    def increment(self, name: str, value: int = 1) -> None:
        return None


__all__ = ["MetricsSink", "NullMetricsSink"]
