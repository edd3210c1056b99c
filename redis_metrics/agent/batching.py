"""
Metric records and batches.

A batch holds every record produced by one collection cycle and is
handed to the sender as a single unit.
"""

import time
from dataclasses import dataclass, field
from enum import Enum


class CounterType(Enum):
    """open-falcon counter types."""
    GAUGE = "GAUGE"  # Reported as-is
    COUNTER = "COUNTER"  # Backend derives the rate


@dataclass(frozen=True)
class MetricValue:
    """A single observation of one Redis field on one node."""
    endpoint: str
    metric: str
    value: str
    timestamp: int
    step: int
    counter_type: CounterType
    tags: str = ""

    def to_dict(self) -> dict:
        """Render in the open-falcon MetricValue JSON shape."""
        return {
            'endpoint': self.endpoint,
            'metric': self.metric,
            'value': self.value,
            'step': self.step,
            'counterType': self.counter_type.value,
            'tags': self.tags,
            'timestamp': self.timestamp,
        }


@dataclass
class Batch:
    """All metrics of one collection cycle."""
    metrics: list[MetricValue] = field(default_factory=list)
    timestamp: float = field(default_factory=time.time)
    host: str = ""

    def __len__(self) -> int:
        return len(self.metrics)

    def to_payload(self) -> list[dict]:
        return [m.to_dict() for m in self.metrics]
