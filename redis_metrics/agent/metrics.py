"""
Metric Mapper.

Turns the flat INFO statistics of one node into open-falcon records.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from .batching import CounterType, MetricValue

METRIC_PREFIX = "redis."
COUNTER_SUFFIX = "_cps"
HIT_RATIO_FIELD = "keyspace_hit_ratio"

# field name -> True for gauge, False for counter
DEFAULT_METRICS: Mapping[str, bool] = MappingProxyType({
    "connected_clients": True,
    "blocked_clients": True,
    "used_memory": True,
    "used_memory_rss": True,
    "used_memory_peak": True,
    "mem_fragmentation_ratio": True,
    "total_commands_processed": False,
    "rejected_connections": False,
    "expired_keys": False,
    "evicted_keys": False,
    "keyspace_hits": False,
    "keyspace_misses": False,
    HIT_RATIO_FIELD: True,
})


def _to_number(value: Optional[str]) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def calculate_ratio(hits: Optional[str], misses: Optional[str]) -> str:
    """
    Return hits / (hits + misses) as a decimal string.

    A zero denominator yields "0" instead of raising. The ratio keeps full
    float precision so values close to 1 are not rounded up.
    """
    h = _to_number(hits)
    total = h + _to_number(misses)
    if total == 0:
        return "0"
    return repr(h / total)


def add_hit_ratio(stats: dict[str, str]) -> None:
    """Insert the derived keyspace_hit_ratio field when its inputs exist."""
    if "keyspace_hits" not in stats or "keyspace_misses" not in stats:
        return
    stats[HIT_RATIO_FIELD] = calculate_ratio(stats["keyspace_hits"], stats["keyspace_misses"])


def build_tags(port: str, attach_tags: str = "") -> str:
    """Comma-join the port tag with the configured extra tags."""
    tags = [t for t in (f"port={port}" if port else "", attach_tags.strip(", ")) if t]
    return ",".join(tags)


def metric_name(field_name: str, gauge: bool) -> str:
    return f"{METRIC_PREFIX}{field_name}{'' if gauge else COUNTER_SUFFIX}"


def build_metrics(
    stats: dict[str, str],
    metric_spec: Mapping[str, bool],
    endpoint: str,
    tags: str,
    timestamp: int,
    step: int,
) -> list[MetricValue]:
    """
    Build one record per configured field present in stats.

    Fields missing from stats are skipped silently.
    """
    add_hit_ratio(stats)

    metrics = []
    for name, gauge in metric_spec.items():
        value = stats.get(name)
        if value is None:
            continue

        metrics.append(MetricValue(
            endpoint=endpoint,
            metric=metric_name(name, gauge),
            value=value,
            timestamp=timestamp,
            step=step,
            counter_type=CounterType.GAUGE if gauge else CounterType.COUNTER,
            tags=tags,
        ))

    return metrics
