"""
Collectors.

Each collector gathers raw statistics from one kind of data source.
"""

from .redis_info import (
    INFO_SECTIONS,
    NodeAddress,
    RedisInfoCollector,
    get_redis_info,
    parse_info_section,
)

__all__ = [
    "INFO_SECTIONS",
    "NodeAddress",
    "RedisInfoCollector",
    "get_redis_info",
    "parse_info_section",
]
