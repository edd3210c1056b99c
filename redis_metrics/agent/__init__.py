"""
Redis Metrics Agent - Polls Redis INFO statistics and pushes them
to an open-falcon transfer.
"""

from .agent import CollectorAgent, run_agent
from .config import AgentConfig, ConfigError
from .batching import Batch, CounterType, MetricValue
from .sender import SendResult, TransferSender

__all__ = [
    "CollectorAgent",
    "run_agent",
    "AgentConfig",
    "ConfigError",
    "Batch",
    "CounterType",
    "MetricValue",
    "SendResult",
    "TransferSender",
]
