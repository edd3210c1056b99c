"""Shared fixtures for the redis-metrics tests."""

import pytest

from redis_metrics.agent.config import AgentConfig, DaemonConfig, TransferConfig

SERVER_SECTION = (
    "# Server\r\n"
    "redis_version:7.2.4\r\n"
    "redis_mode:standalone\r\n"
    "tcp_port:6379\r\n"
    "executable:/usr/bin/redis-server\r\n"
)

STATS_SECTION = (
    "# Stats\r\n"
    "total_connections_received:12\r\n"
    "total_commands_processed:4200\r\n"
    "rejected_connections:0\r\n"
    "expired_keys:3\r\n"
    "evicted_keys:0\r\n"
    "keyspace_hits:80\r\n"
    "keyspace_misses:20\r\n"
)


@pytest.fixture
def agent_config():
    """Config with three nodes and a reachable-looking transfer."""
    return AgentConfig(
        hostname="collector-01",
        daemon=DaemonConfig(
            addrs=["10.0.0.1:6379", "10.0.0.2:6380", "10.0.0.3:6381"],
            timeout=1,
        ),
        transfer=TransferConfig(addr="127.0.0.1:6060", interval=60),
    )
