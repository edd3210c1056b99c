"""
Redis INFO Collector.

Connects to a Redis node, requests a fixed set of INFO sections and
flattens the replies into a single field -> value mapping.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from redis.asyncio import Connection
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import AuthenticationError, RedisError, ResponseError

logger = logging.getLogger(__name__)

INFO_SECTIONS = ("Server", "Clients", "Memory", "Stats", "Replication", "CPU")


@dataclass(frozen=True)
class NodeAddress:
    """A Redis node to poll."""
    host: str
    port: int

    @classmethod
    def parse(cls, addr: str) -> "NodeAddress":
        """Parse "host:port" (or "[v6]:port")."""
        host, sep, port = addr.strip().rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"expected host:port, got {addr!r}")
        if host.startswith("["):
            if not host.endswith("]"):
                raise ValueError(f"unterminated IPv6 literal in {addr!r}")
            host = host[1:-1]
        elif ":" in host:
            raise ValueError(f"IPv6 hosts must be bracketed: {addr!r}")

        portnum = int(port)
        if not 0 < portnum < 65536:
            raise ValueError(f"port out of range in {addr!r}")
        return cls(host=host, port=portnum)

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


def parse_info_section(text: str) -> dict[str, str]:
    """
    Parse the reply of a single INFO <section> query.

    The first line is the section header and is always dropped. Lines
    without a ':' are ignored. Values keep everything after the first ':'.
    """
    stats = {}
    lines = text.split("\n")
    for line in lines[1:]:
        line = line.rstrip("\r")
        if ":" not in line:
            continue
        key, _, value = line.partition(":")
        stats[key] = value
    return stats


async def get_redis_info(conn: Connection, sections=INFO_SECTIONS) -> dict[str, str]:
    """
    Query each INFO section and merge the results.

    A failing section is logged and skipped. Keys repeated across sections
    take the value of the later section.
    """
    stats = {}
    for section in sections:
        try:
            await conn.send_command("INFO", section)
            reply = await conn.read_response()
        except (RedisError, OSError) as e:
            logger.warning(f"Get stats failure for section {section}: {e}")
            continue

        if isinstance(reply, bytes):
            reply = reply.decode("utf-8", errors="replace")
        stats.update(parse_info_section(reply if isinstance(reply, str) else ""))
    return stats


class RedisInfoCollector:
    """Polls INFO statistics from individual Redis nodes."""

    def __init__(self, password: str = "", timeout: float = 3, sections=INFO_SECTIONS):
        """Initialize the collector."""
        self.password = password or None
        self.timeout = timeout
        self.sections = tuple(sections)

    def _connection(self, node: NodeAddress) -> Connection:
        # AUTH is sent during connect when a password is set. Replies stay
        # bytes so INFO text with invalid UTF-8 is decoded leniently below.
        return Connection(
            host=node.host,
            port=node.port,
            password=self.password,
            socket_connect_timeout=self.timeout,
            socket_timeout=self.timeout,
            retry=Retry(NoBackoff(), 0),
        )

    async def collect(self, addr: str) -> Optional[dict[str, str]]:
        """
        Collect raw INFO statistics from one node.

        Returns None when the node cannot be used this cycle.
        """
        try:
            node = NodeAddress.parse(addr)
        except ValueError as e:
            logger.warning(f"Error format addr of ip:port {addr}: {e}")
            return None

        conn = self._connection(node)
        try:
            await conn.connect()
        except (AuthenticationError, ResponseError) as e:
            logger.warning(f"Redis client auth failed for {node}: {e}")
            await self._close(conn, node)
            return None
        except (RedisError, OSError) as e:
            logger.warning(f"Error connect for {node}: {e}")
            await self._close(conn, node)
            return None

        try:
            return await get_redis_info(conn, self.sections)
        finally:
            await self._close(conn, node)

    async def _close(self, conn: Connection, node: NodeAddress) -> None:
        try:
            await conn.disconnect()
        except (RedisError, OSError) as e:
            logger.debug(f"Error closing connection to {node}: {e}")
