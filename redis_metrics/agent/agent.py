"""
Redis Metrics Agent - Main Daemon.

Polls INFO statistics from the configured Redis nodes on a fixed
interval and pushes one batch of metrics per cycle to the transfer.
"""

import asyncio
import logging
import signal
import socket
import time
from typing import Mapping, Optional

from .config import AgentConfig
from .collectors import NodeAddress, RedisInfoCollector
from .batching import Batch, MetricValue
from .metrics import DEFAULT_METRICS, build_metrics, build_tags
from .sender import TransferSender

logger = logging.getLogger(__name__)


class CollectorAgent:
    """
    Main collection daemon.

    Each tick resolves the local hostname, polls every node concurrently,
    merges the per-node records into one batch and sends it.
    """

    def __init__(
        self,
        config: AgentConfig,
        sender: Optional[TransferSender] = None,
        collector: Optional[RedisInfoCollector] = None,
    ):
        """Initialize the agent."""
        self.config = config
        self.addrs = list(config.daemon.addrs)
        self.interval = config.transfer.interval

        # Fixed for the lifetime of the agent
        self.metric_spec: Mapping[str, bool] = dict(config.metrics) or DEFAULT_METRICS

        self.collector = collector or RedisInfoCollector(
            password=config.daemon.password,
            timeout=config.daemon.timeout,
        )
        self.sender = sender or TransferSender(
            config.transfer.addr,
            timeout=config.transfer.timeout,
        )

        # State
        self._stop_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    def is_ready(self) -> bool:
        """Check whether collection can run with this configuration."""
        ready = True
        if not self.config.transfer.enable:
            logger.warning("Open falcon transfer is not enabled")
            ready = False
        elif not self.config.transfer.addr:
            logger.warning("Open falcon transfer addr is empty")
            ready = False

        if not self.config.daemon.enable:
            logger.warning("Daemon collection is not enabled")
            ready = False
        if not self.addrs:
            logger.warning("No Redis addrs configured for the daemon")
            ready = False

        return ready

    def resolve_hostname(self) -> str:
        """Return the endpoint name reported to the transfer."""
        if self.config.hostname:
            return self.config.hostname

        hostname = socket.gethostname()
        if not hostname:
            raise OSError("empty hostname")
        return hostname

    async def start(self):
        """Start the collection loop and run until stop() is called."""
        if not self.is_ready():
            logger.warning("Collection not started")
            return

        logger.info(f"Collecting {len(self.metric_spec)} metrics from {len(self.addrs)} nodes "
                    f"every {self.interval}s")
        logger.debug(f"Collected metrics: {dict(self.metric_spec)}")

        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run())

        try:
            await self._task
        except asyncio.CancelledError:
            logger.info("Collection loop cancelled")

    async def stop(self):
        """Stop the collection loop, letting an in-flight cycle finish."""
        logger.info("Stopping collection...")
        if self._stop_event:
            self._stop_event.set()
        if self._task and not self._task.done():
            await asyncio.wait({self._task})

        await self.sender.close()
        logger.info("Collection stopped")

    async def _run(self):
        """Fixed-rate tick loop."""
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + self.interval

        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(
                    self._stop_event.wait(),
                    timeout=max(0.0, next_tick - loop.time()),
                )
                break
            except asyncio.TimeoutError:
                pass

            # Skip ticks missed by a slow cycle instead of bunching them up
            next_tick += self.interval
            while next_tick <= loop.time():
                next_tick += self.interval

            try:
                await self.run_cycle()
            except Exception:
                logger.exception("Collection cycle failed")

    async def run_cycle(self) -> Optional[Batch]:
        """Collect from every node and send the batch once."""
        batch = await self.collect_once()
        if batch is None:
            return None

        result = await self.sender.send_batch(batch)
        if result.success:
            logger.debug(f"Sent batch: {len(batch)} metrics")
        else:
            logger.warning(f"Failed to send batch of {len(batch)} metrics: {result.error}")
        return batch

    async def collect_once(self) -> Optional[Batch]:
        """
        Build the batch for one cycle without sending it.

        Returns None when the hostname cannot be resolved.
        """
        try:
            hostname = self.resolve_hostname()
        except OSError as e:
            logger.warning(f"Hostname resolution failed, skipping cycle: {e}")
            return None

        now = int(time.time())
        results = await asyncio.gather(
            *(self._collect_node(addr, hostname, now) for addr in self.addrs),
            return_exceptions=True,
        )

        batch = Batch(timestamp=now, host=hostname)
        for addr, metrics in zip(self.addrs, results):
            if isinstance(metrics, Exception):
                logger.error(f"Collection failed for {addr}: {metrics!r}")
                continue
            batch.metrics.extend(metrics)
        return batch

    async def _collect_node(self, addr: str, hostname: str, now: int) -> list[MetricValue]:
        """Collect and map the metrics of one node."""
        stats = await self.collector.collect(addr)
        if stats is None:
            return []

        port = str(NodeAddress.parse(addr).port)
        return build_metrics(
            stats,
            self.metric_spec,
            endpoint=hostname,
            tags=build_tags(port, self.config.attach_tags),
            timestamp=now,
            step=self.interval,
        )


def run_agent(config: AgentConfig):
    """Run the agent until SIGINT or SIGTERM."""
    agent = CollectorAgent(config)

    async def main():
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, lambda: asyncio.create_task(agent.stop()))
        try:
            await agent.start()
        finally:
            await agent.sender.close()

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
