"""
Transfer Sender.

Pushes metric batches to an open-falcon transfer over its HTTP API.
Delivery is best-effort: one attempt per batch, failures are reported
to the caller and the batch is dropped.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Optional
import aiohttp

from .batching import Batch

logger = logging.getLogger(__name__)

PUSH_PATH = "/api/push"


@dataclass
class SendResult:
    """Result of a send operation."""
    success: bool
    status_code: int = 0
    sent: int = 0
    error: Optional[str] = None


class TransferSender:
    """
    Sends metric batches to the transfer.

    The HTTP session is created lazily and reused across cycles.
    """

    def __init__(self, addr: str, timeout: int = 10):
        """Initialize the sender."""
        if addr.startswith(("http://", "https://")):
            self.base_url = addr.rstrip('/')
        else:
            self.base_url = f"http://{addr}"
        self.timeout = timeout

        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def push_url(self) -> str:
        return f"{self.base_url}{PUSH_PATH}"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    def _get_headers(self) -> dict:
        return {
            'Content-Type': 'application/json',
            'User-Agent': 'redis-metrics',
        }

    async def send_batch(self, batch: Batch) -> SendResult:
        """Send a batch to the transfer. An empty batch is sent as []."""
        payload = json.dumps(batch.to_payload())

        try:
            session = await self._get_session()
            async with session.post(
                self.push_url,
                data=payload,
                headers=self._get_headers(),
            ) as response:
                if 200 <= response.status < 300:
                    logger.debug(f"Pushed {len(batch)} metrics to {self.push_url}")
                    return SendResult(success=True, status_code=response.status, sent=len(batch))

                error_text = await response.text()
                return SendResult(
                    success=False,
                    status_code=response.status,
                    error=error_text[:500],
                )

        except asyncio.TimeoutError:
            return SendResult(success=False, error="Request timeout")
        except aiohttp.ClientError as e:
            return SendResult(success=False, error=str(e))

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
