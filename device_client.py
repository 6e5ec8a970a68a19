"""Grow light device HTTP client."""

import asyncio
import json
import logging
from typing import Optional

import aiohttp

from constants import DEVICE_REQUEST_TIMEOUT
from errors import DecodeError, TransportError
from models import Endpoint, Reading
from reading_helpers import parse_reading

logger = logging.getLogger(__name__)


class DeviceClient:
    """
    Read-only client for the device's /data/get endpoint.

    One session is shared by every fetch, it is opened on first use and
    released by close().
    """

    def __init__(self, timeout: float = DEVICE_REQUEST_TIMEOUT):
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            # Devices speak plain HTTP on the local network
            connector = aiohttp.TCPConnector(ssl=False, limit_per_host=2)
            self.session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self.session

    async def close(self):
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def fetch_reading(self, endpoint: Endpoint) -> Reading:
        """Fetch and decode one reading from the device."""
        session = self._ensure_session()
        url = endpoint.url
        logger.debug(f"Fetching {url}")
        try:
            async with session.get(url) as resp:
                if resp.status < 200 or resp.status >= 300:
                    raise TransportError(f"{url} answered HTTP {resp.status}")
                body = await resp.read()
        except asyncio.TimeoutError as e:
            raise TransportError(f"Timed out after {self.timeout}s fetching {url}") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Failed to reach {url}: {e}") from e

        try:
            payload = json.loads(body)
        except ValueError as e:
            # UnicodeDecodeError is a ValueError too
            raise DecodeError(f"Invalid JSON from {url}: {e}") from e

        logger.debug(f"Device payload from {endpoint}: {payload}")
        return parse_reading(payload)
