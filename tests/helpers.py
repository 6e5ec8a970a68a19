"""Test doubles shared across the test modules."""

import asyncio
from collections import deque

from aiohttp import web

from models import Endpoint, Reading

DEFAULT_READING = Reading(temperature=20.0, light_on=False, brightness=0)


async def settle(rounds: int = 5):
    """Let freshly scheduled tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class ScriptedClient:
    """
    Stand-in for DeviceClient.

    Each fetch pops the next scripted item: a Reading is returned, an
    exception is raised, a Future is awaited. An empty script returns
    DEFAULT_READING.
    """

    def __init__(self, *items):
        self.script = deque(items)
        self.calls = []
        self.closed = False

    def push(self, *items):
        self.script.extend(items)

    async def fetch_reading(self, endpoint: Endpoint) -> Reading:
        self.calls.append(endpoint)
        item = self.script.popleft() if self.script else DEFAULT_READING
        if isinstance(item, asyncio.Future):
            return await item
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self):
        self.closed = True


class FakeDevice:
    """aiohttp handler emulating the grow light's /data/get route."""

    def __init__(self):
        self.payload = {"temperature": 21.5, "isGrowLightOn": True, "brightness": 80}
        self.status = 200
        self.raw_body = None
        self.delay = 0.0
        self.requests = 0
        self.endpoint = None

    async def handle(self, request: web.Request) -> web.Response:
        self.requests += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.raw_body is not None:
            if isinstance(self.raw_body, bytes):
                return web.Response(body=self.raw_body, status=self.status, content_type="application/json")
            return web.Response(text=self.raw_body, status=self.status, content_type="application/json")
        return web.json_response(self.payload, status=self.status)


class StubMqttClient:
    """Records what the bridge asks of a paho client."""

    def __init__(self):
        self.published = []
        self.subscribed = []
        self.will = None
        self.connected_to = None
        self.loop_running = False
        self.on_connect = None
        self.on_message = None

    def will_set(self, topic, payload=None, qos=0, retain=False):
        self.will = (topic, payload, retain)

    def connect(self, host, port, keepalive=60):
        self.connected_to = (host, port)

    def loop_start(self):
        self.loop_running = True

    def loop_stop(self):
        self.loop_running = False

    def disconnect(self):
        self.connected_to = None

    def publish(self, topic, payload=None, qos=0, retain=False):
        self.published.append((topic, payload, retain))

    def subscribe(self, topic, qos=0):
        self.subscribed.append(topic)

    def topics(self):
        return [t for t, _, _ in self.published]
