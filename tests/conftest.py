"""Shared fixtures for the monitor tests."""

import copy

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from config_loader import DEFAULTS
from models import Endpoint
from tests.helpers import FakeDevice, ScriptedClient


@pytest.fixture
def client():
    return ScriptedClient()


@pytest.fixture
async def device():
    fake = FakeDevice()
    app = web.Application()
    app.router.add_get("/data/get", fake.handle)
    server = TestServer(app)
    await server.start_server()
    fake.endpoint = Endpoint(server.host, server.port)
    yield fake
    await server.close()


@pytest.fixture
def config():
    cfg = copy.deepcopy(DEFAULTS)
    cfg["device"]["poll_interval"] = 60.0
    return cfg
