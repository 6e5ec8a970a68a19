"""Main Liquid Three monitor application."""

import asyncio
import logging
from typing import Any, Dict, List, Optional, TextIO

from constants import INVALID_ENDPOINT_ALERT
from device_client import DeviceClient
from display import ConsoleDisplay
from endpoint_store import CandidateInput, EndpointStore
from errors import ValidationError
from models import DisplayState, MonitorCommand
from mqtt_bridge import MqttBridge
from refresh_controller import RefreshController

logger = logging.getLogger(__name__)


class LiquidMonitor:
    """Main monitor application."""

    def __init__(self, config: Dict[str, Any], client=None, stream: Optional[TextIO] = None,
                 mqtt_client=None):
        self.loop = asyncio.get_running_loop()
        self.config = config
        self.cmd_queue: asyncio.Queue[MonitorCommand] = asyncio.Queue()

        device = config["device"]
        self.store = EndpointStore(device["host"], device["port"])
        self.candidate = CandidateInput(self.store)
        self.client = client or DeviceClient(timeout=device["request_timeout"])
        self.controller = RefreshController(self.store, self.client, device["poll_interval"])

        self.display: Optional[ConsoleDisplay] = None
        if config["display"]["enabled"]:
            self.display = ConsoleDisplay(stream)

        self.mqtt: Optional[MqttBridge] = None
        mqtt_config = config["mqtt"]
        if mqtt_config["enabled"]:
            self.mqtt = MqttBridge(
                self.loop,
                self.cmd_queue,
                host=mqtt_config["host"],
                port=mqtt_config["port"],
                base_topic=mqtt_config["base_topic"],
                client=mqtt_client,
            )

        self._tasks: List[asyncio.Task] = []
        self.running = True

    @property
    def state(self) -> DisplayState:
        return self.controller.state

    async def start(self):
        """Start the monitor and block until it is stopped."""
        if self.mqtt:
            self.mqtt.connect()
            self.mqtt.publish_ha_discovery()
            self.controller.subscribe_state(self.mqtt.publish_state)
            self.mqtt.publish_state(self.controller.state)
            logger.info("MQTT bridge connected")

        if self.display:
            self.controller.subscribe_state(self.display.render)
            self.controller.subscribe_readings(self.display.on_reading)
            self.display.render(self.controller.state)

        self.controller.start()
        logger.info(f"Monitoring {self.store.get()}")

        self._tasks = [
            asyncio.create_task(self.command_consumer_task(), name="cmd_consumer"),
        ]

        # Wait until tasks finish (they won't until stopped)
        await asyncio.gather(*self._tasks)

    async def stop(self):
        """Stop the monitor."""
        if not self.running:
            return
        self.running = False

        await self.controller.stop()

        for t in self._tasks:
            t.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        if self.display:
            await self.display.close()
        if self.mqtt:
            try:
                self.mqtt.close()
            except Exception as e:
                logger.debug(f"Error closing MQTT bridge: {e}")
        await self.client.close()

    def refresh(self):
        """Fetch now, outside the regular cadence."""
        return self.controller.refresh()

    def set_endpoint(self, candidate: str) -> bool:
        """Point the monitor at a new device address. Returns False if rejected."""
        self.candidate.update(candidate)
        try:
            self.candidate.submit()
        except ValidationError as e:
            logger.warning(f"Rejected endpoint {candidate!r}: {e}")
            self._alert(INVALID_ENDPOINT_ALERT)
            self.candidate.cancel()
            return False
        return True

    def handle_command(self, cmd: MonitorCommand):
        logger.info(f"Processing command: {cmd.action}")
        if cmd.action == "refresh":
            self.refresh()
        elif cmd.action == "set_endpoint":
            self.set_endpoint(cmd.value)
        else:
            logger.warning(f"Unknown command action: {cmd.action}")

    async def command_consumer_task(self):
        """Consume commands from the MQTT queue."""
        while self.running:
            cmd = await self.cmd_queue.get()
            try:
                self.handle_command(cmd)
            except Exception as e:
                logger.error(f"Failed to process command {cmd.action}: {e}", exc_info=True)

    def _alert(self, message: str):
        if self.display:
            self.display.alert("Error", message)
        if self.mqtt:
            self.mqtt.publish_alert(message)
