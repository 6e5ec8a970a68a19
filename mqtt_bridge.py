"""MQTT bridge implementation."""

import asyncio
import json
import logging
from typing import Dict, Optional

import paho.mqtt.client as mqtt

from constants import (
    DEFAULT_MQTT_BASE_TOPIC,
    DEFAULT_MQTT_HOST,
    DEFAULT_MQTT_PORT,
    MQTT_KEEPALIVE,
    MQTT_PAYLOAD_AVAILABLE,
    MQTT_PAYLOAD_OFF,
    MQTT_PAYLOAD_ON,
    MQTT_PAYLOAD_UNAVAILABLE,
    MQTT_QOS,
)
from models import DisplayState, MonitorCommand
from reading_helpers import reading_to_dict
from topics import (
    ha_discovery_topic,
    topic_alert,
    topic_available,
    topic_endpoint,
    topic_endpoint_set,
    topic_refresh,
    topic_state,
    topic_value,
)

logger = logging.getLogger(__name__)


class MqttBridge:
    """Bridge between MQTT and asyncio event loop."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        cmd_queue: "asyncio.Queue[MonitorCommand]",
        host: str = DEFAULT_MQTT_HOST,
        port: int = DEFAULT_MQTT_PORT,
        base_topic: str = DEFAULT_MQTT_BASE_TOPIC,
        client: Optional[mqtt.Client] = None,
    ):
        self.loop = loop
        self.cmd_queue = cmd_queue
        self.host = host
        self.port = port
        self.base = base_topic
        self.client = client or mqtt.Client(mqtt.CallbackAPIVersion.VERSION2)

        self.client.on_connect = self._on_connect
        self.client.on_message = self._on_message

        # Track last published payloads to avoid spamming
        self._last_published: Dict[str, str] = {}

    def connect(self):
        """Connect to MQTT broker."""
        self.client.will_set(topic_available(self.base), MQTT_PAYLOAD_UNAVAILABLE, qos=MQTT_QOS, retain=True)
        try:
            self.client.connect(self.host, self.port, keepalive=MQTT_KEEPALIVE)
            self.client.loop_start()
            logger.info(f"Connected to MQTT broker at {self.host}:{self.port}")
        except Exception as e:
            logger.error(f"Failed to connect to MQTT broker: {e}")
            raise

    def close(self):
        """Close MQTT connection."""
        try:
            self.client.loop_stop()
        finally:
            self.client.disconnect()

    def publish_retained(self, topic: str, payload: str):
        """Publish a retained message."""
        # retained makes dashboards see the last state after restart
        self.client.publish(topic, payload=payload, qos=MQTT_QOS, retain=True)
        logger.debug(f"Published to {topic}: {payload}")

    def _publish_changed(self, topic: str, payload: str):
        if self._last_published.get(topic) == payload:
            return
        self._last_published[topic] = payload
        self.publish_retained(topic, payload)

    def publish_state(self, state: DisplayState):
        """Publish a DisplayState, skipping topics whose payload is unchanged."""
        reading = state.reading
        document = {
            "endpoint": str(state.endpoint),
            "reading": reading_to_dict(reading) if reading else None,
            "lastFetchSucceeded": state.last_fetch_succeeded,
        }
        self._publish_changed(topic_state(self.base), json.dumps(document))
        self._publish_changed(topic_endpoint(self.base), state.endpoint.host)
        self._publish_changed(
            topic_available(self.base),
            MQTT_PAYLOAD_AVAILABLE if state.last_fetch_succeeded else MQTT_PAYLOAD_UNAVAILABLE,
        )

        if reading is None:
            return
        self._publish_changed(topic_value(self.base, "temperature"), f"{reading.temperature:g}")
        self._publish_changed(
            topic_value(self.base, "light"),
            MQTT_PAYLOAD_ON if reading.light_on else MQTT_PAYLOAD_OFF,
        )
        self._publish_changed(topic_value(self.base, "brightness"), str(reading.brightness))

    def publish_alert(self, message: str):
        """Publish a user-facing alert. Not retained, alerts are transient."""
        self.client.publish(topic_alert(self.base), payload=message, qos=MQTT_QOS, retain=False)
        logger.debug(f"Published alert: {message}")

    def publish_ha_discovery(self):
        """Publish Home Assistant discovery messages for the three readings."""
        device = {
            "identifiers": [f"{self.base}_device"],
            "name": "Liquid Three",
            "model": "Grow Light Controller",
        }
        availability = {
            "availability_topic": topic_available(self.base),
            "payload_available": MQTT_PAYLOAD_AVAILABLE,
            "payload_not_available": MQTT_PAYLOAD_UNAVAILABLE,
        }
        entities = [
            ("sensor", "temperature", {
                "name": "Temperature",
                "device_class": "temperature",
                "unit_of_measurement": "°C",
                "state_class": "measurement",
            }),
            ("binary_sensor", "light", {
                "name": "Grow Light",
                "device_class": "light",
                "payload_on": MQTT_PAYLOAD_ON,
                "payload_off": MQTT_PAYLOAD_OFF,
            }),
            ("sensor", "brightness", {
                "name": "Brightness",
                "state_class": "measurement",
            }),
        ]
        for component, name, extra in entities:
            payload = {
                "state_topic": topic_value(self.base, name),
                "unique_id": f"{self.base}_{name}",
                "device": device,
                **availability,
                **extra,
            }
            self.publish_retained(ha_discovery_topic(component, self.base, name), json.dumps(payload))
        logger.debug("Home Assistant discovery published")

    def _on_connect(self, client, userdata, flags, reason_code, properties):
        """Handle MQTT connection."""
        if reason_code == 0:
            logger.info("Connected to MQTT broker successfully")
        else:
            logger.warning(f"Connected to MQTT broker with code {reason_code}")
        for topic in (topic_refresh(self.base), topic_endpoint_set(self.base)):
            client.subscribe(topic, qos=MQTT_QOS)
            logger.info(f"Subscribed to: {topic}")

    def _on_message(self, client, userdata, msg):
        """Handle incoming MQTT message."""
        try:
            topic = msg.topic
            payload = (msg.payload or b"").decode("utf-8", errors="replace")

            if topic == topic_refresh(self.base):
                cmd = MonitorCommand(action="refresh")
            elif topic == topic_endpoint_set(self.base):
                # validated by the endpoint store, not here
                cmd = MonitorCommand(action="set_endpoint", value=payload.strip())
            else:
                logger.debug(f"Ignoring unexpected topic: {topic}")
                return

            logger.info(f"Received command from MQTT: {cmd.action} {cmd.value}".rstrip())
            # push into asyncio loop safely from MQTT thread
            self.loop.call_soon_threadsafe(self.cmd_queue.put_nowait, cmd)

        except Exception as e:
            logger.error(f"Error handling MQTT message: {e}", exc_info=True)
