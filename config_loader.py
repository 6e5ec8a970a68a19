"""Configuration loading for the monitor."""

import copy
import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_FILE,
    DEFAULT_DEVICE_HOST,
    DEFAULT_DEVICE_PORT,
    DEFAULT_MQTT_BASE_TOPIC,
    DEFAULT_MQTT_HOST,
    DEFAULT_MQTT_PORT,
    DEVICE_REQUEST_TIMEOUT,
    POLL_INTERVAL,
)

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "device": {
        "host": DEFAULT_DEVICE_HOST,
        "port": DEFAULT_DEVICE_PORT,
        "poll_interval": POLL_INTERVAL,
        "request_timeout": DEVICE_REQUEST_TIMEOUT,
    },
    "display": {
        "enabled": True,
    },
    "mqtt": {
        "enabled": False,
        "host": DEFAULT_MQTT_HOST,
        "port": DEFAULT_MQTT_PORT,
        "base_topic": DEFAULT_MQTT_BASE_TOPIC,
    },
    "logging": {
        "level": "INFO",
    },
}


def config_path_from_env() -> str:
    return os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load, default and validate the YAML configuration.

    A missing file is not an error: the monitor runs on built-in defaults
    and polls the default device address.
    """
    path = path or config_path_from_env()

    if not os.path.exists(path):
        logger.info(f"Configuration file '{path}' not found, using defaults")
        config: Dict[str, Any] = {}
    else:
        try:
            with open(path, "r") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in '{path}': {e}")
        if not isinstance(config, dict):
            raise ValueError(f"'{path}' must contain a mapping at the top level")
        logger.info(f"Configuration loaded from {path}")

    config = _apply_defaults(config)
    _validate_config(config)
    return config


def _apply_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(DEFAULTS)
    for section, values in config.items():
        if section not in merged:
            logger.warning(f"Ignoring unknown configuration section '{section}'")
            continue
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ValueError(f"Configuration section '{section}' must be a mapping")
        merged[section].update(values)
    return merged


def _validate_config(config: Dict[str, Any]) -> None:
    device = config["device"]
    host = device["host"]
    if not isinstance(host, str) or not host.strip():
        raise ValueError("'device.host' must be a non-empty string")
    _require_port(device["port"], "device.port")
    for key in ("poll_interval", "request_timeout"):
        value = device[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"'device.{key}' must be a positive number, got {value!r}")

    mqtt_config = config["mqtt"]
    if not isinstance(mqtt_config["enabled"], bool):
        raise ValueError("'mqtt.enabled' must be true or false")
    if mqtt_config["enabled"]:
        host = mqtt_config["host"]
        if not isinstance(host, str) or not host.strip():
            raise ValueError(f"'mqtt.host' must be a non-empty string, got {host!r}")
        _require_port(mqtt_config["port"], "mqtt.port")
        base = mqtt_config["base_topic"]
        if not isinstance(base, str) or not base or any(c in base for c in "+#"):
            raise ValueError(f"'mqtt.base_topic' is not a valid topic prefix: {base!r}")

    if not isinstance(config["display"]["enabled"], bool):
        raise ValueError("'display.enabled' must be true or false")

    level = config["logging"]["level"]
    if not isinstance(level, str) or not isinstance(logging.getLevelName(level.upper()), int):
        raise ValueError(f"Unknown logging level: {level!r}")


def _require_port(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 < value < 65536:
        raise ValueError(f"'{name}' must be a TCP port number, got {value!r}")
