"""Topic utilities for MQTT."""


def topic_state(base: str) -> str:
    """Get MQTT topic for the full JSON state."""
    return f"{base}/state"


def topic_value(base: str, name: str) -> str:
    """Get MQTT topic for a single reading value."""
    return f"{base}/{name}"


def topic_available(base: str) -> str:
    return f"{base}/available"


def topic_endpoint(base: str) -> str:
    return f"{base}/endpoint"


def topic_alert(base: str) -> str:
    return f"{base}/alert"


def topic_refresh(base: str) -> str:
    """Get MQTT topic that triggers a manual refresh."""
    return f"{base}/refresh"


def topic_endpoint_set(base: str) -> str:
    """Get MQTT topic that carries a new endpoint address."""
    return f"{base}/endpoint/set"


def ha_discovery_topic(component: str, base: str, name: str) -> str:
    """Get Home Assistant discovery topic for one entity."""
    return f"homeassistant/{component}/{base}_{name}/config"
