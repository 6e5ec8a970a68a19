"""Data models and dataclasses."""

from dataclasses import dataclass
from typing import Optional

from constants import DEVICE_DATA_PATH


@dataclass(frozen=True)
class Endpoint:
    """Network address of the monitored device."""
    host: str
    port: int

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}{DEVICE_DATA_PATH}"

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class Reading:
    """One snapshot of the device readings."""
    temperature: float
    light_on: bool = False
    brightness: int = 0  # only meaningful while light_on


@dataclass(frozen=True)
class DisplayState:
    """Everything the presentation layer needs at one instant."""
    endpoint: Endpoint
    reading: Optional[Reading] = None  # None until the first successful fetch
    last_fetch_succeeded: bool = False


@dataclass
class MonitorCommand:
    """Command received from MQTT."""
    action: str  # "refresh" | "set_endpoint"
    value: str = ""
