"""Helper functions for parsing device payloads."""

import math
from typing import Any, Dict

from constants import FIELD_BRIGHTNESS, FIELD_LIGHT_ON, FIELD_TEMPERATURE
from errors import DecodeError
from models import Reading


def _is_number(value: Any) -> bool:
    # bool is an int subclass, but true/false is never a valid measurement.
    # json.loads also yields nan/inf from NaN, Infinity or 1e400.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # an integer literal too large for a float
        return False


def parse_reading(payload: Any) -> Reading:
    """
    Turn a decoded /data/get body into a Reading.

    Expected shape:
      {"temperature": 21.5, "isGrowLightOn": true, "brightness": 80}

    Every field is required. A missing or mistyped field rejects the whole
    payload with DecodeError, the previous Reading stays published.
    """
    if not isinstance(payload, dict):
        raise DecodeError(f"Expected a JSON object, got {type(payload).__name__}")

    missing = [k for k in (FIELD_TEMPERATURE, FIELD_LIGHT_ON, FIELD_BRIGHTNESS) if k not in payload]
    if missing:
        raise DecodeError(f"Missing fields in device payload: {', '.join(missing)}")

    temperature = payload[FIELD_TEMPERATURE]
    light_on = payload[FIELD_LIGHT_ON]
    brightness = payload[FIELD_BRIGHTNESS]

    if not _is_number(temperature):
        raise DecodeError(f"'{FIELD_TEMPERATURE}' must be a finite number, got {temperature!r}")
    if not isinstance(light_on, bool):
        raise DecodeError(f"'{FIELD_LIGHT_ON}' must be a boolean, got {light_on!r}")
    if not _is_number(brightness) or brightness < 0:
        raise DecodeError(f"'{FIELD_BRIGHTNESS}' must be a non-negative finite number, got {brightness!r}")

    return Reading(
        temperature=float(temperature),
        light_on=light_on,
        brightness=int(brightness),
    )


def reading_to_dict(reading: Reading) -> Dict[str, Any]:
    """Serialize a Reading back to the device's wire field names."""
    return {
        FIELD_TEMPERATURE: reading.temperature,
        FIELD_LIGHT_ON: reading.light_on,
        FIELD_BRIGHTNESS: reading.brightness,
    }
