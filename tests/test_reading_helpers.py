import json

import pytest

from errors import DecodeError
from models import Reading
from reading_helpers import parse_reading, reading_to_dict


def test_parse_light_on_payload():
    reading = parse_reading({"temperature": 21.5, "isGrowLightOn": True, "brightness": 80})
    assert reading == Reading(temperature=21.5, light_on=True, brightness=80)


def test_parse_light_off_keeps_brightness_zero():
    reading = parse_reading({"temperature": 18, "isGrowLightOn": False, "brightness": 0})
    assert reading.temperature == 18.0
    assert isinstance(reading.temperature, float)
    assert reading.light_on is False
    assert reading.brightness == 0


def test_extra_fields_are_ignored():
    reading = parse_reading(
        {"temperature": 19.0, "isGrowLightOn": True, "brightness": 12, "uptime": 1234}
    )
    assert reading == Reading(19.0, True, 12)


@pytest.mark.parametrize("missing", ["temperature", "isGrowLightOn", "brightness"])
def test_missing_field_rejects_payload(missing):
    payload = {"temperature": 21.5, "isGrowLightOn": True, "brightness": 80}
    del payload[missing]
    with pytest.raises(DecodeError, match=missing):
        parse_reading(payload)


@pytest.mark.parametrize(
    "payload",
    [
        {"temperature": "21.5", "isGrowLightOn": True, "brightness": 80},
        {"temperature": True, "isGrowLightOn": True, "brightness": 80},
        {"temperature": None, "isGrowLightOn": True, "brightness": 80},
        {"temperature": 21.5, "isGrowLightOn": 1, "brightness": 80},
        {"temperature": 21.5, "isGrowLightOn": True, "brightness": -1},
        {"temperature": 21.5, "isGrowLightOn": True, "brightness": "80"},
    ],
)
def test_mistyped_field_rejects_payload(payload):
    with pytest.raises(DecodeError):
        parse_reading(payload)


@pytest.mark.parametrize(
    "field, value",
    [
        ("temperature", float("nan")),
        ("temperature", float("inf")),
        ("temperature", 10 ** 400),
        ("brightness", float("nan")),
        ("brightness", float("inf")),
        ("brightness", float("-inf")),
    ],
)
def test_non_finite_number_rejects_payload(field, value):
    payload = {"temperature": 21.5, "isGrowLightOn": True, "brightness": 80}
    payload[field] = value
    with pytest.raises(DecodeError, match=field):
        parse_reading(payload)


def test_non_finite_json_literals_reject_payload():
    payload = json.loads('{"temperature": NaN, "isGrowLightOn": true, "brightness": 1e400}')
    with pytest.raises(DecodeError):
        parse_reading(payload)


@pytest.mark.parametrize("payload", [[], "ok", 42, None])
def test_non_object_rejected(payload):
    with pytest.raises(DecodeError, match="JSON object"):
        parse_reading(payload)


def test_reading_to_dict_uses_wire_names():
    assert reading_to_dict(Reading(21.5, True, 80)) == {
        "temperature": 21.5,
        "isGrowLightOn": True,
        "brightness": 80,
    }
