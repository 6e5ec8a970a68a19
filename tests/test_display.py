import io

from display import ConsoleDisplay, UpdatePulse, format_card
from models import DisplayState, Endpoint, Reading
from tests.helpers import settle

ENDPOINT = Endpoint("192.168.5.9", 5500)


def test_card_before_first_reading():
    lines = format_card(DisplayState(ENDPOINT))
    assert lines == [
        "Liquid Three Monitor",
        "Server IP: 192.168.5.9",
        "Temperature: Loading...°C",
        "Grow Light Status: Off",
    ]


def test_card_light_on_shows_brightness():
    lines = format_card(DisplayState(ENDPOINT, Reading(21.5, True, 80), True))
    assert "Temperature: 21.5°C" in lines
    assert "Grow Light Status: On" in lines
    assert lines[-1] == "Brightness: 80"


def test_card_light_off_hides_brightness():
    lines = format_card(DisplayState(ENDPOINT, Reading(18.0, False, 0), True))
    assert "Temperature: 18°C" in lines
    assert "Grow Light Status: Off" in lines
    assert not any(line.startswith("Brightness") for line in lines)


def test_card_offset_indents():
    lines = format_card(DisplayState(ENDPOINT), offset=3)
    assert all(line.startswith("   ") for line in lines)


async def test_pulse_steps_back_and_forth():
    pulse = UpdatePulse(step=0)
    offsets = []
    await pulse.play(offsets.append)
    assert offsets == [10, -10, 0]
    assert pulse.plays == 1


async def test_display_pulses_once_per_reading():
    stream = io.StringIO()
    pulse = UpdatePulse(step=0)
    display = ConsoleDisplay(stream, pulse)
    reading = Reading(21.5, True, 80)
    display.render(DisplayState(ENDPOINT, reading, True))

    display.on_reading(reading)
    await settle(10)

    assert pulse.plays == 1
    assert display.offset == 0
    assert "Brightness: 80" in stream.getvalue()
    await display.close()


async def test_display_close_cancels_running_pulse():
    display = ConsoleDisplay(io.StringIO(), UpdatePulse(step=10))
    display.render(DisplayState(ENDPOINT))
    display.on_reading(Reading(21.5, True, 80))
    await settle()
    await display.close()
    assert not display._pulses


def test_alert_written_to_stream():
    stream = io.StringIO()
    ConsoleDisplay(stream).alert("Error", "Please enter a valid IP address.")
    assert stream.getvalue() == "[Error] Please enter a valid IP address.\n"
