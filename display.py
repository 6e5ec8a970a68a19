"""Console rendering of the monitor card."""

import asyncio
import logging
import sys
from typing import Callable, List, Optional, Set, TextIO

from constants import DISPLAY_TITLE, PULSE_OFFSETS, PULSE_STEP_SECONDS
from models import DisplayState, Reading

logger = logging.getLogger(__name__)


def format_card(state: DisplayState, offset: int = 0) -> List[str]:
    """Build the lines of the monitor card for a DisplayState."""
    reading = state.reading
    temperature = "Loading..." if reading is None else f"{reading.temperature:g}"
    light_on = reading is not None and reading.light_on

    lines = [
        DISPLAY_TITLE,
        f"Server IP: {state.endpoint.host}",
        f"Temperature: {temperature}°C",
        f"Grow Light Status: {'On' if light_on else 'Off'}",
    ]
    # Brightness means nothing while the light is off
    if light_on:
        lines.append(f"Brightness: {reading.brightness}")

    if offset > 0:
        pad = " " * offset
        lines = [pad + line for line in lines]
    return lines


class UpdatePulse:
    """Short back-and-forth shake acknowledging a new reading."""

    def __init__(self, offsets=PULSE_OFFSETS, step: float = PULSE_STEP_SECONDS):
        self.offsets = tuple(offsets)
        self.step = step
        self.plays = 0

    async def play(self, apply: Callable[[int], None]):
        self.plays += 1
        for offset in self.offsets:
            apply(offset)
            await asyncio.sleep(self.step)


class ConsoleDisplay:
    """Renders controller state to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None, pulse: Optional[UpdatePulse] = None):
        self.stream = stream or sys.stdout
        self.pulse = pulse or UpdatePulse()
        self.state: Optional[DisplayState] = None
        self.offset = 0
        self._pulses: Set[asyncio.Task] = set()

    def render(self, state: DisplayState):
        self.state = state
        self._draw()

    def on_reading(self, reading: Reading):
        """Start the update pulse for a freshly published reading."""
        task = asyncio.get_running_loop().create_task(self.pulse.play(self._shift))
        self._pulses.add(task)
        task.add_done_callback(self._pulses.discard)

    def alert(self, title: str, message: str):
        print(f"[{title}] {message}", file=self.stream, flush=True)

    async def close(self):
        for t in list(self._pulses):
            t.cancel()
        if self._pulses:
            await asyncio.gather(*self._pulses, return_exceptions=True)

    def _shift(self, offset: int):
        self.offset = offset
        self._draw()

    def _draw(self):
        if self.state is None:
            return
        # Negative offsets cannot move text left of column 0 on a terminal
        card = "\n".join(format_card(self.state, max(self.offset, 0)))
        print(card + "\n", file=self.stream, flush=True)
