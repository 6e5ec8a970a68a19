"""Periodic fetch loop that keeps the published reading current."""

import asyncio
import logging
from typing import Callable, List, Optional, Set

from constants import POLL_INTERVAL
from endpoint_store import EndpointStore
from errors import DecodeError, TransportError
from models import DisplayState, Endpoint, Reading

logger = logging.getLogger(__name__)

StateListener = Callable[[DisplayState], None]
ReadingListener = Callable[[Reading], None]


class RefreshController:
    """
    Owns the polling timer and the fetch cycles.

    Lifecycle:
      - idle until start()
      - start(): one immediate cycle, then one cycle per poll_interval
      - endpoint change: timer and in-flight cycles are cancelled, the
        reading is reset and polling restarts against the new address
      - stop(): timer and in-flight cycles are cancelled for good

    Every cycle is tagged with the endpoint generation it started under.
    Results from an older generation are dropped, within one generation
    the last response to arrive wins.
    """

    def __init__(self, store: EndpointStore, client, poll_interval: float = POLL_INTERVAL):
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")

        self.store = store
        self.client = client
        self.poll_interval = poll_interval

        self._endpoint = store.get()
        self._generation = 0
        self._reading: Optional[Reading] = None
        self._last_fetch_succeeded = False

        self._timer_task: Optional[asyncio.Task] = None
        self._cycles: Set[asyncio.Task] = set()
        self._state_listeners: List[StateListener] = []
        self._reading_listeners: List[ReadingListener] = []

        self.running = False
        self.stopped = False
        self.cycle_count = 0
        # Event loop time of the next timer-driven cycle
        self.next_tick_at: Optional[float] = None

        self._unsubscribe_store = store.subscribe(self.reconfigure)

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> DisplayState:
        return DisplayState(
            endpoint=self._endpoint,
            reading=self._reading,
            last_fetch_succeeded=self._last_fetch_succeeded,
        )

    @property
    def in_flight(self) -> int:
        return len(self._cycles)

    def subscribe_state(self, listener: StateListener) -> Callable[[], None]:
        """Call listener with the new DisplayState after every change."""
        return _add_listener(self._state_listeners, listener)

    def subscribe_readings(self, listener: ReadingListener) -> Callable[[], None]:
        """Call listener once per successful fetch cycle."""
        return _add_listener(self._reading_listeners, listener)

    # -------------------------------------------------------------- lifecycle

    def start(self):
        """Start polling the current endpoint."""
        if self.stopped:
            raise RuntimeError("Refresh controller has been stopped")
        if self.running:
            return
        self.running = True
        logger.info(f"Polling {self._endpoint} every {self.poll_interval}s")
        self._arm()

    async def stop(self):
        """Stop polling and wait for outstanding tasks to unwind."""
        if self.stopped:
            return
        self.running = False
        self.stopped = True
        self._unsubscribe_store()

        tasks = self._cancel_all()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.next_tick_at = None
        logger.info("Refresh controller stopped")

    def reconfigure(self, endpoint: Endpoint):
        """Rebind to a new endpoint, restarting the poll loop if running."""
        self._generation += 1
        self._endpoint = endpoint
        self._reading = None
        self._last_fetch_succeeded = False
        self._cancel_all()
        self._notify_state()

        if self.running:
            logger.info(f"Restarting poll loop against {endpoint}")
            self._arm()

    def refresh(self) -> Optional[asyncio.Task]:
        """Run one extra fetch cycle now. The timer schedule is untouched."""
        if not self.running:
            logger.debug("Manual refresh ignored, controller is not polling")
            return None
        logger.debug(f"Manual refresh of {self._endpoint}")
        return self._launch_cycle()

    # ---------------------------------------------------------------- polling

    def _arm(self):
        loop = asyncio.get_running_loop()
        self.next_tick_at = loop.time() + self.poll_interval
        self._launch_cycle()
        self._timer_task = asyncio.create_task(self._timer_loop(), name="refresh-timer")

    def _cancel_all(self) -> List[asyncio.Task]:
        tasks = list(self._cycles)
        if self._timer_task is not None:
            tasks.append(self._timer_task)
            self._timer_task = None
        for t in tasks:
            t.cancel()
        self._cycles.clear()
        return tasks

    async def _timer_loop(self):
        loop = asyncio.get_running_loop()
        while self.running:
            await asyncio.sleep(max(0.0, self.next_tick_at - loop.time()))
            if not self.running:
                break
            self.next_tick_at += self.poll_interval
            # Skip ticks missed while the loop was blocked rather than bursting
            if self.next_tick_at <= loop.time():
                self.next_tick_at = loop.time() + self.poll_interval
            self._launch_cycle()

    def _launch_cycle(self) -> asyncio.Task:
        self.cycle_count += 1
        task = asyncio.create_task(
            self._run_cycle(self._generation, self._endpoint),
            name=f"fetch-{self.cycle_count}",
        )
        self._cycles.add(task)
        task.add_done_callback(self._cycles.discard)
        return task

    async def _run_cycle(self, generation: int, endpoint: Endpoint):
        try:
            reading = await self.client.fetch_reading(endpoint)
        except (TransportError, DecodeError) as e:
            self._record_failure(generation, endpoint, e)
            return
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error fetching from {endpoint}: {e}", exc_info=True)
            self._record_failure(generation, endpoint, e)
            return

        if generation != self._generation:
            logger.debug(f"Dropping stale reading from {endpoint}")
            return

        self._reading = reading
        self._last_fetch_succeeded = True
        logger.debug(f"Reading from {endpoint}: {reading}")
        self._notify_state()
        for listener in list(self._reading_listeners):
            _safe_call(listener, reading)

    def _record_failure(self, generation: int, endpoint: Endpoint, error: Exception):
        if generation != self._generation:
            return
        logger.warning(f"Failed to fetch data from {endpoint}: {error}")
        changed = self._last_fetch_succeeded
        self._last_fetch_succeeded = False
        if changed:
            self._notify_state()

    def _notify_state(self):
        state = self.state
        for listener in list(self._state_listeners):
            _safe_call(listener, state)


def _add_listener(listeners: list, listener) -> Callable[[], None]:
    listeners.append(listener)

    def _remove():
        if listener in listeners:
            listeners.remove(listener)

    return _remove


def _safe_call(listener, arg):
    try:
        listener(arg)
    except Exception as e:
        logger.error(f"Listener {listener!r} failed: {e}", exc_info=True)
