"""Holder for the address of the monitored device."""

import logging
from typing import Callable, List

from constants import DEFAULT_DEVICE_HOST, DEFAULT_DEVICE_PORT
from errors import ValidationError
from models import Endpoint

logger = logging.getLogger(__name__)

EndpointListener = Callable[[Endpoint], None]


class EndpointStore:
    """Current device endpoint. Replacement is the only mutation."""

    def __init__(self, host: str = DEFAULT_DEVICE_HOST, port: int = DEFAULT_DEVICE_PORT):
        if not host or not host.strip():
            raise ValidationError("Default endpoint host must not be empty")
        self._endpoint = Endpoint(host=host, port=port)
        self._listeners: List[EndpointListener] = []

    @property
    def port(self) -> int:
        return self._endpoint.port

    def get(self) -> Endpoint:
        return self._endpoint

    def set(self, candidate: str) -> Endpoint:
        """Replace the endpoint host and notify subscribers."""
        if candidate is None or not candidate.strip():
            raise ValidationError("Endpoint address must not be empty")

        self._endpoint = Endpoint(host=candidate, port=self._endpoint.port)
        logger.info(f"Endpoint changed to {self._endpoint}")

        for listener in list(self._listeners):
            listener(self._endpoint)
        return self._endpoint

    def subscribe(self, listener: EndpointListener) -> Callable[[], None]:
        """Register a change listener, returns a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe


class CandidateInput:
    """Text buffer behind the "change IP" prompt."""

    def __init__(self, store: EndpointStore):
        self.store = store
        self.text = ""

    def update(self, text: str):
        self.text = text

    def submit(self) -> Endpoint:
        """
        Apply the buffered text to the store.

        The buffer is cleared on success only, a rejected address stays in
        place so it can be corrected.
        """
        endpoint = self.store.set(self.text)
        self.text = ""
        return endpoint

    def cancel(self):
        self.text = ""
