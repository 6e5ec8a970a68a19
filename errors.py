"""Exceptions raised by the monitor."""


class MonitorError(Exception):
    """Base class for monitor errors."""


class ValidationError(MonitorError, ValueError):
    """Rejected user input, e.g. an empty endpoint address."""


class TransportError(MonitorError):
    """The device could not be reached."""


class DecodeError(MonitorError):
    """The device answered with something that is not a valid reading."""
