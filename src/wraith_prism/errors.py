"""Exception types raised by the protocol, transport and session layers.

Each error also derives from the built-in exception that describes the
same failure (``ValueError`` for bad input, ``ConnectionError`` for a
missing device, ``IOError`` for a failed transfer), so callers that only
know the built-ins still catch them.
"""

from __future__ import annotations


class WraithError(Exception):
    """Base class for all Wraith Prism errors."""


class InvalidParameter(WraithError, ValueError):
    """A value is out of range or names an unknown channel or mode."""


class DeviceNotFound(WraithError, ConnectionError):
    """No matching HID device could be enumerated or opened."""


class WriteFailure(WraithError, IOError):
    """The command frame could not be written in full."""


class ReadFailure(WraithError, IOError):
    """The reply could not be read from the device."""


class ShortReply(WraithError, IOError):
    """The device replied with the wrong number of bytes."""

    def __init__(self, length: int, expected: int) -> None:
        super().__init__(
            f"Expected a {expected} byte reply, got {length} bytes"
        )
        self.length = length
        self.expected = expected
