"""Shared fixtures: an in-memory stand-in for the cooler's HID interface."""

from __future__ import annotations

import pytest

from wraith_prism.errors import WriteFailure
from wraith_prism.protocol.framing import REPLY_SIZE
from wraith_prism.transport.hid_connection import HIDConnection


class FakeConnection(HIDConnection):
    """Records every frame written and answers with a 64-byte reply.

    ``fail_at`` makes the write with that index (0 = Enable) fail;
    ``fail_from`` makes that write and every later one fail.
    """

    def __init__(
        self,
        fail_at: int | None = None,
        reply: bytes | None = None,
        fail_from: int | None = None,
    ):
        super().__init__()
        self.frames: list[bytes] = []
        self.fail_at = fail_at
        self.fail_from = fail_from
        self.reply = reply if reply is not None else bytes(REPLY_SIZE)
        self.open_count = 0
        self.close_count = 0

    def open(self):
        self.open_count += 1
        self._connected = True
        return self.device_info

    def close(self):
        self.close_count += 1
        self._connected = False

    def write(self, data: bytes) -> int:
        self.frames.append(bytes(data))
        if self.fail_at is not None and len(self.frames) - 1 == self.fail_at:
            raise WriteFailure("Device write failed")
        if self.fail_from is not None and len(self.frames) - 1 >= self.fail_from:
            raise WriteFailure("Device write failed")
        return len(data)

    def read(self) -> bytes:
        return self.reply


@pytest.fixture
def fake_connection():
    return FakeConnection()
