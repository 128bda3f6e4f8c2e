"""Reply parsing for device messages.

The reply layout is only partly understood. Replies are passed
through as raw bytes with the echoed opcode split out.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import ShortReply
from .framing import REPLY_SIZE, Reply, hex_dump


@dataclass
class ChannelState:
    """Raw stored state of one channel, as returned by a channel query."""

    channel: int
    raw: bytes

    def to_dict(self) -> dict:
        return {
            "channel": self.channel,
            "raw_hex": self.raw.hex(" ") if self.raw else "",
            "raw_length": len(self.raw),
        }

    def dump(self) -> str:
        return f"Channel 0x{self.channel:02x}:\n{hex_dump(self.raw)}"

    def __repr__(self) -> str:
        return f"ChannelState(channel=0x{self.channel:02X}, raw_len={len(self.raw)})"


def parse_channel_state(channel: int, reply: Reply) -> ChannelState:
    """Wrap a channel-query reply."""
    if len(reply.data) != REPLY_SIZE:
        raise ShortReply(len(reply.data), REPLY_SIZE)
    return ChannelState(channel=channel, raw=bytes(reply.data))
