"""Fixed-size command frames and replies for the Wraith Prism HID interface.

Command layout::

    +-----------+-----------------+--------------------------------------+
    | Report ID |     Opcode      |               Payload                |
    | 1 byte    | 2 bytes         | 62 bytes, zero or 0xFF padded        |
    +-----------+-----------------+--------------------------------------+

- Report ID: always 0x00 (the device uses unnumbered reports)
- Opcode: bytes 1-2 select the device operation
- Payload: opcode-specific; reserved bytes are still transmitted, so the
  padding value matters to the firmware

Every write is answered by a 64-byte reply (no report ID).
"""

from __future__ import annotations

from dataclasses import dataclass

COMMAND_SIZE = 65
REPLY_SIZE = 64
REPORT_ID = 0x00
BYTES_PER_LINE = 8


def new_frame(opcode: int, subcode: int, fill: int = 0x00) -> bytearray:
    """Return a blank 65-byte frame with the opcode in bytes 1-2.

    Args:
        opcode: First opcode byte (offset 1).
        subcode: Second opcode byte (offset 2).
        fill: Value for every byte that the builder does not set.
    """
    frame = bytearray([fill]) * COMMAND_SIZE
    frame[0] = REPORT_ID
    frame[1] = opcode
    frame[2] = subcode
    return frame


def put(frame: bytearray, offset: int, values) -> None:
    """Copy ``values`` into ``frame`` starting at ``offset``."""
    values = bytes(values)
    frame[offset : offset + len(values)] = values


def hex_dump(data: bytes) -> str:
    """Format bytes as ``0x..`` values, eight per line."""
    lines = []
    for i in range(0, len(data), BYTES_PER_LINE):
        chunk = data[i : i + BYTES_PER_LINE]
        lines.append(", ".join(f"0x{b:02x}" for b in chunk))
    return "\n".join(lines)


@dataclass
class Reply:
    """A raw reply read back from the device."""

    data: bytes

    @property
    def opcode(self) -> int:
        return self.data[0] if self.data else 0

    @property
    def subcode(self) -> int:
        return self.data[1] if len(self.data) > 1 else 0

    @property
    def payload(self) -> bytes:
        return self.data[2:]

    def dump(self) -> str:
        return hex_dump(self.data)

    def __repr__(self) -> str:
        return (
            f"Reply(opcode=0x{self.opcode:02X}, subcode=0x{self.subcode:02X}, "
            f"length={len(self.data)})"
        )
