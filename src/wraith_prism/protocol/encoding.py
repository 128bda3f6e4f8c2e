"""Numeric encodings: mirage frequencies and animation speed levels.

Mirage frequency encoding
-------------------------

The firmware expects each mirage rate as three bytes
``(divisor, fraction, integer)``::

    v  = 1500000 / hz                  (single precision)
    m  = trunc(v / 256)
    r  = v / (m + 0.75)                (single precision)
    r0 = trunc(r)
    r1 = trunc((r - r0) * 256)
    -> (min(m, 255), r1, r0)

The 0.75 offset and the byte order were worked out from captures of the
vendor tool. Both have to be kept exactly, as does the single-precision
rounding. ``hz == 0`` disables the colour and encodes as
``(0x00, 0xFF, 0x4A)``.
"""

from __future__ import annotations

import struct
from enum import Enum

from ..errors import InvalidParameter
from ..models.effects import Channel, Mode

MIRAGE_CLOCK = 1500000.0
MIRAGE_DISABLED = (0x00, 0xFF, 0x4A)

STATIC_SPEED = 0xFF
FIXED_ZERO_SPEED = 0x00
MIN_LEVEL = 1
MAX_LEVEL = 5


def _f32(value: float) -> float:
    """Round a double to the nearest IEEE single-precision value."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def hz_to_bytes(hz: int) -> tuple[int, int, int]:
    """Encode a mirage frequency as ``(divisor, fraction, integer)`` bytes.

    Args:
        hz: Frequency in Hz; 0 disables the channel.

    Raises:
        InvalidParameter: If hz is not a non-negative integer.
    """
    if isinstance(hz, bool) or not isinstance(hz, int):
        raise InvalidParameter(f"Frequency must be an integer, got {hz!r}")
    if hz < 0:
        raise InvalidParameter(f"Frequency must not be negative, got {hz}")
    if hz == 0:
        return MIRAGE_DISABLED

    v = _f32(MIRAGE_CLOCK / float(hz))
    m = int(v / 256.0)
    # r uses the unclamped divisor; only the emitted byte saturates
    r = _f32(v / (float(m) + 0.75))
    r0 = int(r)
    r1 = int(_f32(r - float(r0)) * 256.0)
    return (min(m, 255), r1 & 0xFF, r0 & 0xFF)


class SpeedTable(Enum):
    """How a mode turns a 1-5 speed level into the device speed byte."""

    STATIC = "static"
    FIXED_ZERO = "fixed-zero"
    BREATH = "breath"
    COLOUR_CYCLE = "colour-cycle"
    RAINBOW = "rainbow"
    CHASE = "chase"
    SWIRL = "swirl"

    @property
    def levels(self) -> tuple[int, ...] | None:
        """The five speed bytes for levels 1-5, or None if levels are ignored."""
        return SPEED_LEVELS.get(self)


SPEED_LEVELS: dict[SpeedTable, tuple[int, ...]] = {
    SpeedTable.BREATH: (0x3C, 0x37, 0x31, 0x2C, 0x26),
    SpeedTable.COLOUR_CYCLE: (0x96, 0x8C, 0x80, 0x6E, 0x68),
    SpeedTable.RAINBOW: (0x72, 0x68, 0x64, 0x62, 0x61),
    SpeedTable.CHASE: (0x77, 0x74, 0x6E, 0x6B, 0x67),
    SpeedTable.SWIRL: (0x77, 0x74, 0x6E, 0x6B, 0x67),
}

# Speed strategy for each logo/fan effect mode
MODE_SPEED_TABLES: dict[Mode, SpeedTable] = {
    Mode.STATIC: SpeedTable.STATIC,
    Mode.COLOUR_CYCLE: SpeedTable.COLOUR_CYCLE,
    Mode.BREATH: SpeedTable.BREATH,
}

# Firmware mode and speed strategy for each ring channel
RING_EFFECTS: dict[Channel, tuple[Mode, SpeedTable]] = {
    Channel.RING_STATIC: (Mode.RING_DEFAULT, SpeedTable.STATIC),
    Channel.RING_COLOUR_CYCLE: (Mode.RING_DEFAULT, SpeedTable.COLOUR_CYCLE),
    Channel.RING_BREATH: (Mode.BREATH, SpeedTable.BREATH),
    Channel.RING_RAINBOW: (Mode.RING_RAINBOW, SpeedTable.RAINBOW),
    Channel.RING_BOUNCE: (Mode.RING_DEFAULT, SpeedTable.FIXED_ZERO),
    Channel.RING_CHASE: (Mode.RING_CHASE, SpeedTable.CHASE),
    Channel.RING_SWIRL: (Mode.RING_SWIRL, SpeedTable.SWIRL),
    Channel.RING_MORSE: (Mode.RING_RAINBOW, SpeedTable.FIXED_ZERO),
}


def lookup_speed(table: SpeedTable | Mode, level: int | None = None) -> int:
    """Return the device speed byte for a speed level.

    Args:
        table: A speed table, or a logo/fan mode whose table should be used.
        level: Speed level 1 (slowest) to 5 (fastest). Ignored by the
            static and fixed-zero strategies.

    Raises:
        InvalidParameter: If the level is outside 1-5 for a table lookup.
    """
    if isinstance(table, Mode):
        table = speed_table_for(table)
    if table is SpeedTable.STATIC:
        return STATIC_SPEED
    if table is SpeedTable.FIXED_ZERO:
        return FIXED_ZERO_SPEED
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidParameter(f"Speed level must be an integer, got {level!r}")
    if not MIN_LEVEL <= level <= MAX_LEVEL:
        raise InvalidParameter(
            f"Speed level must be {MIN_LEVEL}-{MAX_LEVEL}, got {level}"
        )
    return table.levels[level - 1]


def speed_table_for(mode: Mode) -> SpeedTable:
    """Return the speed strategy for a logo/fan effect mode."""
    try:
        return MODE_SPEED_TABLES[mode]
    except KeyError:
        raise InvalidParameter(
            f"Mode {mode!r} is not a logo/fan effect. "
            f"Valid: {[m.name.lower() for m in MODE_SPEED_TABLES]}"
        ) from None


def ring_effect_for(channel: Channel) -> tuple[Mode, SpeedTable]:
    """Return the firmware mode and speed strategy of a ring channel."""
    try:
        return RING_EFFECTS[channel]
    except KeyError:
        raise InvalidParameter(
            f"Channel {channel!r} has no ring effect"
        ) from None
