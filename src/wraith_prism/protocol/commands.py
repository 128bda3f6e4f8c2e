"""Opcodes and builders for the six Wraith Prism command frames.

Every builder validates its arguments first and raises
:class:`~wraith_prism.errors.InvalidParameter` before any byte is
written, so a rejected command is never partially encoded.
"""

from __future__ import annotations

from enum import IntEnum

from ..errors import InvalidParameter
from ..models.effects import (
    Channel,
    ChannelMap,
    EffectParameters,
    MirageSettings,
    Mode,
)
from .encoding import hz_to_bytes
from .framing import new_frame, put

MAX_QUERY_CHANNEL = 0x0F

# Effect update
OFF_EFFECT_CHANNEL = 0x05
OFF_EFFECT_SPEED = 0x06
OFF_EFFECT_FLAGS = 0x07
OFF_EFFECT_MODE = 0x08
OFF_EFFECT_MARKER = 0x09
OFF_EFFECT_BRIGHTNESS = 0x0A
OFF_EFFECT_COLOUR1 = 0x0B   # 3 bytes
OFF_EFFECT_COLOUR2 = 0x0E   # 3 bytes

# Channel map
OFF_MAP_LOGO = 0x09
OFF_MAP_FAN = 0x0A
OFF_MAP_RING = 0x0B         # 15 bytes

# Mirage: (select index offset, encoded rate offset) per slot
MIRAGE_SLOTS = ((0x05, 0x06), (0x09, 0x0A), (0x0D, 0x0E), (0x11, 0x12))


class Command(IntEnum):
    """Two-byte opcodes, high byte first."""

    ENABLE = 0x4180
    QUERY_CHANNEL = 0x4021
    APPLY = 0x5128
    EFFECT_UPDATE = 0x512C
    MIRAGE = 0x5171
    CHANNEL_MAP = 0x51A0

    @property
    def opcode(self) -> int:
        return self.value >> 8

    @property
    def subcode(self) -> int:
        return self.value & 0xFF


def _frame(command: Command, fill: int = 0x00) -> bytearray:
    return new_frame(command.opcode, command.subcode, fill)


def build_enable() -> bytes:
    """Build the Enable command that wakes the lighting controller."""
    return bytes(_frame(Command.ENABLE))


def build_apply() -> bytes:
    """Build the Apply command that commits every setting sent so far."""
    frame = _frame(Command.APPLY)
    frame[5] = 0xE0
    return bytes(frame)


def build_effect_update(
    channel: Channel, mode: Mode, params: EffectParameters
) -> bytes:
    """Build an effect update for one channel.

    Unlike the other frames this one starts out filled with 0xFF; only
    the offsets below are overwritten::

        03: 0x01   04: 0x00
        05: channel  06: speed  07: flags  08: mode  09: 0xFF
        0A: brightness  0B-0D: colour 1 (RGB)  0E-10: colour 2 (RGB)

    Args:
        channel: Target channel (logo, fan or a ring channel).
        mode: Firmware animation mode.
        params: Speed byte, flags, brightness and colours.
    """
    channel = _check_enum(Channel, channel, "channel")
    mode = _check_enum(Mode, mode, "mode")
    if channel is Channel.OFF:
        raise InvalidParameter("Cannot program an effect on the 'off' channel")

    frame = _frame(Command.EFFECT_UPDATE, fill=0xFF)
    frame[3] = 0x01
    frame[4] = 0x00
    frame[OFF_EFFECT_CHANNEL] = channel
    frame[OFF_EFFECT_SPEED] = params.speed
    frame[OFF_EFFECT_FLAGS] = params.flags
    frame[OFF_EFFECT_MODE] = mode
    frame[OFF_EFFECT_MARKER] = 0xFF
    frame[OFF_EFFECT_BRIGHTNESS] = params.brightness
    put(frame, OFF_EFFECT_COLOUR1, bytes(params.colour))
    put(frame, OFF_EFFECT_COLOUR2, bytes(params.colour2))
    return bytes(frame)


def build_channel_map(channel_map: ChannelMap) -> bytes:
    """Build the channel map assigning animations to LED segments."""
    frame = _frame(Command.CHANNEL_MAP)
    frame[3] = 0x01
    frame[6] = 0x03
    frame[OFF_MAP_LOGO] = channel_map.logo
    frame[OFF_MAP_FAN] = channel_map.fan
    put(frame, OFF_MAP_RING, channel_map.ring)
    return bytes(frame)


def build_mirage(red_hz: int, green_hz: int, blue_hz: int) -> bytes:
    """Build the mirage (per-colour blink rate) command.

    The first of the four slots is always disabled; the remaining three
    carry the red, green and blue rates.
    """
    settings = MirageSettings(red_hz, green_hz, blue_hz)
    rates = (0, settings.red_hz, settings.green_hz, settings.blue_hz)

    frame = _frame(Command.MIRAGE)
    for index, ((select_off, rate_off), hz) in enumerate(
        zip(MIRAGE_SLOTS, rates), start=1
    ):
        frame[select_off] = index
        put(frame, rate_off, hz_to_bytes(hz))
    return bytes(frame)


def build_query_channel(channel: int) -> bytes:
    """Build a read-only query of one channel's stored state.

    Args:
        channel: Raw channel id 0x00-0x0F.
    """
    if isinstance(channel, bool) or not isinstance(channel, int):
        raise InvalidParameter(f"Channel id must be an integer, got {channel!r}")
    if not 0 <= channel <= MAX_QUERY_CHANNEL:
        raise InvalidParameter(
            f"Channel id must be 0-{MAX_QUERY_CHANNEL}, got {channel}"
        )
    frame = _frame(Command.QUERY_CHANNEL)
    frame[3] = channel
    return bytes(frame)


def _check_enum(enum_cls, value, name: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidParameter(f"Unknown {name} {value!r}") from None
